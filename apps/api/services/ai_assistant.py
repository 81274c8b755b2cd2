"""
AI assistant client for the chatbot and symptom analysis.

Talks to an OpenAI-compatible chat-completions endpoint. Any failure is
raised as ``UpstreamServiceFailed``; the keyword replies below are what the
chatbot falls back to.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import httpx

from config import Settings
from exceptions import UpstreamServiceFailed

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = (
    "You are a hospital front-desk assistant. Answer briefly and clearly. "
    "Do not diagnose or prescribe; direct emergencies to emergency services."
)

SYMPTOM_SYSTEM_PROMPT = (
    "You triage patient-reported symptoms for hospital staff. Reply with a JSON object "
    'with keys "diagnosis" (string), "recommendations" (array of strings) and '
    '"urgency" (one of "emergency", "urgent", "non_urgent").'
)

# Keyword replies used when the AI service cannot answer; checked in order
FALLBACK_REPLIES = [
    ("emergency", "For emergencies, please call 911 or visit the nearest emergency room."),
    ("appointment", "To book an appointment, please visit the appointments section."),
    ("doctor", "Our doctors are available. Check the doctors section for details."),
    ("bed", "Bed availability is shown on the beds page and updates in real time."),
    ("donor", "The organ donor registry can be searched by blood type and organ."),
    ("patient", "Patient records are available in the patients section."),
    ("hello", "Hello! How can I assist you with medical information today?"),
    ("hi", "Hello! How can I assist you with medical information today?"),
]
DEFAULT_REPLY = (
    "I understand you're asking about medical services. "
    "Please contact our staff for detailed medical advice."
)

RED_FLAGS = [
    "chest pain", "can't breathe", "cannot breathe", "difficulty breathing",
    "unconscious", "seizure", "severe bleeding", "stroke", "heart attack",
]

FALLBACK_ANALYSIS = {
    "diagnosis": "Please consult with a healthcare professional for accurate diagnosis",
    "recommendations": ["Rest well", "Stay hydrated", "Monitor symptoms"],
    "urgency": "non_urgent",
}

URGENCY_LEVELS = {"emergency", "urgent", "non_urgent"}


def check_red_flags(text: str) -> bool:
    """Check if text mentions any red flag symptom"""
    text_lower = text.lower()
    return any(flag in text_lower for flag in RED_FLAGS)


def fallback_reply(message: str) -> str:
    words = set(message.lower().replace("?", " ").replace("!", " ").replace(",", " ").split())
    if check_red_flags(message):
        return FALLBACK_REPLIES[0][1]
    for keyword, reply in FALLBACK_REPLIES:
        if keyword in words:
            return reply
    return DEFAULT_REPLY


def fallback_analysis(symptoms: str) -> Dict[str, Any]:
    if check_red_flags(symptoms):
        return {
            "diagnosis": "Symptoms may indicate a medical emergency",
            "recommendations": ["Call emergency services now", "Do not drive yourself to hospital"],
            "urgency": "emergency",
        }
    return dict(FALLBACK_ANALYSIS, recommendations=list(FALLBACK_ANALYSIS["recommendations"]))


class AIAssistant:
    """Thin async client over the completion endpoint"""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.ai_api_key)

    async def _complete(self, messages: List[Dict[str, str]], json_mode: bool = False) -> str:
        if not self.is_configured:
            raise UpstreamServiceFailed("AI service is not configured")

        body: Dict[str, Any] = {"model": self.settings.ai_model, "messages": messages}
        if json_mode:
            body["response_format"] = {"type": "json_object"}
        headers = {"Authorization": f"Bearer {self.settings.ai_api_key}"}
        url = f"{self.settings.ai_base_url.rstrip('/')}/chat/completions"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=headers, timeout=self.settings.ai_timeout)
            else:
                async with httpx.AsyncClient(timeout=self.settings.ai_timeout) as client:
                    response = await client.post(url, json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except httpx.TimeoutException as e:
            logger.error("Timeout while calling AI service")
            raise UpstreamServiceFailed("AI service timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"AI service returned HTTP {e.response.status_code}")
            raise UpstreamServiceFailed("AI service returned an error") from e
        except httpx.HTTPError as e:
            logger.error(f"Error calling AI service: {e}")
            raise UpstreamServiceFailed("AI service unreachable") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Malformed AI service response: {e}")
            raise UpstreamServiceFailed("AI service returned a malformed response") from e
        if not isinstance(content, str):
            logger.error(f"AI service returned non-text content: {type(content).__name__}")
            raise UpstreamServiceFailed("AI service returned a malformed response")
        return content

    async def process_message(self, text: str) -> Dict[str, Any]:
        content = await self._complete([
            {"role": "system", "content": CHAT_SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ])
        if not content or not content.strip():
            raise UpstreamServiceFailed("AI service returned an empty reply")
        return {"message": content.strip(), "timestamp": datetime.utcnow()}

    async def analyze_symptoms(self, symptoms: str) -> Dict[str, Any]:
        content = await self._complete(
            [
                {"role": "system", "content": SYMPTOM_SYSTEM_PROMPT},
                {"role": "user", "content": symptoms},
            ],
            json_mode=True,
        )
        try:
            analysis = json.loads(content)
            result = {
                "diagnosis": str(analysis["diagnosis"]),
                "recommendations": [str(r) for r in analysis.get("recommendations", [])],
                "urgency": analysis.get("urgency", "non_urgent"),
            }
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamServiceFailed("AI service returned an unreadable analysis") from e
        if not isinstance(result["urgency"], str) or result["urgency"] not in URGENCY_LEVELS:
            result["urgency"] = "emergency" if check_red_flags(symptoms) else "non_urgent"
        return result
