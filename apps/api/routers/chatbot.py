"""Chatbot and symptom analysis endpoints"""
from fastapi import APIRouter, Depends, Request
from typing import List
from datetime import datetime
import logging
import uuid

from slowapi import Limiter
from slowapi.util import get_remote_address

from dependencies import get_storage, get_assistant, read_or_mock
from exceptions import StorageError, UpstreamServiceFailed, ValidationFailed
from schemas import (
    ChatbotMessageRequest, ChatbotMessageResponse, ChatMessageRead,
    SymptomAnalysisRequest, SymptomAnalysisResponse,
)
from services import mock_data
from services.ai_assistant import AIAssistant, fallback_analysis, fallback_reply
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chatbot", tags=["Chatbot"])
limiter = Limiter(key_func=get_remote_address)


async def save_message_quietly(storage: HospitalStorage, session_id: str, message: str, is_user: bool) -> None:
    """Persisting chat history must never block the reply"""
    try:
        await storage.create_chat_message(session_id, message, is_user)
    except (StorageError, ValidationFailed) as e:
        who = "user message" if is_user else "assistant reply"
        logger.warning(f"Error saving {who} for session {session_id}, continuing: {e}")


@router.post("/message", response_model=ChatbotMessageResponse)
@limiter.limit("20/minute")
async def send_message(
    request: Request,
    chat_request: ChatbotMessageRequest,
    storage: HospitalStorage = Depends(get_storage),
    assistant: AIAssistant = Depends(get_assistant),
):
    """Answer a chatbot message, falling back to canned replies when the AI service fails"""
    session_id = chat_request.session_id or str(uuid.uuid4())
    await save_message_quietly(storage, session_id, chat_request.message, is_user=True)

    try:
        reply = await assistant.process_message(chat_request.message)
    except UpstreamServiceFailed as e:
        logger.warning(f"Error processing chatbot message, using fallback: {e}")
        reply = {"message": fallback_reply(chat_request.message), "timestamp": datetime.utcnow()}

    await save_message_quietly(storage, session_id, reply["message"], is_user=False)
    return ChatbotMessageResponse(message=reply["message"], timestamp=reply["timestamp"], session_id=session_id)


@router.get("/messages/{session_id}", response_model=List[ChatMessageRead])
async def get_chat_messages(session_id: str, storage: HospitalStorage = Depends(get_storage)):
    """Conversation history for one session, oldest first"""
    return await read_or_mock(
        f"chat messages for session {session_id}",
        lambda: storage.get_chat_messages(session_id),
        lambda: mock_data.mock_chat_messages(session_id),
    )


@router.post("/analyze-symptoms", response_model=SymptomAnalysisResponse)
@limiter.limit("20/minute")
async def analyze_symptoms(
    request: Request,
    analysis_request: SymptomAnalysisRequest,
    assistant: AIAssistant = Depends(get_assistant),
):
    try:
        return await assistant.analyze_symptoms(analysis_request.symptoms)
    except UpstreamServiceFailed as e:
        logger.warning(f"Error analyzing symptoms, using fallback: {e}")
        return fallback_analysis(analysis_request.symptoms)
