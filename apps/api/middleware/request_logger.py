"""Request logging middleware"""
import logging
import time
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("mediconnect.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per HTTP request with its status and latency"""

    skip_paths = ["/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"]

    async def dispatch(self, request: Request, call_next):
        if any(request.url.path.startswith(path) for path in self.skip_paths):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        activity = self._determine_activity_type(request.method, request.url.path)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms){f' [{activity}]' if activity else ''} "
            f"from {self._client_ip(request)}",
        )
        return response

    def _client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _determine_activity_type(self, method: str, path: str) -> Optional[str]:
        """Name the mutation a request performs, if any"""
        if method not in ("POST", "PATCH"):
            return None
        if path.startswith("/api/beds") and path.endswith("/status"):
            return "bed_status_update"
        elif path.startswith("/api/appointments"):
            return "appointment_book" if method == "POST" else "appointment_update"
        elif path.startswith("/api/organ-donors"):
            return "donor_register" if method == "POST" else "donor_update"
        elif path.startswith("/api/chatbot"):
            return "chat_message"
        return None
