from contextlib import asynccontextmanager
import asyncio
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging

# Load environment variables from .env file FIRST
load_dotenv()

from sqlalchemy.exc import SQLAlchemyError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import Settings
from database import configure_storage, create_db_and_tables, dispose_storage
from exceptions import MediConnectError, StorageError
from middleware.request_logger import RequestLoggingMiddleware
from routers import alerts, appointments, beds, chatbot, dashboard, doctors, live, organ_donors, patients, wards
from services.ai_assistant import AIAssistant
from services.live_updates import LiveUpdateHub
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


async def handle_app_error(request: Request, exc: MediConnectError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = configure_storage(settings)
        if settings.create_tables:
            try:
                await create_db_and_tables(storage)
            except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
                # Reads fall back to mock data until the database comes back
                logger.error(f"Could not create tables, database unreachable: {e}")
        app.state.storage = HospitalStorage(storage)
        app.state.live_updates = LiveUpdateHub()
        app.state.assistant = AIAssistant(settings)
        yield
        await dispose_storage(storage)

    app = FastAPI(
        title="MediConnect API",
        description="Hospital administration API with live updates and mock-data fallback",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # Rate limiting for the AI-backed chatbot endpoints
    app.state.limiter = chatbot.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(MediConnectError, handle_app_error)

    origins = [
        "http://localhost:5173",  # Development frontend
        "http://localhost:5000",
        settings.frontend_url,
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "X-Requested-With", "Accept", "Origin"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(dashboard.router)
    app.include_router(doctors.router)
    app.include_router(patients.router)
    app.include_router(wards.router)
    app.include_router(beds.router)
    app.include_router(appointments.router)
    app.include_router(organ_donors.router)
    app.include_router(alerts.router)
    app.include_router(chatbot.router)
    app.include_router(live.router)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to MediConnect API"}

    @app.get("/health")
    async def health_check(request: Request):
        storage = request.app.state.storage
        if not storage.is_available:
            database = "unavailable"
        elif await storage.ping():
            database = "connected"
        else:
            database = "unreachable"
        return {"status": "healthy", "database": database}

    return app


_settings = Settings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)
