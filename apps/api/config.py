"""Runtime configuration for the MediConnect API, read from the environment."""
import os
from typing import Optional

from pydantic import BaseModel


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    """Application settings"""
    # Database
    database_url: Optional[str] = None
    db_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: float = 5.0
    db_pool_recycle: int = 300
    create_tables: bool = True

    # HTTP
    frontend_url: str = "http://localhost:5173"
    log_level: str = "INFO"

    # AI assistant (OpenAI-compatible chat completions)
    ai_api_key: Optional[str] = None
    ai_base_url: str = "https://api.openai.com/v1"
    ai_model: str = "gpt-4o-mini"
    ai_timeout: float = 15.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables"""
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            db_echo=_env_bool("DB_ECHO", "false"),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
            db_pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "5")),
            db_pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "300")),
            create_tables=_env_bool("CREATE_TABLES", "true"),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            ai_api_key=os.getenv("AI_API_KEY") or os.getenv("OPENAI_API_KEY") or None,
            ai_base_url=os.getenv("AI_BASE_URL", "https://api.openai.com/v1"),
            ai_model=os.getenv("AI_MODEL", "gpt-4o-mini"),
            ai_timeout=float(os.getenv("AI_TIMEOUT", "15")),
        )
