"""
Application settings.

Values come from environment variables; a .env file is picked up by walking
up from the working directory.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field

load_dotenv(find_dotenv())


class LLMSettings(BaseModel):
    """Rationale generator backend."""

    provider: str = Field(
        default="ollama",
        description="One of 'ollama', 'groq' or 'template' (no network)",
    )
    ollama_url: str = Field(default="http://127.0.0.1:11434", description="Local Ollama base URL")
    ollama_model: str = Field(default="llama3")
    groq_api_key: str = Field(default="", description="Bearer token for the Groq API")
    groq_model: str = Field(default="llama-3.1-8b-instant")
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class Settings(BaseModel):
    history_path: str = Field(
        default="data/analysis_history.json",
        description="JSON file holding past reports (relative to backend root)",
    )
    history_max_entries: int = Field(default=100, ge=1, description="Oldest reports dropped beyond this")
    max_upload_mb: int = Field(default=5, ge=1)
    log_level: str = Field(default="INFO")
    llm: LLMSettings = Field(default_factory=LLMSettings)


def load_settings_from_env() -> Settings:
    env = os.environ
    return Settings(
        history_path=env.get("PHARMAGUARD_HISTORY_PATH", "data/analysis_history.json"),
        history_max_entries=int(env.get("PHARMAGUARD_HISTORY_MAX", "100")),
        max_upload_mb=int(env.get("PHARMAGUARD_MAX_UPLOAD_MB", "5")),
        log_level=env.get("PHARMAGUARD_LOG_LEVEL", "INFO"),
        llm=LLMSettings(
            provider=env.get("PHARMAGUARD_LLM_PROVIDER", "ollama").lower(),
            ollama_url=env.get("OLLAMA_URL", "http://127.0.0.1:11434"),
            ollama_model=env.get("OLLAMA_MODEL", "llama3"),
            groq_api_key=env.get("GROQ_API_KEY", ""),
            groq_model=env.get("GROQ_MODEL", "llama-3.1-8b-instant"),
            timeout_seconds=float(env.get("PHARMAGUARD_LLM_TIMEOUT", "30.0")),
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return load_settings_from_env()
