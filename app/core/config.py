from pydantic import SecretStr
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # App Config
    APP_NAME: str = "Quizz AI InfoSec Quiz Generator"
    APP_VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"  # "development" or "production"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # LLM Config
    LLM_PROVIDER: str = "openai"  # "openai" (any OpenAI-compatible endpoint) or "groq"

    # OpenAI-compatible API (defaults to Gemini's compatibility endpoint)
    LLM_API_KEY: Optional[SecretStr] = None
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    MODEL_NAME: str = "gemini-1.5-pro-latest"

    # Groq API
    GROQ_API_KEY: Optional[SecretStr] = None
    GROQ_MODEL: str = "llama-3.1-8b-instant"

    # Generation
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2048
    LLM_TIMEOUT: int = 300  # seconds, generation may take up to five minutes

    # Uploads
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024
    MAX_DOCUMENT_CHARS: int = 60000

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
