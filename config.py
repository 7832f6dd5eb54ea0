"""
Configuration module for the PromptForge generation service.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration class."""

    # API Keys
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "") or os.getenv("GOOGLE_API_KEY", "")
    FIREBASE_WEB_API_KEY: str = os.getenv("FIREBASE_WEB_API_KEY", "")

    # API Configuration
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    OLLAMA_HOST: str = os.getenv("OLLAMA_HOST", "http://localhost:11434")
    FIREBASE_LOOKUP_URL: str = "https://identitytoolkit.googleapis.com/v1/accounts:lookup"

    # Application Settings
    APP_TITLE: str = "PromptForge"
    USAGE_DB_PATH: str = os.getenv("USAGE_DB_PATH", "data/usage.db")

    # Generation limits
    DEFAULT_HISTORY_MESSAGES: int = 10
    DEFAULT_MAX_TOKENS: int = 512
    MAX_TOKENS_CEILING: int = 4096
    MAX_ATTACHMENT_CHARS: int = 10000
    CHARS_PER_TOKEN: int = 4
    USAGE_REPORT_DEFAULT_DAYS: int = 30

    # Timeouts (in seconds)
    PROVIDER_TIMEOUT: float = float(os.getenv("PROVIDER_TIMEOUT", "60"))
    AUTH_TIMEOUT: float = 10.0

    # Connection pool sizes
    MAX_PROVIDER_CONNECTIONS: int = 20

    # Returned with HTTP 200 when no provider produced text
    GENERATION_FALLBACK_MESSAGE: str = os.getenv(
        "GENERATION_FALLBACK_MESSAGE",
        "Lo siento, no pude generar una respuesta en este momento. "
        "Por favor, inténtalo de nuevo en unos segundos."
    )

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not cls.OPENAI_API_KEY:
            print("   WARNING: OPENAI_API_KEY not found in .env file")
            print("   OpenAI optimizers and the native fallback will not work.")

        if not cls.GEMINI_API_KEY:
            print("   WARNING: GEMINI_API_KEY not found in .env file")
            print("   Google optimizers will not work. Get a key from: https://aistudio.google.com/app/apikey")

        if not cls.FIREBASE_WEB_API_KEY:
            print("   WARNING: FIREBASE_WEB_API_KEY not found in .env file")
            print("   Bearer tokens cannot be verified: usage will not be recorded and admin routes will reject requests.")

Config.validate()
