"""Configuration management for PDF Notebook."""
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:5173,http://localhost:3000"
).split(",")

# Generation Configuration
GENERATION_ENDPOINT = os.getenv(
    "GENERATION_ENDPOINT",
    "https://openrouter.ai/api/v1/chat/completions"
)
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "mistralai/mistral-7b-instruct:free")
GENERATION_TEMPERATURE = 0.0
GENERATION_MAX_TOKENS = 400
GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "60"))  # seconds

# Chunking Configuration
CHUNK_MAX_CHARS = 900  # characters per passage

# Retrieval Configuration
RETRIEVAL_TOP_K = 4
RETRIEVAL_THRESHOLD = 0.4  # maximum accepted dissimilarity (0 = exact, 1 = unrelated)


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for the generation service, resolved once at startup."""
    api_key: Optional[str] = None
    endpoint: str = GENERATION_ENDPOINT
    model: str = GENERATION_MODEL
    temperature: float = GENERATION_TEMPERATURE
    max_tokens: int = GENERATION_MAX_TOKENS
    timeout: float = GENERATION_TIMEOUT

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Build settings from the values loaded at import time."""
        return cls(api_key=OPENROUTER_API_KEY)
