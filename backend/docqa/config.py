from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Doc QA API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["*"]
    static_dir: str = "public"
    port: int = 3001

    # Hugging Face Inference
    huggingfacehub_api_key: str = ""
    hf_base_url: str = "https://router.huggingface.co"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    chat_model: str = "HuggingFaceH4/zephyr-7b-beta"
    chat_max_tokens: int = 512
    chat_temperature: float = 0.2
    provider_timeout_seconds: float = 60.0

    # Chunking & retrieval (character counts)
    chunk_size: int = 2000
    chunk_overlap: int = 300
    retrieval_top_k: int = 4
    embedding_batch_size: int = 32

    # Memory bounds for the in-memory index
    max_upload_size_mb: int = 20
    max_chunks: int = 2000

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # Indexing / answering pipeline
    log_level_huggingface: str = "INFO"      # Hugging Face clients

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
