"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Blueprint intelligence settings loaded from environment variables."""

    # Required
    anthropic_api_key: str = ""

    # Embedding
    blueprint_embedding_model: str = "all-MiniLM-L6-v2"

    # LLM
    blueprint_llm_provider: str = "anthropic"
    blueprint_llm_model: str = "claude-sonnet-4-5-20250929"

    # Storage
    blueprint_chroma_path: str = "./data/chroma"

    # Retrieval
    blueprint_match_threshold: float = 0.7
    blueprint_match_count: int = 5
    # Chat turns search a little wider than direct retrieval calls
    blueprint_chat_match_threshold: float = 0.65

    @property
    def chroma_path(self) -> Path:
        return Path(self.blueprint_chroma_path)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
