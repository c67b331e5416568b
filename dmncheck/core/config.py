"""Application configuration and analysis limits."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "DMN Table Checker"
    debug: bool = False
    log_level: str = "INFO"
    max_upload_bytes: int = 20 * 1024 * 1024

    # Analysis
    max_rules_for_overlap: int = 500
    description_element_kinds: list[str] = ["decision", "inputData", "businessKnowledgeModel"]
    check_definitions_description: bool = True
    min_decision_name_length: int = 5

    # Batch processing
    dmn_extension: str = ".dmn"
    max_workers: int = 4
    document_timeout_seconds: float | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
