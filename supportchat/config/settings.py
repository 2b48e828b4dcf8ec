"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Support Chat Relay"
    app_version: str = "1.0.0"
    debug: bool = True

    # LLM Provider settings
    ai_provider: str = "openai"  # "openai", "openrouter" or "sambanova"
    ai_model: Optional[str] = None  # uses provider default if not set
    max_tokens: int = 500

    openai_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    sambanova_api_key: Optional[str] = None

    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    sambanova_base_url: str = "https://api.sambanova.ai/v1"

    # Site / prompt parameters
    site_url: str = "https://example.com"
    site_name: Optional[str] = None  # "<project_name> Assistant" if not set
    project_name: str = "BTAssetHub"
    project_type: str = "digital asset management"

    # Sessions
    session_cookie_name: str = "supportSession"
    session_ttl_minutes: int = 30
    session_sweep_interval_seconds: int = 300

    # Simulated streaming
    simulated_chunk_delay_ms: int = 50
    simulated_words_per_chunk: int = 10

    # Knowledge base storage
    local_storage_path: str = "./data"
    knowledge_base_file: str = "knowledge_base.md"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/supportchat.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def resolved_site_name(self) -> str:
        return self.site_name or f"{self.project_name} Assistant"

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the API key configured for the given provider name."""
        return {
            "openai": self.openai_api_key,
            "openrouter": self.openrouter_api_key,
            "sambanova": self.sambanova_api_key,
        }.get(provider)


settings = Settings()
