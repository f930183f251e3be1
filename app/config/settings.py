import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    registry_base_url: str = "https://dados-abertos.apps.tcu.gov.br"
    registry_timeout_seconds: int = 60

    download_timeout_seconds: int = 30
    temp_dir: Path = Path(tempfile.gettempdir()) / "jurisprudence-artifacts"

    pdf_engine: str = "pdfplumber"
    pdf_max_chars: int = 0

    primary_provider: str = "gemini"
    gemini_api_keys: str = ""
    gemini_model_name: str = "gemini-1.5-flash"
    gemini_timeout_seconds: int = 60

    secondary_provider: str = "openai"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-3.5-turbo"
    openai_timeout_seconds: int = 30
    openai_max_tokens: int = 500
    openai_temperature: float = 0.7
    openai_compatible_base_url: str = ""

    generation_max_attempts: int = 0
    key_rotation_backoff_seconds: float = 2.0
    item_pacing_seconds: float = 1.0
    prompt_text_limit: int = 8000
    credential_rotation_scope: str = "run"

    default_max_candidates: int = 100
    default_max_results: int = 10

    @property
    def gemini_keys(self) -> list[str]:
        """Configured Gemini keys in rotation order."""
        return [key.strip() for key in self.gemini_api_keys.split(",") if key.strip()]
