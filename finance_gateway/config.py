"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Local SQL store (used when no hosted backend is configured)
    database_url: str = "sqlite:///./finance.db"

    # Hosted row backend (PostgREST dialect)
    backend_url: str = ""
    backend_api_key: str = ""

    # Service
    service_name: str = "finance-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Bill image extraction (OpenAI-compatible chat completions)
    vision_api_url: str = "https://api.openai.com/v1/chat/completions"
    vision_api_key: str = ""
    vision_model: str = "gpt-4o-mini"

    # Domain defaults
    default_closing_day: int = 1
    default_due_day: int = 10
    default_debt_term_months: int = 12
    budget_warning_percent: int = 80
    bill_reminder_days_before: int = 3
    upcoming_window_days: int = 7

    @property
    def uses_hosted_backend(self) -> bool:
        return bool(self.backend_url)


settings = Settings()
