from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobforms.db"

    # CORS (comma-separated list of extra origins)
    allowed_origins: str = ""

    # External forms persistence API (used by FormsApiClient)
    forms_api_url: str = "http://localhost:3000/api/application-forms"
    forms_api_timeout_seconds: int = 15

    # Prescreen draft cache
    draft_key_prefix: str = "job-posting-prescreen"

    # App
    debug: bool = False


settings = Settings()
