from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./careers.db"

    # Auth cookie signing (override AUTH_SECRET_KEY outside local development)
    auth_secret_key: str = "dev-only-secret-change-me-before-deploying"
    auth_algorithm: str = "HS256"
    auth_token_expire_minutes: int = 60 * 24 * 7

    # CORS (comma-separated list of dashboard origins)
    allowed_origins: str = ""

    # Public careers page
    jobs_per_page: int = 20

    # Bulk job import
    import_max_rows: int = 5000
    import_max_file_bytes: int = 10 * 1024 * 1024
    import_fetch_timeout_seconds: int = 15
    import_prefer_source_description: bool = True  # False = always use the template

    # App
    debug: bool = False


settings = Settings()
