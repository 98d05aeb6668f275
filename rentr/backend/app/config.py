from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    RENTR_DB_URL: str = "sqlite+aiosqlite:///./rentr.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Minimal B2B Auth (API key) ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- Property matches ---
    MATCH_LIMIT_DEFAULT: int = 20
    MATCH_LIMIT_MAX: int = 200


settings = Settings()
