from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Fleetledger Backend"
    ENV: str = "dev"

    # apps/backend/db.sqlite3 as an absolute path so the working directory does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "db.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"
    # Log every SQL statement through the sqlalchemy.engine logger
    DB_ECHO: bool = False

    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # text | json

    # Size of the "most profitable transactions" list in detailed reports
    TOP_TRANSACTION_LIMIT: int = 20

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="FLEETLEDGER_", case_sensitive=False)


settings = Settings()
