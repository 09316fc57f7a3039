from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Database Configuration
    # Use SQLite by default for easy local development
    # Set db_type to "mysql" and configure mysql settings for production
    db_type: str = "sqlite"  # "sqlite" or "mysql"

    # SQLite settings
    sqlite_path: str = "circles.db"

    # MySQL settings (used when db_type="mysql")
    db_host: str = "localhost"
    db_port: int = 3306
    db_name: str = "circles"
    db_user: str = "root"
    db_password: str = ""

    # Application Settings
    secret_key: str = "change-me-in-production"
    access_token_expire_minutes: int = 60 * 24  # 24 hours
    api_port: int = 8000
    cors_origins: List[str] = ["*"]

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_api_key: str = ""
    ai_model: str = "google/gemini-2.5-flash"
    ai_timeout_seconds: float = 60.0

    @property
    def database_url(self) -> str:
        if self.db_type == "sqlite":
            return f"sqlite:///./{self.sqlite_path}"
        return f"mysql+pymysql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def ai_configured(self) -> bool:
        return bool(self.ai_api_key)

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
