"""Configuration settings for the recommendations service"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    PROJECT_NAME: str = "Meal Recommendations"
    SERVICE_NAME: str = "recommendations"
    VERSION: str = "1.0.0"
    RECOMMENDATIONS_PORT: int = 8003

    # Database Settings
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "mealprep"
    DB_PASSWORD: str = "mealprep"
    DB_NAME: str = "mealprep"
    DB_SSLMODE: str = "disable"
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSLMODE}"
        )

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # "json" or "text"
    LOG_FILE: Optional[str] = None

    # Recommendation Settings
    DEFAULT_LIMIT: int = 10
    MAX_LIMIT: int = 50
    HISTORY_DEFAULT_LIMIT: int = 20
    HYBRID_ALPHA: float = 0.6  # Weight for the time score (1-alpha for preference score)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
