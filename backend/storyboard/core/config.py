import os
from typing import List, Optional

from pydantic_settings import BaseSettings

from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Storyboard Maker API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # For local dev sqlite is fine; production points DATABASE_URL at PostgreSQL
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL", "sqlite:///./storyboard.db"
    )

    JWT_SECRET: str = "storyboard-dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    # Script generation (empty key -> mock generator)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    SCRIPT_TIMEOUT_SECONDS: float = 60.0

    # Image generation (empty key -> mock generator)
    HF_API_KEY: str = ""
    HF_IMAGE_MODEL_URL: str = (
        "https://router.huggingface.co/hf-inference/models/"
        "stabilityai/stable-diffusion-xl-base-1.0"
    )
    IMAGE_TIMEOUT_SECONDS: float = 120.0
    IMAGE_MAX_CONCURRENCY: int = 0  # 0 = one task per missing scene

    API_RATE_LIMIT: str = "100 per 15 minutes"
    AI_RATE_LIMIT: str = "10 per hour"
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    CLIENT_URL: str = "*"

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    LOG_FORMAT: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CLIENT_URL.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
