from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = os.getenv("APP_NAME", "Studio Booking")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Studio Settings
    STUDIO_NAME: str = os.getenv("STUDIO_NAME", "Cílios de Luxo Studio")
    STUDIO_TIMEZONE: str = os.getenv("STUDIO_TIMEZONE", "America/Sao_Paulo")
    SLOT_STEP_MINUTES: int = int(os.getenv("SLOT_STEP_MINUTES", "30"))

    # MongoDB Settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "studio_booking_db")
    MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    # JWT Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your_secret_key_here")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Admin bootstrap, only used when no admin exists yet
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@ciliosdeluxo.com.br")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Vite/React frontend
        "http://localhost:5173",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
