# app/core/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Firebase service account json (local path)
    FIREBASE_CREDENTIALS: str = "app/core/firebase_key.json"

    # Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # Uploaded profile images and transient report files
    UPLOAD_DIR: str = "uploads"
    MAX_REPORT_BYTES: int = 5 * 1024 * 1024
    MAX_PROFILE_IMAGE_BYTES: int = 2 * 1024 * 1024

    AI_DEBUG_MODE: bool = True

    # If you want to read from a .env file, keep this:
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
