# scenecut/settings.py
import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Scene Transition")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # model clients
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    USE_OLLAMA: bool = Field(default=False)
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="mistral:7b-instruct")

    # local host state
    DATA_DIR: str = Field(default="data")
    USER_NAME: str = Field(default="User")
    ACTIVE_CHARACTER: Optional[int] = 0
    SETTINGS_SAVE_DELAY: float = Field(default=1.0)
    CHAT_HISTORY_LIMIT: int = Field(default=20)

    # image backend (background regeneration)
    IMAGE_SOURCE: Optional[str] = None
    IMAGE_TRIGGER_URL: Optional[str] = None
    IMAGE_TRIGGER_TIMEOUT: float = Field(default=30.0)

    # read root-level .env.dev
    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


settings = Settings()
