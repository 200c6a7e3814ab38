import os
from typing import Optional


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value else default


class Settings:
    PROJECT_NAME: str = "kanadrill"
    DEBUG: bool = os.environ.get("KANADRILL_DEBUG", "") == "1"
    LOG_DIR: str = os.environ.get("KANADRILL_LOG_DIR", "log")
    LOG_FILE: str = "kanadrill.log"
    DATA_DIR: str = os.environ.get("KANADRILL_DATA_DIR", "data")
    DATA_URL_PATH: str = "/data"
    FLASHCARD_SETS: tuple = ("hiragana", "katakana", "kanji")
    DEFAULT_FLASHCARD_LENGTH: int = 10
    DEFAULT_QUIZ_LENGTH: int = 10
    SESSION_TIMEOUT_MINUTES: int = 120
    RANDOM_SEED: Optional[int] = _env_int("KANADRILL_SEED")
    HOST: str = os.environ.get("HOST", "0.0.0.0")
    PORT: int = _env_int("PORT", 8000)
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
