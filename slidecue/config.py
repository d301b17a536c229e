"""Application configuration. Loads from env vars."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Recognizer: language tag handed to the browser recognizer
    RECOGNITION_LANG: str = "en-US"

    # Auto-restart ceiling: consecutive restarts with no recognized text in between. 0 = unbounded.
    AUTO_RESTART_MAX_ATTEMPTS: int = 20

    # Transcript views
    ROLLING_WINDOW_MS: int = 60000  # rolling buffer: last 60 s of segments
    MERGE_THRESHOLD_MS: int = 3000  # fragments on the same slide closer than this are merged

    # Relay: recognizer events buffered per WebSocket before the consumer drains them
    EVENT_QUEUE_MAXSIZE: int = 1000

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path = also log to file (empty = console only).
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
