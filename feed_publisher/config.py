import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///feed.db"
DEFAULT_FEED_LIMIT = 20


def _env_flag(value):
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process configuration, handed to create_app() and kept on app.state."""

    broadcast_token: str = ""
    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # Return raw error text to clients on internal failures
    expose_errors: bool = False
    feed_limit: int = DEFAULT_FEED_LIMIT

    @classmethod
    def from_env(cls):
        load_dotenv()
        return cls(
            broadcast_token=os.getenv("BROADCAST_TOKEN", "").strip(),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            expose_errors=_env_flag(os.getenv("EXPOSE_ERRORS")),
            feed_limit=int(os.getenv("FEED_LIMIT", DEFAULT_FEED_LIMIT)),
        )
