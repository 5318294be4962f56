"""
Application settings loaded from the environment.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./data.db"
    database_echo: bool = False

    # Sessions
    session_cookie_name: str = "session_id"
    session_cookie_max_age: int = 24 * 60 * 60

    # Dump utility
    dump_dir: str = "dump"

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", cls.session_cookie_name),
            session_cookie_max_age=int(os.getenv("SESSION_COOKIE_MAX_AGE", cls.session_cookie_max_age)),
            dump_dir=os.getenv("DUMP_DIR", cls.dump_dir),
            environment=os.getenv("TALENTLEDGER_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
