# config.py
# Role: Runtime configuration for the finance API.
#       Reads environment variables (optionally from a local .env file)
#       into a single Settings object shared by the app factory and scripts.

"""
Configuration for the finance API.

Environment variables:
- DATABASE_URL        SQLAlchemy URL (default: SQLite file under ./database)
- JWT_SECRET          signing key for bearer tokens (required)
- JWT_EXPIRES_HOURS   token lifetime in hours (default 24)
- BCRYPT_ROUNDS       bcrypt cost factor (default 12)
- CORS_ALLOW_ORIGINS  comma-separated origins (default "*")
- LOG_LEVEL           root log level (default INFO)
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite location: <project_root>/database/finance.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "finance.db")
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DB_PATH}"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    jwt_secret: str
    database_url: str = DEFAULT_DATABASE_URL
    jwt_expires_hours: int = 24
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 12
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        A .env file in the working directory is loaded first; variables
        already present in the environment win.
        """
        load_dotenv()

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET environment variable is required")

        return cls(
            jwt_secret=jwt_secret,
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            jwt_expires_hours=int(os.getenv("JWT_EXPIRES_HOURS", "24")),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            cors_allow_origins=_split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return process-wide settings, read from the environment once."""
    return Settings.from_env()
