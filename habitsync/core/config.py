"""
Application configuration and environment variables
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    """Parse an optional float setting; empty means unset"""
    if value is None or not value.strip():
        return None
    return float(value)


class Settings:
    """Application settings loaded from environment variables"""

    # Remote habit service (the client appends /api)
    API_URL: str = os.getenv("HABITSYNC_API_URL", "http://localhost:5000")

    # Durable slot for the bearer token
    TOKEN_FILE: Path = Path(
        os.getenv("HABITSYNC_TOKEN_FILE", str(Path.home() / ".habitsync" / "session.json"))
    ).expanduser()

    # Calendar-day boundaries for completion checks. Must match the day boundary
    # the server uses when it writes bare YYYY-MM-DD completion dates
    TIMEZONE: str = os.getenv("HABITSYNC_TIMEZONE", "UTC")

    # No timeout unless explicitly configured
    REQUEST_TIMEOUT: Optional[float] = _optional_float(os.getenv("HABITSYNC_REQUEST_TIMEOUT"))

    # Drop already-owned badges when appending toggle rewards
    DEDUPE_BADGES: bool = os.getenv("HABITSYNC_DEDUPE_BADGES", "false").lower() == "true"

    LOG_LEVEL: str = os.getenv("HABITSYNC_LOG_LEVEL", "INFO").upper()

    @property
    def api_base(self) -> str:
        """Base URL for API calls, always ending in /api"""
        return f"{self.API_URL.rstrip('/')}/api"


# Create a global settings instance
settings = Settings()
