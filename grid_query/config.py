"""
Runtime configuration.

Values come from the environment, optionally seeded from a ``.env`` file.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class GridSettings(BaseModel):
    """Settings shared by the grid processor and the HTTP app."""

    database_url: str = "sqlite:///:memory:"
    max_page_length: Optional[int] = Field(default=None, gt=0)
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


def get_settings() -> GridSettings:
    """Load settings from ``.env`` and the process environment."""
    load_dotenv()

    return GridSettings(
        database_url=os.getenv("GRID_DATABASE_URL", "sqlite:///:memory:"),
        max_page_length=os.getenv("GRID_MAX_PAGE_LENGTH") or None,
        log_level=os.getenv("GRID_LOG_LEVEL", "INFO"),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=os.getenv("API_PORT", "8000"),
    )
