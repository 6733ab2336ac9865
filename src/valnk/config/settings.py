"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
query planner and content client.

Usage:
    from valnk.config import PaginationSettings

    # Load from environment variables (VALNK_*)
    settings = PaginationSettings()

    # Or override with explicit values
    settings = PaginationSettings(default_page_size=50)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for index listing.

    Attributes:
        default_page_size: Page size used when a list call gives no limit.
        max_cursor_length: Longest cursor token accepted before decoding.

    Environment Variables:
        VALNK_DEFAULT_PAGE_SIZE
        VALNK_MAX_CURSOR_LENGTH
    """

    model_config = SettingsConfigDict(
        env_prefix="VALNK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_page_size: int = Field(default=30, gt=0)
    max_cursor_length: int = Field(default=4096, gt=0)
