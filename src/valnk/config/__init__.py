"""Configuration module using Pydantic Settings.

Usage:
    from valnk.config import PaginationSettings

    settings = PaginationSettings(default_page_size=10)
"""

from valnk.config.settings import PaginationSettings

__all__ = [
    "PaginationSettings",
]
