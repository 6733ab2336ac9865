"""Client API over the shared content table."""

from valnk.api.client import ContentClient

__all__ = [
    "ContentClient",
]
