"""Storage backends."""

from valnk.storage.local import LocalStore
from valnk.storage.protocol import DocumentStore, Item, ScanRequest, ScanResult, TransportError

__all__ = [
    "DocumentStore",
    "LocalStore",
    "Item",
    "ScanRequest",
    "ScanResult",
    "TransportError",
]
