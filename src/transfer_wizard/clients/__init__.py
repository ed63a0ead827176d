from .base import BaseClient
from .transfers_client import TransfersClient

__all__ = [
    "BaseClient",
    "TransfersClient",
]
