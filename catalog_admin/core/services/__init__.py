"""Core services exports."""

from .database.db_session import DbSessionService
from .flash import FlashBag, FlashData
from .product_controller import ProductController
from .storage import BlobStorage, IncomingFile, LocalBlobStorage

__all__ = [
    # Database Service
    "DbSessionService",
    # Flash messages
    "FlashBag",
    "FlashData",
    # Product dashboard
    "ProductController",
    # Blob storage
    "BlobStorage",
    "IncomingFile",
    "LocalBlobStorage",
]
