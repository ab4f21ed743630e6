"""Blob storage for uploaded files."""

from .blob_storage import BlobStorage, IncomingFile, LocalBlobStorage, timestamped_filename

__all__ = ["BlobStorage", "IncomingFile", "LocalBlobStorage", "timestamped_filename"]
