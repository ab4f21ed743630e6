"""Blob storage interface and the local-disk implementation.

Stored files are addressed by a path relative to the storage root
(``uploads/product/1700000000_ab12cd34_photo.jpg``), which is what gets
persisted on records. ``url()`` turns such a path into a public URL.
"""

from __future__ import annotations

import re
import secrets
import shutil
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from loguru import logger

from catalog_admin.core.exceptions import StorageError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class IncomingFile:
    """An uploaded file as received from the client."""

    filename: str
    stream: BinaryIO
    content_type: str | None = None


def timestamped_filename(original: str, now: float | None = None) -> str:
    """``<unix seconds>_<random hex>_<sanitized original name>``.

    The random component keeps two uploads of the same name within the same
    second from overwriting each other.
    """
    stamp = int(now if now is not None else time.time())
    path = PurePosixPath(original.replace("\\", "/"))
    suffix = _UNSAFE_CHARS.sub("", path.suffix[1:])
    stem = path.name[: -len(path.suffix)] if path.suffix else path.name
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._") or "upload"
    name = f"{stem}.{suffix}" if suffix else stem
    return f"{stamp}_{secrets.token_hex(4)}_{name}"


class BlobStorage(ABC):
    """Abstract interface for named-file storage."""

    @abstractmethod
    def store(self, directory: str, filename: str, stream: BinaryIO) -> str:
        """Write ``stream`` as ``directory/filename``.

        Returns:
            The stored file's path relative to the storage root.
        """

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove a stored file. Returns False when it did not exist."""

    @abstractmethod
    def url(self, path: str) -> str:
        """Public URL of a stored file."""


class LocalBlobStorage(BlobStorage):
    """Stores files under a directory on the local disk."""

    def __init__(self, root: str | Path, public_url: str = "/storage") -> None:
        self._root = Path(root)
        self._public_url = public_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if not target.is_relative_to(self._root.resolve()):
            raise StorageError(f"Path escapes storage root: {path}")
        return target

    def store(self, directory: str, filename: str, stream: BinaryIO) -> str:
        relative = str(PurePosixPath(directory) / filename)
        target = self._resolve(relative)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                shutil.copyfileobj(stream, out, length=1024 * 1024)
        except OSError as e:
            logger.error("Failed to write {}: {}", relative, e)
            raise StorageError(f"Failed to store {relative}") from e

        logger.info("Stored upload {}", relative)
        return relative

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def url(self, path: str) -> str:
        return f"{self._public_url}/{path.lstrip('/')}"
