# app/services/photo_store.py
"""
Photo evidence storage.

A ``PhotoStore`` takes bytes plus a content type and returns a durable URL.
Entry upserts describe their photo with the ``PhotoInput`` variant:

  NoPhoto          – nothing supplied, keep whatever is on record
  NewPhoto         – fresh upload, persisted before the entry is written
  ExistingPhotoUrl – the caller already holds a URL (externally hosted)

URLs are either absolute (http/https) or root-relative paths resolved
against the API's own origin.
"""
import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

from app.core.config import settings
from app.core.errors import InvalidInput

logger = logging.getLogger(__name__)

# Some browsers send image/jpg instead of image/jpeg
_MIME_ALIASES = {"image/jpg": "image/jpeg"}


@dataclass(frozen=True)
class NoPhoto:
    pass


@dataclass(frozen=True)
class NewPhoto:
    content: bytes
    content_type: str
    filename: str = "photo"


@dataclass(frozen=True)
class ExistingPhotoUrl:
    url: str


PhotoInput = Union[NoPhoto, NewPhoto, ExistingPhotoUrl]


def _human_size(n: int) -> str:
    for unit in ("B", "KB", "MB"):
        if n < 1024:
            return f"{n:.0f} {unit}"
        n //= 1024
    return f"{n:.1f} GB"


def normalize_content_type(photo: NewPhoto) -> str:
    mime_type = (
        photo.content_type
        or mimetypes.guess_type(photo.filename)[0]
        or "application/octet-stream"
    )
    return _MIME_ALIASES.get(mime_type, mime_type)


def validate_photo_input(photo: PhotoInput) -> PhotoInput:
    """Reject malformed photo inputs before any state change."""
    if isinstance(photo, NewPhoto):
        if not photo.content:
            raise InvalidInput("Uploaded photo is empty")
        if len(photo.content) > settings.PHOTO_MAX_BYTES:
            raise InvalidInput(
                f"Photo too large ({_human_size(len(photo.content))}). "
                f"Max {_human_size(settings.PHOTO_MAX_BYTES)}."
            )
        if not normalize_content_type(photo).startswith("image/"):
            raise InvalidInput("Only image uploads are allowed")
    elif isinstance(photo, ExistingPhotoUrl):
        url = photo.url.strip()
        parsed = urlparse(url)
        is_absolute = parsed.scheme in ("http", "https") and bool(parsed.netloc)
        is_root_relative = url.startswith("/") and not url.startswith("//")
        if not (is_absolute or is_root_relative):
            raise InvalidInput("photo_url must be an absolute http(s) URL or a root-relative path")
    return photo


class PhotoStore(ABC):
    """Abstract photo storage backend."""

    @abstractmethod
    def save(self, content: bytes, content_type: str, filename: str) -> str:
        """Persist the photo and return its URL."""
        ...

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Remove a previously saved photo. Returns False if it did not exist."""
        ...


class LocalPhotoStore(PhotoStore):
    """
    Stores photos on the local filesystem and hands back root-relative
    URLs under ``url_prefix``.
    """

    def __init__(self, base_dir: Union[str, Path, None] = None, url_prefix: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    def _upload_dir(self) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir

    def save(self, content: bytes, content_type: str, filename: str) -> str:
        ext = Path(filename).suffix.lower() or (mimetypes.guess_extension(content_type) or "")
        stored_name = f"{uuid.uuid4().hex}{ext}"
        dest = self._upload_dir() / stored_name
        dest.write_bytes(content)
        logger.info("Stored photo %s (%s)", stored_name, _human_size(len(content)))
        return f"{self.url_prefix}/{stored_name}"

    def delete(self, url: str) -> bool:
        if not url.startswith(self.url_prefix + "/"):
            return False
        disk_path = self.base_dir / url[len(self.url_prefix) + 1:]
        try:
            disk_path.resolve().relative_to(self.base_dir)
        except ValueError:
            return False
        if not disk_path.exists():
            return False
        disk_path.unlink()
        logger.info("Deleted photo %s", disk_path.name)
        return True
