"""Filesystem helpers: output layout, directories and file contents."""

from __future__ import annotations

import hashlib
import os
import shutil


def output_index_file_path(base_path: str) -> str:
    return os.path.join(base_path, "index.html")


def output_photos_file_path(base_path: str) -> str:
    return os.path.join(base_path, "photos")


def output_photo_original_file_path(base_path: str, slug: str, photo_file_path: str) -> str:
    return os.path.join(base_path, slug, "original", os.path.basename(photo_file_path))


def output_photo_thumbnail_file_path(base_path: str, slug: str, photo_file_path: str) -> str:
    return os.path.join(base_path, slug, "thumbnail", os.path.basename(photo_file_path))


def prune_directory(path: str) -> None:
    """Remove ``path`` and everything below it; a missing path is not an error."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)


def ensure_directory(path: str) -> None:
    """Create ``path`` and its parents unless it already exists."""
    if is_existing(path):
        return
    os.makedirs(path, mode=0o755, exist_ok=True)


def ensure_parent_directory(path: str) -> None:
    ensure_directory(os.path.dirname(path) or ".")


def is_existing(path: str) -> bool:
    """True unless the path is known not to exist."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def write_data_to_file(data: bytes | str, to: str) -> None:
    """Write ``data`` to ``to``, creating parent directories as needed."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    ensure_parent_directory(to)
    with open(to, "wb") as handle:
        handle.write(data)


def checksum(path: str) -> str:
    """Hex SHA-256 digest of the file's contents."""
    with open(path, "rb") as handle:
        return hashlib.file_digest(handle, "sha256").hexdigest()