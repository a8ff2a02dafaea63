"""On-disk cache of resized images keyed by source checksum and output size."""

from __future__ import annotations

import contextlib
import functools
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .constants import CACHE_DIRECTORY_NAME, CACHE_VERSION
from .files import (
    checksum,
    ensure_parent_directory,
    is_existing,
    prune_directory,
    write_data_to_file,
)

log = logging.getLogger(__name__)

_VERSION_FILE = "version"


@runtime_checkable
class Cache(Protocol):
    """Storage for resized images."""

    def migrate(self) -> None:
        """Purge stored images written by an incompatible version."""

    def add_image(self, src: str, width: int, height: int, compress_quality: int, file: str) -> None:
        """Store ``file`` as the rendition of ``src`` at the given size and quality."""

    def cached_image(self, src: str, width: int, height: int, compress_quality: int) -> str | None:
        """Path of the stored rendition, or None when there is none."""

    def clear(self) -> None:
        """Remove everything stored."""


@dataclass(frozen=True)
class FolderCache:
    """A cache kept in a single directory."""

    directory_name: str

    def migrate(self) -> None:
        if self._version() == CACHE_VERSION:
            return
        log.debug("Cache version is not compatible to new version (%s), purging", CACHE_VERSION)
        self.clear()
        self._write_version(CACHE_VERSION)

    def add_image(self, src: str, width: int, height: int, compress_quality: int, file: str) -> None:
        """Copy ``file`` into the cache; ``src`` provides the checksum."""
        try:
            digest = checksum(src)
        except OSError:
            return
        path = self.image_path(digest, width, height, compress_quality)
        log.debug("Add cache image %s for %s", path, src)
        with contextlib.suppress(OSError):
            ensure_parent_directory(path)
            shutil.copyfile(file, path)

    def cached_image(self, src: str, width: int, height: int, compress_quality: int) -> str | None:
        try:
            digest = checksum(src)
        except OSError as err:
            log.warning("Failed to generate file hash %s (%s).", src, err)
            return None
        path = self.image_path(digest, width, height, compress_quality)
        return path if is_existing(path) else None

    def clear(self) -> None:
        if not is_existing(self.directory_name):
            log.warning("Failed to find cache directory %s.", self.directory_name)
        with contextlib.suppress(OSError):
            prune_directory(self.directory_name)

    def image_path(self, checksum: str, width: int, height: int, compress_quality: int) -> str:
        return os.path.join(self.directory_name, f"{checksum}-{width}-{height}-{compress_quality}")

    def _version(self) -> str:
        try:
            with open(os.path.join(self.directory_name, _VERSION_FILE), encoding="utf-8") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError):
            return ""

    def _write_version(self, version: str) -> None:
        with contextlib.suppress(OSError):
            write_data_to_file(version.encode("utf-8"), os.path.join(self.directory_name, _VERSION_FILE))


@functools.cache
def shared() -> FolderCache:
    """The process-wide cache in the default directory, migrated on first use."""
    instance = FolderCache(CACHE_DIRECTORY_NAME)
    instance.migrate()
    return instance