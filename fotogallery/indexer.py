"""Builds the gallery index from configured sections."""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .config import ExtractOption, SectionMetadata
from .images import ImageSize, aspected_size, get_exif_values, get_photo_size, is_photo_supported

log = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[a-zA-Z0-9\-_]+")


class IndexBuildError(ValueError):
    """The configured sections cannot be indexed."""


@dataclass
class ImageSet:
    file_name: str
    thumbnail_size: ImageSize
    original_size: ImageSize
    compress_quality: int
    exif: dict[str, str] = field(default_factory=dict)


@dataclass
class Section:
    title: str
    text: str
    slug: str
    folder: str
    ascending: bool
    image_sets: list[ImageSet] = field(default_factory=list)


def valid_slug(slug: str) -> bool:
    return _SLUG_PATTERN.fullmatch(slug) is not None


def section_extract_option(global_option: ExtractOption, metadata: SectionMetadata) -> ExtractOption:
    """The global option with the section's positive sizes taken over it."""
    overrides = {
        name: getattr(metadata, name)
        for name in ("thumbnail_width", "min_thumbnail_height", "original_width", "min_original_height")
        if getattr(metadata, name) > 0
    }
    return dataclasses.replace(global_option, **overrides)


def build_image_set(path: str, option: ExtractOption) -> ImageSet:
    size = get_photo_size(path)
    return ImageSet(
        file_name=os.path.basename(path),
        thumbnail_size=aspected_size(size, option.thumbnail_width, option.min_thumbnail_height),
        original_size=aspected_size(size, option.original_width, option.min_original_height),
        compress_quality=option.compress_quality,
        exif=get_exif_values(path),
    )


def _photo_paths(folder: str):
    def on_error(err: OSError) -> None:
        log.warning("Failed to extract info from %s (%s)", err.filename, err)

    for root, dirs, names in os.walk(folder, onerror=on_error):
        dirs.sort()
        for name in sorted(names):
            path = os.path.join(root, name)
            if is_photo_supported(path):
                yield path


def build_image_sets(folder: str, ascending: bool, option: ExtractOption) -> list[ImageSet]:
    """Image sets for every supported photo under ``folder``, sorted by file name."""

    def attempt(path: str) -> ImageSet | None:
        try:
            return build_image_set(path, option)
        except Exception as err:  # noqa: BLE001 - unreadable photos are skipped
            log.warning("Failed to extract info from %s (%s)", path, err)
            return None

    with ThreadPoolExecutor() as pool:
        results = list(pool.map(attempt, _photo_paths(folder)))
    sets = [item for item in results if item is not None]
    sets.sort(key=lambda item: item.file_name, reverse=not ascending)
    return sets


def build(metadata: list[SectionMetadata], option: ExtractOption) -> list[Section]:
    """Sections with their image sets; sections without photos are dropped."""
    sections: list[Section] = []
    slugs: set[str] = set()
    for meta in metadata:
        slug = meta.slug
        if not valid_slug(slug):
            raise IndexBuildError(
                f'Slug "{slug}" is invalid. Only letters([a-zA-Z]), numbers([09-]), '
                "underscore(_) and hyphen(-) can be used."
            )
        if slug in slugs:
            raise IndexBuildError(f'Slug "{slug}" already exists. Slug needs to be unique.')
        log.debug("Extracting section [%s][/%s] %s", meta.title, slug, meta.folder)
        section = Section(
            title=meta.title,
            text=meta.text,
            slug=slug,
            folder=meta.folder,
            ascending=meta.ascending,
            image_sets=build_image_sets(meta.folder, meta.ascending, section_extract_option(option, meta)),
        )
        slugs.add(slug)
        if section.image_sets:
            sections.append(section)
    return sections