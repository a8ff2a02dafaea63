"""Site configuration read from a TOML file."""

from __future__ import annotations

import copy
import dataclasses
import functools
import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

from .constants import (
    CONFIG_FILE_PATH,
    DEFAULT_COMPRESS_QUALITY,
    PHOTO_SWIPE_CAPTION_PLUGIN_VERSION,
    PHOTO_SWIPE_VERSION,
)
from .errors import FatalError

log = logging.getLogger(__name__)


@dataclass
class ExtractOption:
    """Output sizes and JPEG quality for rendered photos."""

    thumbnail_width: int = 0
    min_thumbnail_height: int = 0
    original_width: int = 0
    min_original_height: int = 0
    compress_quality: int = 0


@dataclass
class SectionMetadata:
    """One configured gallery section."""

    title: str = ""
    text: str = ""
    slug: str = ""
    folder: str = ""
    ascending: bool = False
    thumbnail_width: int = 0
    min_thumbnail_height: int = 0
    original_width: int = 0
    min_original_height: int = 0


class Config(Protocol):
    """What the rest of the program needs from a configuration."""

    section_metadata: list[SectionMetadata]
    extract_option: ExtractOption
    other_folders: list[str]

    def all_settings(self) -> dict[str, Any]:
        """Every setting, keys lower-cased, for use in templates."""


@dataclass
class FileConfig:
    """Configuration loaded from a file."""

    settings: dict[str, Any] = field(repr=False)
    section_metadata: list[SectionMetadata]
    extract_option: ExtractOption
    other_folders: list[str]

    def all_settings(self) -> dict[str, Any]:
        return copy.deepcopy(self.settings)


_T = TypeVar("_T")
_BOOL_WORDS = {"1": True, "t": True, "true": True, "0": False, "f": False, "false": False}


def _lowercase_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key).lower(): _lowercase_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_lowercase_keys(item) for item in value]
    return value


def _coerce(kind: type, value: Any) -> Any:
    if not isinstance(value, (str, int, float, bool)):
        raise ValueError(f"unsupported value {value!r}")
    if kind is bool and isinstance(value, str):
        return _BOOL_WORDS[value.strip().lower()]
    return kind(value)


def _decode(cls: type[_T], raw: Any) -> _T:
    """Fill a dataclass from a mapping, matching keys case-insensitively."""
    if not isinstance(raw, Mapping):
        return cls()
    by_key = {f.name.replace("_", ""): f for f in dataclasses.fields(cls)}
    values: dict[str, Any] = {}
    for key, value in raw.items():
        target = by_key.get(str(key).lower())
        if target is None:
            continue
        try:
            values[target.name] = _coerce(type(target.default), value)
        except (KeyError, TypeError, ValueError):
            log.debug("Ignoring invalid value for %s: %r", key, value)
    return cls(**values)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def load_config(path: str) -> FileConfig:
    """Read the configuration file at ``path``."""
    try:
        with open(path, "rb") as handle:
            raw = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as err:
        raise FatalError("Failed to parse config file foto.toml", err) from err

    settings = _lowercase_keys(raw)
    settings["photoswipeversion"] = PHOTO_SWIPE_VERSION
    settings["photoswipecaptionpluginversion"] = PHOTO_SWIPE_CAPTION_PLUGIN_VERSION

    sections = [
        _decode(SectionMetadata, item)
        for item in _as_list(settings.get("section"))
        if isinstance(item, Mapping)
    ]
    option = _decode(ExtractOption, settings.get("image"))
    if option.compress_quality == 0:
        option.compress_quality = DEFAULT_COMPRESS_QUALITY

    others = settings.get("others")
    folders = others.get("folders") if isinstance(others, Mapping) else None

    config = FileConfig(
        settings=settings,
        section_metadata=sections,
        extract_option=option,
        other_folders=[str(folder) for folder in _as_list(folders)],
    )
    log.debug("Config parsed: %s", config)
    return config


@functools.cache
def shared() -> FileConfig:
    """The process-wide configuration read from ./foto.toml."""
    return load_config(CONFIG_FILE_PATH)