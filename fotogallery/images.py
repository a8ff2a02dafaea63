"""Photo inspection and resizing."""

from __future__ import annotations

import io
import logging
import math
import os
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

from PIL import ExifTags, Image, ImageOps

from .files import write_data_to_file

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".jpeg", ".jpg", ".webp", ".png")

_EXIF_IFD = 0x8769
_TAG_ALIASES = {"ISOSpeedRatings": "ISO", "PhotographicSensitivity": "ISO"}


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int


def _round(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def is_photo_supported(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in SUPPORTED_EXTENSIONS


def _open_image(path: str) -> Image.Image:
    with Image.open(path) as img:
        img.load()
        return ImageOps.exif_transpose(img)


def get_photo_size(path: str) -> ImageSize:
    """Size of the photo after applying its EXIF orientation."""
    img = _open_image(path)
    return ImageSize(img.width, img.height)


def aspected_size(size: ImageSize, width: int, min_height: int) -> ImageSize:
    """Scale ``size`` to ``width``, growing it if the height falls below ``min_height``."""
    ratio = size.height / size.width
    height = _round(width * ratio)
    if min_height > height:
        height = min_height
        width = _round(height / ratio)
    return ImageSize(width, height)


def _target_size(img: Image.Image, width: int, height: int) -> tuple[int, int]:
    if width == 0 and height == 0:
        return img.width, img.height
    if width == 0:
        width = max(1, _round(img.width * height / img.height))
    elif height == 0:
        height = max(1, _round(img.height * width / img.width))
    return width, height


def resize_data(path: str, width: int, height: int, compress_quality: int) -> bytes:
    """JPEG bytes of the photo resized; a zero dimension keeps the aspect ratio."""
    img = _open_image(path)
    resized = img.resize(_target_size(img, width, height), Image.Resampling.LANCZOS)
    if resized.mode != "RGB":
        resized = resized.convert("RGB")
    buffer = io.BytesIO()
    resized.save(buffer, format="JPEG", quality=compress_quality)
    return buffer.getvalue()


def resize_image(src: str, to: str, width: int, height: int, compress_quality: int) -> None:
    log.debug("Resizing %s to %dx%d", src, width, height)
    write_data_to_file(resize_data(src, width, height, compress_quality), to)


def _format_value(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    if isinstance(value, str):
        return value.rstrip("\x00")
    if isinstance(value, tuple):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if hasattr(value, "numerator") and hasattr(value, "denominator"):
        if value.denominator == 0:
            return "0"
        frac = Fraction(int(value.numerator), int(value.denominator))
        if frac.denominator == 1:
            return str(frac.numerator)
        if frac.numerator == 1:
            return f"1/{frac.denominator}"
        return f"{float(frac):g}"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _check_format(path: str) -> None:
    ext = os.path.splitext(path)[1]
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"unsupported image format: {ext}")


def get_exif_values(path: str) -> dict[str, str]:
    """EXIF tags of the photo, by tag name, as text."""
    _check_format(path)
    with Image.open(path) as img:
        exif = img.getexif()
        entries = dict(exif.items())
        entries.update(exif.get_ifd(_EXIF_IFD).items())
    tags: dict[str, str] = {}
    for tag_id, value in entries.items():
        if tag_id == _EXIF_IFD:
            continue
        name = ExifTags.TAGS.get(tag_id, str(tag_id))
        tags[_TAG_ALIASES.get(name, name)] = _format_value(value)
    return tags