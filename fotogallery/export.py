"""Export of the whole site into a static output directory."""

from __future__ import annotations

import contextlib
import dataclasses
import logging
import os
import shutil
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import jinja2

from .cache import Cache
from .cache import shared as shared_cache
from .config import Config
from .config import shared as shared_config
from .constants import TEMPLATE_FILE_PATH
from .errors import FatalError
from .files import (
    ensure_directory,
    ensure_parent_directory,
    output_index_file_path,
    output_photo_original_file_path,
    output_photo_thumbnail_file_path,
    output_photos_file_path,
    prune_directory,
)
from .images import resize_image
from .indexer import ImageSet, Section, build
from .minimize import MinifyMinimizer, Minimizer, NoneMinimizer

log = logging.getLogger(__name__)

ProgressFunc = Callable[[str], None]
MessageFunc = Callable[[str, str], None]

_ENVIRONMENT = jinja2.Environment(autoescape=True)


class _TrustedHTML(str):
    """Section text written by the site owner; rendered without escaping."""

    def __html__(self) -> str:
        return str(self)


def _render_template(template_path: str, cfg: Config, sections: Sequence[Section]) -> str:
    """Render the page template with the settings and sections."""
    try:
        with open(template_path, encoding="utf-8") as handle:
            template = _ENVIRONMENT.from_string(handle.read())
    except (OSError, jinja2.TemplateError) as err:
        raise FatalError(f"Failed to parse template {template_path}", err) from err
    trusted = [dataclasses.replace(s, text=_TrustedHTML(s.text)) for s in sections]
    try:
        return template.render(Config=cfg.all_settings(), Sections=trusted)
    except jinja2.TemplateError as err:
        raise FatalError("Failed to generate index page.", err) from err


class ExportContext(Protocol):
    """The steps an export is made of."""

    def clean_directory(self, output_path: str) -> None: ...

    def build_index(self, cfg: Config) -> list[Section]: ...

    def export_photos(
        self, sections: Sequence[Section], output_path: str, cache: Cache, post_progress_fn: ProgressFunc | None
    ) -> None: ...

    def generate_index_html(
        self, cfg: Config, template_path: str, sections: Sequence[Section], path: str, minimizer: Minimizer
    ) -> None: ...

    def process_other_folders(
        self, folders: Sequence[str], output_path: str, minimizer: Minimizer, message_func: MessageFunc | None
    ) -> None: ...


def resize_image_and_cache(
    src: str, to: str, width: int, height: int, compress_quality: int, cache: Cache
) -> None:
    """Write the resized photo to ``to``, reusing and filling the cache."""
    cached = cache.cached_image(src, width, height, compress_quality)
    if cached is not None:
        log.debug("Found cached image for %s", src)
        try:
            ensure_parent_directory(to)
            shutil.copyfile(cached, to)
            return
        except OSError:
            pass

    resize_image(src, to, width, height, compress_quality)
    cache.add_image(src, width, height, compress_quality, to)


def _copy(src: str, dst: str) -> None:
    if os.path.isdir(src):
        shutil.copytree(src, dst, dirs_exist_ok=True)
    else:
        ensure_parent_directory(dst)
        shutil.copy2(src, dst)


def _minimize_tree(root_path: str, minimizer: Minimizer) -> None:
    """Minimise files below ``root_path``, stopping at the first failure."""
    for root, dirs, names in os.walk(root_path):
        dirs.sort()
        for path in (os.path.join(root, name) for name in sorted(names)):
            if not minimizer.minimizable(path):
                continue
            try:
                minimizer.minimize_file(path, path)
            except (OSError, ValueError) as err:
                log.debug("Failed to minimize %s (%s)", path, err)
                return


class DefaultExportContext:
    """Export steps that work on the real filesystem."""

    def clean_directory(self, output_path: str) -> None:
        prune_directory(output_path)

    def build_index(self, cfg: Config) -> list[Section]:
        return build(cfg.section_metadata, cfg.extract_option)

    def export_photos(
        self, sections: Sequence[Section], output_path: str, cache: Cache, post_progress_fn: ProgressFunc | None
    ) -> None:
        try:
            ensure_directory(output_path)
        except OSError as err:
            raise FatalError("Failed to prepare output directory", err) from err

        def process(slug: str, src: str, image_set: ImageSet) -> None:
            jobs = (
                (output_photo_thumbnail_file_path, image_set.thumbnail_size, "thumbnail"),
                (output_photo_original_file_path, image_set.original_size, "original"),
            )
            for path_fn, size, kind in jobs:
                try:
                    resize_image_and_cache(
                        src, path_fn(output_path, slug, src), size.width, size.height,
                        image_set.compress_quality, cache,
                    )
                except (OSError, ValueError) as err:
                    raise FatalError(f"Failed to generate {kind} image", err) from err
            log.debug("Processing image %s", src)
            if post_progress_fn is not None:
                post_progress_fn(src)

        with ThreadPoolExecutor() as pool:
            futures = [
                pool.submit(process, section.slug, os.path.join(section.folder, image_set.file_name), image_set)
                for section in sections
                for image_set in section.image_sets
            ]
        for future in futures:
            future.result()

    def generate_index_html(
        self, cfg: Config, template_path: str, sections: Sequence[Section], path: str, minimizer: Minimizer
    ) -> None:
        content = _render_template(template_path, cfg, sections)
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(content)
        except OSError as err:
            raise FatalError("Failed to create index file.", err) from err
        with contextlib.suppress(OSError, ValueError):
            minimizer.minimize_file(path, path)

    def process_other_folders(
        self, folders: Sequence[str], output_path: str, minimizer: Minimizer, message_func: MessageFunc | None
    ) -> None:
        for folder in folders:
            target_folder = os.path.join(output_path, os.path.basename(os.path.normpath(folder)))
            if message_func is not None:
                message_func(folder, target_folder)
            try:
                _copy(folder, target_folder)
            except OSError as err:
                log.error("Failed to copy folder %s to %s (%s).", folder, target_folder, err)
            _minimize_tree(target_folder, minimizer)


def minimizer(minimize: bool) -> Minimizer:
    """The minimizer to use for output files."""
    return MinifyMinimizer() if minimize else NoneMinimizer()


def run_export(
    cfg: Config, output_path: str, minimizer: Minimizer, cache: Cache, ctx: ExportContext
) -> None:
    """Run every export step against ``ctx``."""
    prefix = f"exporting to {output_path}: "
    live = sys.stderr.isatty()

    def status(message: str, end: str = "") -> None:
        if live or end:
            sys.stderr.write(("\r\x1b[K" if live else "") + prefix + message + end)
            sys.stderr.flush()

    status(f"removing directory {output_path}")
    try:
        ctx.clean_directory(output_path)
    except OSError as err:
        raise FatalError("Failed to remove directory.", err) from err

    status("building index")
    photos_directory = output_photos_file_path(output_path)
    try:
        sections = ctx.build_index(cfg)
    except (OSError, ValueError) as err:
        with contextlib.suppress(OSError):
            ctx.clean_directory(output_path)
        raise FatalError("Failed to build index.", err) from err

    ctx.export_photos(sections, photos_directory, cache, lambda path: status(f"processed image {path}"))

    index_path = output_index_file_path(output_path)
    log.debug("Exporting photos to %s", index_path)
    ctx.generate_index_html(cfg, TEMPLATE_FILE_PATH, sections, index_path, minimizer)

    ctx.process_other_folders(
        cfg.other_folders, output_path, minimizer,
        lambda src, dst: status(f"copying folder {src} to {dst}"),
    )
    status("succeeded", "\n")


def export(output_path: str, minimize: bool) -> None:
    """Export the site configured in the current directory."""
    run_export(shared_config(), output_path, minimizer(minimize), shared_cache(), DefaultExportContext())