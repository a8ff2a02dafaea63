"""Local preview server rendering the site straight from the source photos."""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Sequence
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import unquote, urlsplit

from .config import Config
from .config import shared as shared_config
from .constants import PHOTOS_URL_PATH, TEMPLATE_FILE_PATH
from .errors import FatalError
from .export import _render_template
from .images import ImageSize, resize_data
from .indexer import Section, build

log = logging.getLogger(__name__)


def render_index(cfg: Config, sections: Sequence[Section]) -> str:
    """The index page rendered from the template in the current directory."""
    return _render_template(TEMPLATE_FILE_PATH, cfg, sections)


def locate_image(path: str, sections: Sequence[Section]) -> tuple[str, ImageSize] | None:
    """Source file and output size for a ``slug/kind/file`` photo path, if known."""
    parts = path.split("/")
    if len(parts) != 3:
        return None
    slug, key, file_name = parts

    file_path = ""
    size = ImageSize(0, 0)
    for section in (s for s in sections if s.slug == slug):
        for image_set in section.image_sets:
            if image_set.file_name == file_name:
                file_path = os.path.join(section.folder, file_name)
                if key == "thumbnail":
                    size = image_set.thumbnail_size
                elif key == "original":
                    size = image_set.original_size
                break

    if not file_path or size.width == 0 or size.height == 0:
        return None
    return file_path, size


class _PreviewHandler(SimpleHTTPRequestHandler):
    config: Config
    sections: list[Section]

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        log.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        parts = urlsplit(self.path)
        path = unquote(parts.path)
        routes = [(PHOTOS_URL_PATH, None)] + [(f"/{folder}/", folder) for folder in self.config.other_folders]
        matches = [route for route in routes if path.startswith(route[0])]
        if not matches:
            self._handle_root()
            return
        prefix, folder = max(matches, key=lambda route: len(route[0]))
        if folder is None:
            self._handle_image(path[len(prefix):])
            return
        self.directory = os.fspath(folder)
        self.path = "/" + parts.path[len(prefix):] + (f"?{parts.query}" if parts.query else "")
        super().do_GET()

    def _send(self, body: bytes, content_type: str, status: HTTPStatus = HTTPStatus.OK) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        if content_type == "image/jpeg":
            self.send_header("Cache-Control", "no-cache, private, max-age=0")
        self.end_headers()
        self.wfile.write(body)

    def _handle_root(self) -> None:
        try:
            page = render_index(self.config, self.sections)
        except FatalError as err:
            log.error("%s", err)
            self._send(str(err).encode("utf-8"), "text/plain; charset=utf-8", HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self._send(page.encode("utf-8"), "text/html; charset=utf-8")

    def _handle_image(self, rest: str) -> None:
        found = locate_image(rest, self.sections)
        if found is None:
            self.send_error(HTTPStatus.NOT_FOUND)
            return
        file_path, size = found
        try:
            data = resize_data(file_path, size.width, size.height, self.config.extract_option.compress_quality)
        except (OSError, ValueError) as err:
            log.debug("Failed to resize %s (%s)", file_path, err)
            self.send_error(HTTPStatus.NOT_FOUND)
            return
        self._send(data, "image/jpeg")


def create_server(cfg: Config, sections: Sequence[Section], port: int) -> ThreadingHTTPServer:
    """An HTTP server for the preview, bound to ``port`` on all interfaces."""

    class Handler(_PreviewHandler):
        config = cfg

    Handler.sections = list(sections)
    server = ThreadingHTTPServer(("", port), functools.partial(Handler, directory=os.getcwd()))
    server.daemon_threads = True
    return server


def serve(port: int) -> None:
    """Index the configured site and serve it until interrupted."""
    log.debug("Creating Preview...")
    cfg = shared_config()
    try:
        sections = build(cfg.section_metadata, cfg.extract_option)
    except (OSError, ValueError) as err:
        raise FatalError("Failed to build index", err) from err

    try:
        server = create_server(cfg, sections, port)
    except OSError as err:
        raise FatalError("Failed to listen the port", err) from err

    log.info("Server started -> http://localhost:%d", port)
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            log.info("Server stopped")