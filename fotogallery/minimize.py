"""Minimisation of CSS, HTML and JavaScript output files."""

from __future__ import annotations

import os
import re
import shutil
from typing import Protocol


class Minimizer(Protocol):
    def minimizable(self, path: str) -> bool:
        """Whether the file at ``path`` can be minimised."""

    def minimize_file(self, src: str, dest: str) -> None:
        """Write a minimised copy of ``src`` to ``dest``."""


class NoneMinimizer:
    """Leaves every file as it is."""

    _EXTENSIONS: frozenset[str] = frozenset()

    def minimizable(self, path: str) -> bool:
        return os.path.splitext(path)[1] in self._EXTENSIONS

    def minimize_file(self, src: str, dest: str) -> None:
        """Leave ``src`` untouched; a distinct ``dest`` gets an unchanged copy."""
        if os.path.abspath(src) != os.path.abspath(dest):
            shutil.copyfile(src, dest)


_STRING = r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\''
_CSS_PATTERN = re.compile(rf"({_STRING})|/\*.*?\*/", re.S)
_CSS_TIGHT = re.compile(r"\s*([{}:;,>+~()])\s*")
_JS_PATTERN = re.compile(rf"({_STRING}|`(?:\\.|[^`\\])*`)|(/\*.*?\*/)|(//[^\n]*)", re.S)
_HTML_RAW = re.compile(
    r"(<(script|style|pre|textarea)\b[^>]*>)(.*?)(</\2\s*>)|(<!--(?!\[if).*?-->)", re.S | re.I
)


def _squeeze_css(fragment: str) -> str:
    return _CSS_TIGHT.sub(r"\1", re.sub(r"\s+", " ", fragment))


def minify_css(text: str) -> str:
    """Strip comments and needless whitespace from a stylesheet."""
    parts: list[str] = []
    plain = ""
    pos = 0
    for match in _CSS_PATTERN.finditer(text):
        plain += text[pos:match.start()]
        pos = match.end()
        if match.group(1):
            parts.extend((_squeeze_css(plain), match.group(1)))
            plain = ""
        else:
            plain += " "
    parts.append(_squeeze_css(plain + text[pos:]))
    return "".join(parts).strip().replace(";}", "}")


def minify_js(text: str) -> str:
    """Strip comments, indentation and blank lines from a script."""
    out: list[str] = []
    pos = 0
    for match in _JS_PATTERN.finditer(text):
        out.append(text[pos:match.start()])
        pos = match.end()
        if match.group(1):
            out.append(match.group(1))
        elif match.group(2) and "\n" in match.group(2):
            out.append("\n")
    out.append(text[pos:])
    lines = (line.strip() for line in "".join(out).split("\n"))
    return "\n".join(line for line in lines if line)


def _collapse(fragment: str) -> str:
    return re.sub(r"\s+", " ", fragment)


def minify_html(text: str) -> str:
    """Remove comments and collapse whitespace, minifying inline styles and scripts."""
    out: list[str] = []
    pos = 0
    for match in _HTML_RAW.finditer(text):
        out.append(_collapse(text[pos:match.start()]))
        pos = match.end()
        if match.group(5):
            continue
        tag = match.group(2).lower()
        body = match.group(3)
        if tag == "style":
            body = minify_css(body)
        elif tag == "script":
            body = minify_js(body)
        out.append(_collapse(match.group(1)) + body + match.group(4))
    out.append(_collapse(text[pos:]))
    return "".join(out).strip()


_MINIFIERS = {".css": minify_css, ".html": minify_html, ".js": minify_js}


class MinifyMinimizer:
    """Minimises CSS, HTML and JavaScript files."""

    def minimizable(self, path: str) -> bool:
        return os.path.splitext(path)[1] in _MINIFIERS

    def minimize_file(self, src: str, dest: str) -> None:
        with open(src, encoding="utf-8") as handle:
            minify = _MINIFIERS.get(os.path.splitext(src)[1])
            if minify is None:
                raise ValueError("Unsupported file")
            content = handle.read()
        result = minify(content)
        with open(dest, "w", encoding="utf-8") as handle:
            handle.write(result)