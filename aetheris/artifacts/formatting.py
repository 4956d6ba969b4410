from __future__ import annotations

import logging
from typing import Callable, Dict

import cssbeautifier
import jsbeautifier
from bs4 import BeautifulSoup

from aetheris.services.errors import FormattingError

logger = logging.getLogger(__name__)

INDENT_SIZE = 2


def format_markup(content: str) -> str:
    return BeautifulSoup(content, "html.parser").prettify()


def format_script(content: str) -> str:
    options = jsbeautifier.default_options()
    options.indent_size = INDENT_SIZE
    return jsbeautifier.beautify(content, options)


def format_stylesheet(content: str) -> str:
    options = cssbeautifier.default_options()
    options.indent_size = INDENT_SIZE
    return cssbeautifier.beautify(content, options)


FORMATTERS: Dict[str, Callable[[str], str]] = {
    ".html": format_markup,
    ".js": format_script,
    ".css": format_stylesheet,
}


def can_format(extension: str) -> bool:
    return extension in FORMATTERS


def format_source(path: str, extension: str, content: str) -> str:
    """Pretty-print ``content`` by extension; unknown extensions come back as-is.

    Raises ``FormattingError`` when the formatter fails, so callers keep the
    original text.
    """
    formatter = FORMATTERS.get(extension)
    if formatter is None:
        return content
    try:
        return formatter(content)
    except Exception as exc:
        logger.warning("Formatter for %s failed: %s", path, exc)
        raise FormattingError(path, str(exc)) from exc
