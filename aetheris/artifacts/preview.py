"""Compose a generated project into one self-contained HTML document."""

from __future__ import annotations

import html
import re
from typing import List

from aetheris.artifacts.project import FileArtifact

MISSING_INDEX_HTML = "<h1>No index.html found</h1>"

# Scripts run inside the frame, but never with the host origin.
FRAME_SANDBOX = "allow-scripts"


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _asset_url(path: str) -> str:
    # quoted URL whose last segment is the asset's file name
    return r"[\"'](?:[^\"'>]*/)?" + re.escape(_basename(path)) + r"[\"']"


def _link_pattern(path: str) -> re.Pattern:
    return re.compile(r"<link\b[^>]*\bhref=" + _asset_url(path) + r"[^>]*>", re.IGNORECASE)


def _script_pattern(path: str) -> re.Pattern:
    return re.compile(r"<script\b[^>]*\bsrc=" + _asset_url(path) + r"[^>]*>\s*</script>", re.IGNORECASE)


def inline_stylesheet(document: str, css: FileArtifact) -> str:
    block = f"<style>{css.content}</style>"
    document = _link_pattern(css.path).sub(lambda _: block, document, count=1)
    if block not in document:
        document = document.replace("</head>", f"{block}</head>", 1)
    return document


def inline_script(document: str, script: FileArtifact) -> str:
    block = f"<script>{script.content}</script>"
    document = _script_pattern(script.path).sub(lambda _: block, document, count=1)
    if block not in document:
        document = document.replace("</body>", f"{block}</body>", 1)
    return document


def compose_preview(files: List[FileArtifact]) -> str:
    """Inline every stylesheet and script of the project into ``index.html``.

    A ``<link>``/``<script src>`` tag that names the file is replaced by the
    inline block; otherwise the block goes before ``</head>`` (styles) or
    ``</body>`` (scripts), unless that exact block is already present.
    """
    index = next((item for item in files if item.path == "index.html"), None)
    if index is None:
        return MISSING_INDEX_HTML
    document = index.content
    for item in files:
        if item.extension == ".css":
            document = inline_stylesheet(document, item)
        elif item.extension == ".js":
            document = inline_script(document, item)
    return document


def sandboxed_frame(document: str, title: str = "Preview", width: str = "100%") -> str:
    return (
        f'<iframe title="{html.escape(title)}" sandbox="{FRAME_SANDBOX}" '
        f'referrerpolicy="no-referrer" style="width:{width};height:100%;border:0;background:#fff" '
        f'srcdoc="{html.escape(document, quote=True)}"></iframe>'
    )
