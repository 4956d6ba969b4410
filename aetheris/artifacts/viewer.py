"""
Read-only views over a generated project: the active file, its metrics,
its diff against a previous snapshot, exports and the zip download.

Only ``format_active_file`` changes file content, and only on success.
"""

from __future__ import annotations

import io
import math
import re
import zipfile
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from aetheris.artifacts import diff as diff_view
from aetheris.artifacts.formatting import format_source
from aetheris.artifacts.preview import compose_preview, sandboxed_frame
from aetheris.artifacts.project import ArtifactProject, FileArtifact, build_file_tree, extension_of

NO_FILES = FileArtifact(path="no files found", content="")

LANGUAGES = {
    ".html": "markup",
    ".js": "javascript",
    ".css": "css",
    ".md": "markdown",
}

# Synthetic throughput for the load-time estimate: 2 KB per millisecond.
THROUGHPUT_KB_PER_MS = 2
SCORE_FLOOR = 40


def language_for(path: str) -> str:
    return LANGUAGES.get(extension_of(path), "clike")


@dataclass
class FileMetrics:
    path: str
    size: int
    size_kb: float
    lines: int
    complexity: int
    load_time_ms: float
    score: int
    optimizations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_metrics(item: FileArtifact) -> FileMetrics:
    size = len(item.content)
    complexity = item.content.count("{")
    raw_score = max(SCORE_FLOOR, 100 - complexity / 2 - size / 5000)
    score = max(SCORE_FLOOR, int(math.floor(raw_score + 0.5)))
    return FileMetrics(
        path=item.path,
        size=size,
        size_kb=round(size / 1024, 1),
        lines=len(item.content.split("\n")),
        complexity=complexity,
        load_time_ms=round(size / 1024 / THROUGHPUT_KB_PER_MS, 2),
        score=score,
        optimizations=[
            "Minificar código para reduzir payload" if size > 10000 else "Tamanho de arquivo otimizado",
            "Refatorar componentes complexos" if complexity > 50 else "Estrutura modular detectada",
            "Habilitar compressão Gzip no servidor",
        ],
    )


class ArtifactViewer:
    def __init__(self, project: ArtifactProject, active_index: int = 0) -> None:
        self.project = project
        self.active_index = 0
        self.select(active_index)

    @property
    def files(self) -> List[FileArtifact]:
        return self.project.files

    @property
    def active_file(self) -> FileArtifact:
        if not self.files:
            return NO_FILES
        return self.files[self.active_index]

    def select(self, index: int) -> FileArtifact:
        self.active_index = index if 0 <= index < len(self.files) else 0
        return self.active_file

    def select_path(self, path: Optional[str]) -> FileArtifact:
        if path is None:
            return self.active_file
        for idx, item in enumerate(self.files):
            if item.path == path:
                return self.select(idx)
        return self.select(0)

    @property
    def language(self) -> str:
        return language_for(self.active_file.path)

    def file_tree(self) -> List[Dict[str, Any]]:
        return [node.to_dict() for node in build_file_tree(self.files)]

    def preview_html(self) -> str:
        return compose_preview(self.files)

    def preview_frame(self, view_size: str = "desktop") -> str:
        width = "375px" if view_size == "mobile" else "100%"
        return sandboxed_frame(self.preview_html(), title=self.project.name or "Preview", width=width)

    def previous_content(self) -> str:
        previous = self.project.previous_file(self.active_file.path)
        return previous.content if previous else ""

    def diff(self) -> List[diff_view.DiffRow]:
        return diff_view.side_by_side(self.previous_content(), self.active_file.content)

    def diff_html(self) -> str:
        return diff_view.render_html(self.diff())

    def unified_diff(self) -> str:
        return diff_view.unified(self.previous_content(), self.active_file.content, self.active_file.path)

    def metrics(self) -> FileMetrics:
        return compute_metrics(self.active_file)

    def format_active_file(self) -> FileArtifact:
        """Reformat the active file in place; on failure nothing changes and the error propagates."""
        if not self.files:
            return NO_FILES
        active = self.active_file
        formatted = format_source(active.path, active.extension, active.content)
        updated = FileArtifact(path=active.path, content=formatted)
        self.project.files[self.active_index] = updated
        return updated

    def export_active(self) -> str:
        return self.active_file.content

    def export_all(self) -> str:
        return "\n\n".join(f"/* --- {item.path} --- */\n{item.content}" for item in self.files)

    def zip_bytes(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for item in self.files:
                archive.writestr(item.path, item.content)
            features = "\n".join(f"- {feature}" for feature in self.project.features) or "- (none)"
            archive.writestr(
                "PROJECT-INFO.txt",
                f"Project: {self.project.name}\n"
                f"Exported: {datetime.now(timezone.utc).isoformat()}\n"
                f"Files: {len(self.files)}\n\n"
                f"{self.project.description}\n\n"
                f"Features:\n{features}\n",
            )
        buffer.seek(0)
        return buffer.getvalue()

    def download_name(self) -> str:
        safe_name = re.sub(r"[^a-zA-Z0-9]+", "-", (self.project.name or "site")[:30]).strip("-").lower()
        return f"aetheris-{safe_name or 'site'}-{self.project.id or 'draft'}.zip"
