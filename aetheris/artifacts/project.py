"""
Generated website projects.

An ``ArtifactProject`` is what the generation collaborator returns: a name,
a description, a feature list and a flat list of files addressed by
relative, slash-delimited paths. Stored projects keep the files and
features in their ``config`` column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from aetheris.editor.document import ROOT_ID, ComponentNode

REQUIRED_FILES = ("index.html", "styles.css", "main.js", "README.md")


def extension_of(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    return "." + name.rsplit(".", 1)[-1].lower() if "." in name else ""


class FileArtifact(BaseModel):
    path: str
    content: str = ""

    @field_validator("path")
    @classmethod
    def path_is_relative(cls, value: str) -> str:
        value = value.strip().replace("\\", "/")
        if not value or value.startswith("/"):
            raise ValueError("file paths must be relative")
        if ".." in value.split("/"):
            raise ValueError("file paths must not leave the project")
        return value

    @property
    def extension(self) -> str:
        return extension_of(self.path)


class ArtifactProject(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    name: str = ""
    description: str = ""
    features: List[str] = Field(default_factory=list)
    files: List[FileArtifact] = Field(default_factory=list)
    previous_files: Optional[List[FileArtifact]] = Field(default=None, alias="previousFiles")

    @model_validator(mode="after")
    def paths_are_unique(self) -> "ArtifactProject":
        seen = set()
        for item in self.files:
            if item.path in seen:
                raise ValueError(f"duplicate file path: {item.path}")
            seen.add(item.path)
        return self

    def file(self, path: str) -> Optional[FileArtifact]:
        for item in self.files:
            if item.path == path:
                return item
        return None

    def previous_file(self, path: str) -> Optional[FileArtifact]:
        for item in self.previous_files or []:
            if item.path == path:
                return item
        return None

    def missing_required_files(self) -> List[str]:
        return [path for path in REQUIRED_FILES if self.file(path) is None]

    def to_config(self) -> Dict[str, Any]:
        return {
            "files": [item.model_dump() for item in self.files],
            "features": list(self.features),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any], previous: Optional[Dict[str, Any]] = None) -> "ArtifactProject":
        """Rebuild the artifact held by a stored project row (and optionally a version row)."""
        config = record.get("config") or {}
        previous_files = None
        if previous is not None:
            previous_files = (previous.get("config") or {}).get("files") or []
        return cls(
            id=record.get("id"),
            name=record.get("name") or "",
            description=record.get("prompt") or "",
            features=config.get("features") or [],
            files=config.get("files") or [],
            previous_files=previous_files,
        )


@dataclass
class FileTreeNode:
    name: str
    path: str
    index: Optional[int] = None
    children: Optional[List["FileTreeNode"]] = None

    @property
    def is_folder(self) -> bool:
        return self.children is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "path": self.path}
        if self.is_folder:
            data["children"] = [child.to_dict() for child in self.children or []]
        else:
            data["index"] = self.index
        return data


def build_file_tree(files: List[FileArtifact]) -> List[FileTreeNode]:
    """Nest files into folders by path segment; leaves keep their list index."""
    root = FileTreeNode(name="root", path="", children=[])
    for idx, item in enumerate(files):
        parts = item.path.split("/")
        current = root
        for depth, part in enumerate(parts):
            if depth == len(parts) - 1:
                current.children.append(FileTreeNode(name=part, path=item.path, index=idx))
                continue
            folder = next((c for c in current.children if c.name == part and c.is_folder), None)
            if folder is None:
                folder = FileTreeNode(name=part, path="/".join(parts[: depth + 1]), children=[])
                current.children.append(folder)
            current = folder
    return root.children


def seed_layout(project: ArtifactProject) -> List[ComponentNode]:
    """Project an artifact into a starting layout for the visual editor."""
    return [
        ComponentNode(
            id=ROOT_ID,
            type="Container",
            props={"className": "min-h-screen bg-white p-12"},
            children=[
                ComponentNode(
                    id="h1",
                    type="Heading",
                    props={"text": project.name or "Novo Projeto", "level": 1, "className": "text-5xl font-bold mb-8"},
                ),
                ComponentNode(
                    id="p1",
                    type="Text",
                    props={
                        "text": project.description or "Este é um template gerado para você.",
                        "className": "text-xl text-gray-600",
                    },
                ),
            ],
        )
    ]
