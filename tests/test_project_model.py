import pytest
from pydantic import ValidationError

from aetheris.artifacts.project import ArtifactProject, FileArtifact, build_file_tree, seed_layout


def test_paths_must_stay_inside_project():
    with pytest.raises(ValidationError):
        FileArtifact(path="/etc/passwd")
    with pytest.raises(ValidationError):
        FileArtifact(path="assets/../../secret")
    assert FileArtifact(path="assets\\app.js").path == "assets/app.js"


def test_duplicate_paths_rejected():
    with pytest.raises(ValidationError):
        ArtifactProject(files=[{"path": "a.js"}, {"path": "a.js"}])


def test_missing_required_files():
    project = ArtifactProject(files=[{"path": "index.html", "content": ""}])
    assert project.missing_required_files() == ["styles.css", "main.js", "README.md"]


def test_from_record_and_previous(site_config):
    record = {"id": 4, "name": "Padaria", "prompt": "Site", "config": site_config}
    previous = {"config": {"files": [{"path": "index.html", "content": "<p>old</p>"}]}}
    project = ArtifactProject.from_record(record, previous)
    assert project.id == 4
    assert project.description == "Site"
    assert project.features == ["Hero", "Footer"]
    assert project.previous_file("index.html").content == "<p>old</p>"
    assert project.previous_file("main.js") is None
    assert project.model_dump(by_alias=True)["previousFiles"][0]["path"] == "index.html"


def test_from_record_without_config():
    project = ArtifactProject.from_record({"id": 1, "name": "X", "prompt": None, "config": None})
    assert project.files == []
    assert project.previous_files is None


def test_file_tree_nests_folders():
    files = [
        FileArtifact(path="index.html"),
        FileArtifact(path="assets/app.js"),
        FileArtifact(path="assets/img/logo.svg"),
    ]
    tree = [node.to_dict() for node in build_file_tree(files)]
    assert tree[0] == {"name": "index.html", "path": "index.html", "index": 0}
    assets = tree[1]
    assert assets["name"] == "assets" and assets["path"] == "assets"
    assert assets["children"][0] == {"name": "app.js", "path": "assets/app.js", "index": 1}
    assert assets["children"][1]["children"][0]["index"] == 2


def test_seed_layout_uses_name_and_description():
    layout = seed_layout(ArtifactProject(name="Loja", description="Roupas"))
    root = layout[0]
    assert root.id == "root"
    assert root.children[0].props["text"] == "Loja"
    assert root.children[1].props["text"] == "Roupas"
    assert seed_layout(ArtifactProject())[0].children[0].props["text"] == "Novo Projeto"
