import pytest

from aetheris.database.connection import init_db
from aetheris.editor.session import registry
from aetheris.services import auth
from aetheris.services import projects as project_service

SITE_FILES = [
    {
        "path": "index.html",
        "content": (
            "<!DOCTYPE html>\n<html>\n<head>\n"
            '  <link rel="stylesheet" href="styles.css">\n'
            "</head>\n<body>\n  <h1>Hello</h1>\n"
            '  <script src="main.js"></script>\n'
            "</body>\n</html>\n"
        ),
    },
    {"path": "styles.css", "content": "body{color:red}"},
    {"path": "main.js", "content": "console.log('hi');"},
    {"path": "README.md", "content": "# Site"},
]


def make_site_config():
    return {"files": [dict(item) for item in SITE_FILES], "features": ["Hero", "Footer"]}


@pytest.fixture
def db(tmp_path, monkeypatch):
    path = tmp_path / "aetheris-test.db"
    monkeypatch.setenv("AETHERIS_DB_PATH", str(path))
    init_db()
    yield path
    registry.close_all()


@pytest.fixture
def user_id(db):
    return auth.create_user("ana@example.com", "secret1", "Ana")


@pytest.fixture
def project_id(user_id):
    return project_service.create_project(user_id, "Padaria", "Site para padaria", make_site_config())


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from aetheris.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def site_config():
    return make_site_config()
