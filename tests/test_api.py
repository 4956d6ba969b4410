"""End-to-end tests through the FastAPI app."""

import io
import zipfile

import pytest

from aetheris.artifacts.project import ArtifactProject
from aetheris.services import generation
from aetheris.services.errors import GenerationError


def _register(client, email="ana@example.com"):
    response = client.post("/api/auth/register", json={"email": email, "password": "secret1", "name": "Ana"})
    assert response.status_code == 200
    return response.json()["userId"]


def _create(client, user_id, site_config, name="Padaria"):
    response = client.post(
        "/api/projects", json={"userId": user_id, "name": name, "prompt": "Site", "config": site_config}
    )
    assert response.status_code == 200
    return response.json()["projectId"]


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["users"] == 0


def test_auth_flow(client):
    user_id = _register(client)
    assert client.get("/api/auth/me").json()["id"] == user_id
    assert client.post("/api/auth/register", json={"email": "ana@example.com", "password": "secret1"}).status_code == 400
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401
    assert client.post("/api/auth/login", json={"email": "ana@example.com", "password": "nope"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret1"}).status_code == 200


def test_generate_stores_project_for_signed_in_user(client, site_config, monkeypatch):
    async def fake_generate(prompt, transport=None):
        return ArtifactProject(name="Padaria", description=prompt, **site_config)

    monkeypatch.setattr(generation, "generate_website", fake_generate)
    _register(client)
    response = client.post("/api/generate", json={"prompt": "uma padaria"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["project"]["id"] == body["projectId"]
    stored = client.get(f"/api/project/{body['projectId']}").json()
    assert stored["prompt"] == "uma padaria"
    assert client.get("/api/auth/me").json()["credits"] == 9


def test_generate_attaches_previous_files(client, site_config, monkeypatch):
    async def fake_generate(prompt, transport=None):
        return ArtifactProject(name="Nova", description=prompt, **site_config)

    monkeypatch.setattr(generation, "generate_website", fake_generate)
    user_id = _register(client)
    previous_id = _create(client, user_id, site_config)
    client.post("/api/auth/logout")
    body = client.post("/api/generate", json={"prompt": "v2", "previousProjectId": previous_id}).json()
    assert body["projectId"] is None
    assert body["project"]["previousFiles"][0]["path"] == "index.html"


def test_generation_failure_is_bad_gateway(client, monkeypatch):
    async def failing(prompt, transport=None):
        raise GenerationError("upstream down")

    monkeypatch.setattr(generation, "generate_website", failing)
    response = client.post("/api/generate", json={"prompt": "x"})
    assert response.status_code == 502
    assert response.json() == {"error": "upstream down"}


def test_project_errors(client, site_config):
    assert client.get("/api/project/999").status_code == 404
    response = client.post("/api/projects", json={"userId": 999, "name": "X"})
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

    user_id = _register(client)
    for index in range(3):
        _create(client, user_id, site_config, name=f"P{index}")
    limited = client.post("/api/projects", json={"userId": user_id, "name": "P3"})
    assert limited.status_code == 403
    listing = client.get(f"/api/projects/{user_id}", params={"limit": 2}).json()
    assert listing["total"] == 3 and len(listing["projects"]) == 2


def test_layout_versions_and_deploy(client, site_config):
    user_id = _register(client)
    project_id = _create(client, user_id, site_config)
    layout = [{"id": "root", "type": "Container", "props": {}, "children": []}]
    assert client.post(f"/api/projects/{project_id}/layout", json={"layout": layout}).json() == {"success": True}
    versions = client.get(f"/api/projects/{project_id}/versions").json()
    assert len(versions) == 1 and versions[0]["layout"] == []
    assert client.get(f"/api/project/{project_id}").json()["config"] == site_config

    deployed = client.post("/api/deploy", json={"projectId": project_id, "subdomain": "padaria"})
    assert deployed.json()["url"] == "https://padaria.aetheris.ai"
    duplicate = client.post("/api/deploy", json={"projectId": project_id, "subdomain": "padaria"})
    assert duplicate.status_code == 400
    assert client.post("/api/deploy", json={"projectId": project_id, "subdomain": "bad domain"}).status_code == 422
    actions = [entry["action"] for entry in client.get(f"/api/activity/{user_id}").json()]
    assert actions[0] == "DEPLOY"


def test_artifact_views(client, site_config):
    user_id = _register(client)
    project_id = _create(client, user_id, site_config)

    files = client.get(f"/api/projects/{project_id}/files", params={"path": "main.js"}).json()
    assert files["active"] == {
        "index": 2,
        "path": "main.js",
        "language": "javascript",
        "content": "console.log('hi');",
    }
    assert [node["name"] for node in files["tree"]] == ["index.html", "styles.css", "main.js", "README.md"]

    preview = client.get(f"/preview/{project_id}")
    assert preview.headers["content-type"].startswith("text/html")
    assert "<style>body{color:red}</style>" in preview.text
    assert "  <h1>Hello</h1>\n  <script>console.log('hi');</script>\n</body>\n</html>" in preview.text
    assert "width:375px" in client.get(f"/api/projects/{project_id}/preview-frame", params={"view": "mobile"}).text

    metrics = client.get(f"/api/projects/{project_id}/metrics", params={"path": "styles.css"}).json()
    assert metrics["path"] == "styles.css" and metrics["complexity"] == 1

    assert client.get(f"/api/projects/{project_id}/export", params={"path": "README.md"}).text == "# Site"
    assert "/* --- main.js --- */" in client.get(f"/api/projects/{project_id}/export").text

    download = client.get(f"/api/projects/{project_id}/download")
    assert download.headers["content-type"] == "application/zip"
    assert "PROJECT-INFO.txt" in zipfile.ZipFile(io.BytesIO(download.content)).namelist()


def test_format_persists_and_diff_shows_change(client, site_config):
    user_id = _register(client)
    project_id = _create(client, user_id, site_config)

    response = client.post(f"/api/projects/{project_id}/format", json={"path": "styles.css"})
    assert response.status_code == 200
    assert "color: red" in response.json()["content"]

    diff = client.get(f"/api/projects/{project_id}/diff", params={"path": "styles.css"}).json()
    assert diff["stats"]["removed"] == 1
    assert diff["rows"][0]["left"] == "body{color:red}"
    unified = client.get(f"/api/projects/{project_id}/diff", params={"path": "styles.css", "output": "unified"})
    assert unified.text.startswith("--- a/styles.css")
    assert client.post(f"/api/projects/{project_id}/format", json={"path": "nope.css"}).status_code == 404


def test_format_failure_is_reported(client, site_config, monkeypatch):
    from aetheris.artifacts import formatting

    def broken(content):
        raise ValueError("bad input")

    monkeypatch.setitem(formatting.FORMATTERS, ".js", broken)
    user_id = _register(client)
    project_id = _create(client, user_id, site_config)
    response = client.post(f"/api/projects/{project_id}/format", json={"path": "main.js"})
    assert response.status_code == 422
    stored = client.get(f"/api/project/{project_id}").json()
    assert stored["config"]["files"][2]["content"] == "console.log('hi');"


@pytest.fixture
def editor(client, site_config):
    user_id = _register(client)
    project_id = _create(client, user_id, site_config)
    state = client.post("/api/editor/sessions", json={"projectId": project_id}).json()
    return client, project_id, state


def test_editor_session_lifecycle(editor):
    client, project_id, state = editor
    session_id = state["id"]
    base = f"/api/editor/sessions/{session_id}"
    assert state["layout"][0]["children"][0]["props"]["text"] == "Padaria"
    assert state["canUndo"] is False

    added = client.post(f"{base}/components", json={"type": "Button"}).json()
    button_id = added["added"]["id"]
    assert added["layout"][0]["children"][-1]["props"]["text"] == "Clique Aqui"
    assert added["canUndo"] is True

    selected = client.post(f"{base}/select", json={"id": button_id}).json()
    assert selected["panel"]["selected"] == {"id": button_id, "type": "Button"}
    assert 'data-selected="true"' in client.get(f"{base}/canvas").text

    patched = client.patch(f"{base}/components/{button_id}", json={"text": "Comprar"}).json()
    assert patched["layout"][0]["children"][-1]["props"]["text"] == "Comprar"

    undone = client.post(f"{base}/undo").json()
    assert undone["layout"][0]["children"][-1]["props"]["text"] == "Clique Aqui"
    redone = client.post(f"{base}/redo").json()
    assert redone["canRedo"] is False

    deleted = client.delete(f"{base}/components/{button_id}").json()
    assert deleted["selectedId"] is None
    root_delete = client.delete(f"{base}/components/root").json()
    assert root_delete["historyLength"] == deleted["historyLength"]

    dropped = client.post(f"{base}/drop", json={"kind": "COMPONENT", "type": "Image"}).json()
    assert dropped["layout"][0]["children"][-1]["type"] == "Image"
    ignored = client.post(f"{base}/drop", json={"kind": "FILE", "type": "Image"}).json()
    assert ignored["added"] is None

    assert client.post(f"{base}/save").json() == {"success": True}
    versions = client.get(f"/api/projects/{project_id}/versions").json()
    restored = client.post(f"{base}/versions/{versions[0]['id']}/restore").json()
    assert restored["layout"] == []
    assert restored["historyLength"] == 1

    assert client.delete(base).json() == {"success": True}
    assert client.get(base).status_code == 404


def test_editor_load_and_page(editor):
    client, _, state = editor
    base = f"/api/editor/sessions/{state['id']}"
    layout = [{"id": "root", "type": "Container", "props": {}, "children": [{"id": "t", "type": "Text", "props": {"text": "Oi"}}]}]
    loaded = client.post(f"{base}/load", json={"layout": layout}).json()
    assert loaded["layout"][0]["children"][0]["id"] == "t"
    assert loaded["historyLength"] == 1

    page = client.get(f"/editor/{state['id']}")
    assert page.status_code == 200
    assert 'data-type="Button"' in page.text
    assert state["id"] in page.text
    assert client.get("/editor/unknown").status_code == 404
    assert len(client.get("/api/editor/palette").json()) == 7


def test_editor_session_without_project(client):
    state = client.post("/api/editor/sessions", json={}).json()
    assert [child["id"] for child in state["layout"][0]["children"]] == ["header-1", "text-1"]
    response = client.post(f"/api/editor/sessions/{state['id']}/save")
    assert response.status_code == 404


def test_editor_save_keeps_files_formatted_while_open(editor):
    client, project_id, state = editor
    base = f"/api/editor/sessions/{state['id']}"
    formatted = client.post(f"/api/projects/{project_id}/format", json={"path": "styles.css"}).json()["content"]

    client.post(f"{base}/components", json={"type": "Text"})
    assert client.post(f"{base}/save").json() == {"success": True}
    stored = client.get(f"/api/project/{project_id}").json()
    assert stored["config"]["files"][1]["content"] == formatted
    assert stored["layout"][0]["children"][-1]["type"] == "Text"
