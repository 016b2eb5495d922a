"""System routes — health probes, docs, unknown paths, and the static frontend.

Invariants:
    - /api/health is public and always 200
    - /api/health/ready reflects database reachability
    - Unknown /api/ paths answer the JSON envelope, never index.html
    - With a frontend build present, extension-less paths fall back to index.html
"""

import pytest
from httpx import ASGITransport, AsyncClient

import app.infrastructure.database as db_module
from app.main import create_app


async def test_health_is_public(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "ok"
    assert "T" in data["time"]


async def test_ready_when_database_answers(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "ready"


async def test_not_ready_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["code"] == 503


async def test_unknown_api_path_is_json_404(client):
    res = await client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {
        "code": 404, "message": "API endpoint not found", "data": None,
    }


async def test_wrong_method_is_405_envelope(client):
    res = await client.delete("/api/health")
    assert res.status_code == 405
    assert res.json()["code"] == 405


async def test_openapi_schema_served_under_api(client):
    res = await client.get("/api/swagger/doc.json")
    assert res.status_code == 200
    schema = res.json()
    assert "/api/user/login" in schema["paths"]
    assert "/api/sub/{sub_id}" in schema["paths"]
    assert schema["paths"]["/api/user/login"]["post"]["summary"] == "User login"


async def test_swagger_ui_served(client):
    res = await client.get("/api/swagger")
    assert res.status_code == 200
    assert "swagger" in res.text.lower()


@pytest.fixture
async def frontend_client(settings, tmp_path, content_store, fetcher):
    static_dir = tmp_path / "web"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<html>spa</html>")
    (static_dir / "app.js").write_text("console.log(1)")
    settings.static_dir = str(static_dir)

    app = create_app(settings, content_store=content_store, fetcher=fetcher)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


async def test_root_serves_index(frontend_client):
    res = await frontend_client.get("/")
    assert res.status_code == 200
    assert "spa" in res.text


async def test_static_file_served(frontend_client):
    res = await frontend_client.get("/app.js")
    assert res.status_code == 200
    assert "console.log" in res.text


async def test_client_route_falls_back_to_index(frontend_client):
    res = await frontend_client.get("/dashboard/subs")
    assert res.status_code == 200
    assert "spa" in res.text


async def test_missing_asset_is_404(frontend_client):
    res = await frontend_client.get("/missing.css")
    assert res.status_code == 404


async def test_api_routes_win_over_frontend(frontend_client):
    res = await frontend_client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "ok"


async def test_unknown_api_path_not_served_index(frontend_client):
    res = await frontend_client.get("/api/nope")
    assert res.status_code == 404
    assert res.json()["message"] == "API endpoint not found"
