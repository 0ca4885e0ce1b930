import warnings

from fastapi.testclient import TestClient

from cndes.api.main import create_app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "SQLite"
    assert body["documents_stored"] == 0


def test_demo_documents_are_loaded_when_enabled(settings):
    settings.load_demo_documents = True
    with TestClient(create_app(settings)) as client:
        assert client.get("/health").json()["documents_stored"] == 10


def test_oversized_body_is_rejected(settings):
    settings.max_request_bytes = 1024
    with TestClient(create_app(settings)) as client:
        response = client.post("/api/login", json={"username": "admin", "password": "x" * 4096})
    assert response.status_code == 413
    assert "error" in response.json()


def test_chunked_body_over_limit_is_rejected(settings):
    settings.max_request_bytes = 1024
    chunks = (b"x" * 512 for _ in range(8))
    with TestClient(create_app(settings)) as client:
        response = client.post(
            "/api/login",
            content=chunks,
            headers={"Content-Type": "application/json"},
        )
    assert response.status_code == 413
    assert "1024 byte limit" in response.json()["error"]


def test_chunked_body_under_limit_reaches_the_route(settings):
    body = b'{"username": "admin", "password": "admin-secret"}'
    with TestClient(create_app(settings)) as client:
        response = client.post(
            "/api/login",
            content=iter([body[:10], body[10:]]),
            headers={"Content-Type": "application/json"},
        )
    assert response.status_code == 200
    assert response.json()["token"]


def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_client_build_is_served_with_fallback(settings, tmp_path):
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html>registro</html>", encoding="utf-8")
    (dist / "assets" / "app.js").write_text("console.log('cndes')", encoding="utf-8")

    with TestClient(create_app(settings)) as client:
        assert client.get("/").text == "<html>registro</html>"
        assert client.get("/documentos/2026-001").text == "<html>registro</html>"
        assert "cndes" in client.get("/assets/app.js").text
        assert client.get("/api/nothing-here").status_code == 404
        assert client.get("/health").json()["status"] == "ok"


def test_startup_runs_in_lifespan_without_event_hooks(settings):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        app = create_app(settings)
        with TestClient(app) as client:
            assert client.get("/health").json()["documents_stored"] == 0

    assert not [w for w in caught if "on_event" in str(w.message)]
