import pytest

from cndes.infrastructure.db.seed import DEPARTMENTS, EXTERNAL_ENTITIES


@pytest.mark.parametrize("path, seeded", [
    ("/api/departments", DEPARTMENTS),
    ("/api/external-entities", EXTERNAL_ENTITIES),
])
def test_seeded_catalog_is_listed_alphabetically(client, auth_headers, path, seeded):
    response = client.get(path, headers=auth_headers)

    assert response.status_code == 200
    names = response.json()["data"]
    assert set(names) == set(seeded)
    assert names == sorted(names)


@pytest.mark.parametrize("path", ["/api/departments", "/api/external-entities"])
def test_add_entry(client, auth_headers, path):
    response = client.post(path, json={"name": "  Oficina   de Enlace "}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "success", "name": "Oficina de Enlace"}
    assert "Oficina de Enlace" in client.get(path, headers=auth_headers).json()["data"]


@pytest.mark.parametrize("path", ["/api/departments", "/api/external-entities"])
def test_duplicate_entry_is_a_conflict(client, auth_headers, path):
    client.post(path, json={"name": "Unidad Nueva"}, headers=auth_headers)
    response = client.post(path, json={"name": "Unidad Nueva"}, headers=auth_headers)

    assert response.status_code == 409
    assert "already exists" in response.json()["error"]


@pytest.mark.parametrize("body", [{"name": ""}, {"name": "   "}, {}])
def test_blank_name_is_rejected(client, auth_headers, body):
    response = client.post("/api/departments", json=body, headers=auth_headers)
    assert response.status_code == 400


def test_catalogs_require_authentication(client):
    assert client.get("/api/departments").status_code == 401
    assert client.post("/api/external-entities", json={"name": "X"}).status_code == 401
