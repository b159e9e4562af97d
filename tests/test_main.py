import pytest
from fastapi.testclient import TestClient

from enfermeria.core.config import settings


@pytest.fixture()
def frontend(tmp_path, monkeypatch):
    (tmp_path / "index.html").write_text("<html>enfermeria</html>", encoding="utf-8")
    (tmp_path / "app.js").write_text("console.log('ok')", encoding="utf-8")
    monkeypatch.setattr(settings, "FRONTEND_DIR", str(tmp_path))
    return tmp_path


def test_root_json(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_root_html(client: TestClient, frontend):
    response = client.get("/", headers={"accept": "text/html"})
    assert response.status_code == 200
    assert "enfermeria" in response.text


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == settings.DATABASE_NAME


def test_archivo_estatico(client: TestClient, frontend):
    response = client.get("/app.js")
    assert response.status_code == 200
    assert "console.log" in response.text


def test_ruta_desconocida_devuelve_index(client: TestClient, frontend):
    response = client.get("/calendario/semana")
    assert response.status_code == 200
    assert response.text == "<html>enfermeria</html>"


def test_no_sale_del_directorio_frontend(client: TestClient, frontend):
    response = client.get("/../pyproject.toml")
    assert response.text == "<html>enfermeria</html>"


def test_sin_frontend(client: TestClient, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "FRONTEND_DIR", str(tmp_path / "no-existe"))
    assert client.get("/calendario").status_code == 404
