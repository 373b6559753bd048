from dashboard import __version__
from dashboard.controllers import health
from dashboard.errors import StoreUnavailable


def test_health_ok(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "version": __version__, "database": "ok"}


def test_health_reports_unreachable_database(client, monkeypatch):
    def _fail():
        raise StoreUnavailable()

    monkeypatch.setattr(health, "ping_db", _fail)
    resp = client.get("/api/health")
    assert resp.status_code == 503
    assert resp.json()["database"] == "unavailable"


def test_app_version_matches_package(client):
    from dashboard.main import app

    assert app.version == __version__
    assert client.get("/openapi.json").json()["info"]["version"] == __version__
