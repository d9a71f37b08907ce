import pytest

from apps.monitoring import api

HEALTH_URL = "/api/health/"


@pytest.mark.django_db
def test_health_ok(client):
    r = client.get(HEALTH_URL)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "components": {"db": {"ok": True}, "settings": {"ok": True}}}


@pytest.mark.django_db
def test_health_reports_empty_settings(client):
    from apps.store_settings.models import StoreSetting

    StoreSetting.objects.all().delete()
    r = client.get(HEALTH_URL)
    assert r.status_code == 503
    assert r.json()["components"] == {"db": {"ok": True}, "settings": {"ok": False}}


@pytest.mark.django_db
def test_health_db_down(client, monkeypatch):
    monkeypatch.setattr(api, "_check_db", lambda: False)
    r = client.get(HEALTH_URL)
    assert r.status_code == 503
    assert r.json() == {"ok": False, "components": {"db": {"ok": False}, "settings": {"ok": False}}}
