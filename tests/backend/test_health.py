import time
from dashboard_lib.config.health import get_health


def test_get_health_contains_fields():
    h = get_health(app_name='Dash', version='1.0')
    assert isinstance(h, dict)
    assert h.get("status") == "ok"
    assert "start_time" in h
    assert isinstance(h["uptime_seconds"], int)
    assert h["app_name"] == 'Dash'
    assert h["version"] == '1.0'


def test_version_defaults_to_unknown():
    assert get_health()["version"] == "unknown"


def test_uptime_increases():
    h1 = get_health()
    time.sleep(1)
    h2 = get_health()
    assert h2["uptime_seconds"] >= h1["uptime_seconds"] + 1
