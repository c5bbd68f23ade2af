import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from dashboard_lib.middleware import RequestLogging


def _make_app():
    app = FastAPI()

    @app.get('/ping')
    def ping():
        return {'ok': True}

    app.add_middleware(RequestLogging)
    return app


def test_requests_are_logged(caplog):
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger='dashboard_lib.middleware.request_logging'):
        r = client.get('/ping')
    assert r.status_code == 200
    assert 'GET /ping -> 200' in caplog.text
