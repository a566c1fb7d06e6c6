"""
Fixtures compartidas: una app aislada por test y un "Google" falso
servido con httpx.MockTransport.
"""

import time

import httpx
import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from gbp.tokens import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, TOKEN_EXPIRY_COOKIE
from main import create_app


class FakeGoogle:
    """Registra respuestas por (método, url sin query) y guarda las peticiones recibidas."""

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, url: str, status_code: int = 200, json=None, text=None, handler=None):
        if handler is None:
            def handler(request, _status=status_code, _json=json, _text=text):
                if _json is not None:
                    return httpx.Response(_status, json=_json)
                return httpx.Response(_status, text=_text or "")
        self.routes[(method.upper(), url)] = handler
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        if key not in self.routes:
            raise AssertionError(f"unexpected Google call: {key}")
        return self.routes[key](request)

    def calls(self, method: str, url: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and str(r.url.copy_with(query=None)) == url
        ]


def make_settings(**overrides) -> Settings:
    values = {
        "google_client_id": "client-123",
        "google_client_secret": "secret-456",
        "google_redirect_uri": "http://localhost:8000/api/auth/callback",
        "app_base_url": "http://localhost:3000",
        "frontend_origin": "http://localhost:3000",
        "environment": "development",
        "cookie_secure": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def google():
    return FakeGoogle()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings, google):
    app = create_app(settings, transport=httpx.MockTransport(google.handler))
    return TestClient(app)


@pytest.fixture
def connect():
    """Deja en el cliente las cookies de una sesión (válida o caducada)."""

    def _connect(client: TestClient, access_token: str = "ya29.valid-token", expires_in: int = 3600):
        expires_at = int(time.time() * 1000) + expires_in * 1000
        client.cookies.set(ACCESS_TOKEN_COOKIE, access_token)
        client.cookies.set(REFRESH_TOKEN_COOKIE, "1//refresh")
        client.cookies.set(TOKEN_EXPIRY_COOKIE, str(expires_at))
        return client

    return _connect
