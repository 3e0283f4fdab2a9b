from __future__ import annotations

from datetime import timedelta

import pytest

from reelvault.api import create_app
from reelvault.models import storage
from reelvault.utils import security

from helpers import PASSWORD


@pytest.fixture
def app(tmp_path):
    # A real file so threads in the concurrency tests share one database
    app = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'auth.db'}"})
    yield app
    storage.close()


@pytest.fixture
def client(app):
    # Cookies are passed explicitly so each request shows exactly which token it presents
    return app.test_client(use_cookies=False)


@pytest.fixture
def clock(monkeypatch):
    """Freeze the token clock on a whole second; move it with clock.advance(minutes=15)."""
    start = security._now().replace(microsecond=0)

    class _Clock:
        offset = timedelta()

        def advance(self, **kwargs):
            self.offset += timedelta(**kwargs)

    c = _Clock()
    monkeypatch.setattr(security, "_now", lambda: start + c.offset)
    return c


@pytest.fixture
def register(client):
    def _register(email="user@example.com", password=PASSWORD):
        return client.post("/auth/register", json={"email": email, "password": password})

    return _register
