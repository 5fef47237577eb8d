import pytest
from fastapi.testclient import TestClient

from medterm import app
from medterm.config import settings
from medterm.models.flashcard import CategoryRef, FlashcardItem, SourceType
from medterm.routers.deps import get_scheduler
from medterm.services import desk_registry


class ManualTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled and not self.fired:
            self.fired = True
            self.callback()


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.timers = []

    def call_later(self, delay, callback):
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def run_pending(self):
        for timer in self.pending:
            timer.fire()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_card():
    def _make(source_id, front=None, back=None, source_type=SourceType.TERM, categories=()):
        return FlashcardItem(
            id=f"{source_type.value}-{source_id}",
            source_type=source_type,
            front=front or source_id,
            back=back or f"{source_id} meaning",
            categories=tuple(
                CategoryRef(id=cid, name=cid.title(), color="#3B82F6") for cid in categories
            ),
        )

    return _make


@pytest.fixture
def client(tmp_path, scheduler, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    desk_registry.close_all()


@pytest.fixture
def login(client):
    def _login(username, password):
        res = client.post("/api/auth/login", json={"username": username, "password": password})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}

    return _login


@pytest.fixture
def admin_headers(login):
    return login(settings.admin_username, settings.admin_password)


@pytest.fixture
def user_headers(client, admin_headers, login):
    res = client.post(
        "/api/users",
        json={"username": "nurse", "email": "nurse@example.com", "password": "secret"},
        headers=admin_headers,
    )
    assert res.status_code == 201, res.text
    return login("nurse", "secret")
