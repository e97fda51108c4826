import pytest
from fastapi.testclient import TestClient

from contactbook.config import Settings
from contactbook.main import create_app
from contactbook.store import ContactStore, StoreConfig


@pytest.fixture
def settings(tmp_path):
    return Settings(DB_PATH=str(tmp_path / "db" / "contacts.sqlite3"), DB_FALLBACK_TO_MEMORY=False)


@pytest.fixture
def store(settings):
    store = ContactStore(StoreConfig.from_settings(settings))
    store.initialize()
    yield store
    store.dispose()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_contact(store):
    """Insert ``n`` contacts directly; returns them in insertion order."""

    def _make(n=1, start=0):
        return [
            store.add_contact(f"Person {i}", f"person{i}@example.com", f"{i:010d}")
            for i in range(start, start + n)
        ]

    return _make
