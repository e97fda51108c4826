import math

import pytest
from sqlalchemy.engine import Engine

from contactbook.errors import BadRequest, DuplicateEmail, StorageFault
from contactbook.store import ContactStore, StoreConfig


def test_initialize_is_idempotent(store, make_contact):
    make_contact(2)
    store.initialize()
    assert store.list_contacts(1, 10).total == 2


def test_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "contacts.sqlite3"
    store = ContactStore(StoreConfig(path=str(path), fallback_to_memory=False))
    store.initialize()
    try:
        assert path.exists()
        assert store.persistent
    finally:
        store.dispose()


def test_add_returns_stored_record(store):
    contact = store.add_contact("A", "a@b.com", "1234567890")
    assert contact.id is not None
    assert contact.created_at is not None
    assert (contact.name, contact.email, contact.phone) == ("A", "a@b.com", "1234567890")


def test_added_contact_is_listed_first(store, make_contact):
    make_contact(3)
    added = store.add_contact("A", "a@b.com", "1234567890")
    page = store.list_contacts(1, 10)
    assert page.contacts[0] == added


def test_duplicate_email_persists_nothing(store):
    store.add_contact("A", "a@b.com", "1234567890")
    with pytest.raises(DuplicateEmail):
        store.add_contact("B", "a@b.com", "0987654321")
    assert store.list_contacts(1, 10).total == 1


def test_email_uniqueness_is_case_sensitive(store):
    store.add_contact("A", "a@b.com", "1234567890")
    store.add_contact("A", "A@b.com", "1234567890")
    assert store.list_contacts(1, 10).total == 2


@pytest.mark.parametrize("limit", [1, 3, 7, 25])
def test_pagination_invariants(store, make_contact, limit):
    make_contact(23)
    seen = []
    for page_no in range(1, math.ceil(23 / limit) + 1):
        page = store.list_contacts(page_no, limit)
        assert len(page.contacts) <= limit
        assert page.total == 23
        assert page.total_pages == math.ceil(23 / limit)
        assert page.current_page == page_no
        seen.extend(page.contacts)

    assert len(seen) == 23
    keys = [(c.created_at, c.id) for c in seen]
    assert keys == sorted(keys, reverse=True)


def test_out_of_range_page_is_empty(store, make_contact):
    make_contact(3)
    page = store.list_contacts(5, 10)
    assert page.contacts == []
    assert page.total == 3
    assert page.total_pages == 1


def test_empty_table(store):
    page = store.list_contacts(1, 10)
    assert page.contacts == []
    assert page.total == 0
    assert page.total_pages == 0


@pytest.mark.parametrize("page,size", [(0, 10), (1, 0), (-1, 5)])
def test_invalid_pagination(store, page, size):
    with pytest.raises(BadRequest):
        store.list_contacts(page, size)


def test_delete_counts_rows(store, make_contact):
    (contact,) = make_contact(1)
    assert store.delete_contact(contact.id) == 1
    assert store.delete_contact(contact.id) == 0
    assert store.list_contacts(1, 10).total == 0


def test_delete_missing_id_leaves_table_alone(store, make_contact):
    make_contact(2)
    assert store.delete_contact(999) == 0
    assert store.list_contacts(1, 10).total == 2


def test_ids_are_not_reused(store):
    first = store.add_contact("A", "a@b.com", "1234567890")
    store.delete_contact(first.id)
    second = store.add_contact("A", "a@b.com", "1234567890")
    assert second.id > first.id


def test_falls_back_to_memory_when_file_cannot_open(tmp_path, caplog):
    # a directory where the database file should be
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    store = ContactStore(StoreConfig(path=str(blocked), fallback_to_memory=True))
    store.initialize()
    try:
        assert not store.persistent
        store.add_contact("A", "a@b.com", "1234567890")
        assert store.list_contacts(1, 10).total == 1
    finally:
        store.dispose()
    assert "Falling back to in-memory" in caplog.text


def test_open_failure_without_fallback(tmp_path):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    store = ContactStore(StoreConfig(path=str(blocked), fallback_to_memory=False))
    with pytest.raises(StorageFault):
        store.initialize()


def test_memory_path():
    store = ContactStore(StoreConfig(path=":memory:"))
    store.initialize()
    assert not store.persistent
    assert store.list_contacts(1, 10).total == 0


def test_operations_before_initialize_fault():
    store = ContactStore(StoreConfig(path=":memory:"))
    with pytest.raises(StorageFault):
        store.list_contacts(1, 10)


def test_home_relative_path_is_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    store = ContactStore(StoreConfig(path="~/sub/c.sqlite3", fallback_to_memory=False))
    store.initialize()
    try:
        assert store.persistent
        store.add_contact("A", "a@b.com", "1234567890")
        assert (tmp_path / "sub" / "c.sqlite3").exists()
    finally:
        store.dispose()


def test_failed_file_engine_is_disposed(tmp_path, monkeypatch):
    disposed = []
    monkeypatch.setattr(Engine, "dispose", lambda self, close=True: disposed.append(self.url.database))
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    store = ContactStore(StoreConfig(path=str(blocked), fallback_to_memory=True))
    store.initialize()
    assert disposed == [str(blocked)]
    assert not store.persistent


def test_delete_out_of_range_id(store, make_contact):
    make_contact(1)
    assert store.delete_contact(2**64) == 0
    assert store.list_contacts(1, 10).total == 1
