"""
Tests for file-backed durable storage.

Each browser gets its own file, selected by a token cookie; two browsers
on the same dashboard host never see each other's snapshot.
"""

import asyncio

import pytest

from mindthegap.models.donation import Snapshot
from mindthegap.services.persistence import (
    BrowserScopedStorage,
    InMemoryClientEnvironment,
    JsonFileStorage,
    LocalPersistenceAdapter,
    is_browser_token,
)
from tests.conftest import make_fields


class BrowserEnvironment(InMemoryClientEnvironment):
    """In-memory browser whose durable storage lives on disk, per browser."""

    def __init__(self, directory, **kwargs):
        super().__init__(**kwargs)
        self.files = BrowserScopedStorage(directory, cookies=self)

    def read_storage(self, key):
        return self.files.read(key)

    def write_storage(self, key, value):
        self.files.write(key, value)


class TestJsonFileStorage:

    def test_missing_file_reads_none(self, tmp_path):
        assert JsonFileStorage(tmp_path / "none.json").read("k") is None

    def test_write_then_read(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "nested" / "store.json")
        storage.write("a", "1")
        storage.write("b", "2")
        assert storage.read("a") == "1"
        assert storage.read("b") == "2"
        assert [p.name for p in storage.path.parent.iterdir()] == ["store.json"]

    def test_corrupt_file_raises_on_read(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileStorage(path).read("k")

    def test_corrupt_file_is_replaced_on_write(self, tmp_path):
        """A damaged file does not block later writes."""
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        storage = JsonFileStorage(path)
        storage.write("k", "v")
        assert storage.read("k") == "v"


class TestBrowserScopedStorage:

    def test_first_visit_mints_token_cookie(self, tmp_path):
        browser = InMemoryClientEnvironment()
        files = BrowserScopedStorage(tmp_path, cookies=browser)

        token = files.token()
        assert is_browser_token(token)
        assert browser.cookies["mindthegap_browser"] == token
        assert files.token() == token
        assert len(browser.cookie_headers) == 1

    def test_tampered_token_is_replaced(self, tmp_path):
        browser = InMemoryClientEnvironment(cookies={"mindthegap_browser": "../../etc/passwd"})
        files = BrowserScopedStorage(tmp_path, cookies=browser)
        files.write("k", "v")

        token = browser.cookies["mindthegap_browser"]
        assert is_browser_token(token)
        assert [p.name for p in tmp_path.iterdir()] == [f"{token}.json"]

    def test_browsers_get_separate_files(self, tmp_path):
        alice = BrowserScopedStorage(tmp_path, cookies=InMemoryClientEnvironment())
        bob = BrowserScopedStorage(tmp_path, cookies=InMemoryClientEnvironment())
        alice.write("k", "alice")
        assert bob.read("k") is None
        assert alice.read("k") == "alice"

    def test_returning_browser_finds_its_data(self, tmp_path):
        first = InMemoryClientEnvironment()
        BrowserScopedStorage(tmp_path, cookies=first).write("k", "v")

        returning = InMemoryClientEnvironment(cookies=dict(first.cookies))
        assert BrowserScopedStorage(tmp_path, cookies=returning).read("k") == "v"


class TestLocalModeIsolation:

    def test_snapshot_not_visible_to_other_browser(self, tmp_path, app_settings):
        alice = LocalPersistenceAdapter(BrowserEnvironment(tmp_path), app_settings)
        asyncio.run(alice.load())
        asyncio.run(alice.save_income(91000))
        asyncio.run(alice.add_donation(make_fields("Alice private charity", 50, "monthly")))

        bob = LocalPersistenceAdapter(BrowserEnvironment(tmp_path), app_settings)
        assert asyncio.run(bob.load()) == Snapshot()

    def test_snapshot_survives_reload_in_same_browser(self, tmp_path, app_settings):
        environment = BrowserEnvironment(tmp_path)
        adapter = LocalPersistenceAdapter(environment, app_settings)
        asyncio.run(adapter.load())
        asyncio.run(adapter.save_income(91000))

        reloaded = BrowserEnvironment(tmp_path, cookies=dict(environment.cookies))
        snapshot = asyncio.run(LocalPersistenceAdapter(reloaded, app_settings).load())
        assert snapshot.annual_income == 91000
