"""Tests for the session store and its token storage."""

import json

from habitsync.services.session import MemoryTokenStorage, SessionStore, TokenStorage


class TestTokenStorage:
    """Tests for the JSON token file."""

    def test_round_trip_and_delete(self, tmp_path) -> None:
        storage = TokenStorage(tmp_path / "nested" / "session.json")

        assert storage.read() is None
        storage.write("tok")
        assert json.loads(storage.path.read_text()) == {"token": "tok"}
        assert storage.read() == "tok"
        assert storage.delete() is True
        assert storage.delete() is False
        assert storage.read() is None

    def test_corrupt_file_reads_as_no_token(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert TokenStorage(path).read() is None


class TestSessionStore:
    """Tests for SessionStore."""

    def test_token_survives_restart(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        SessionStore(TokenStorage(path)).set_token("tok")

        restarted = SessionStore(TokenStorage(path))

        assert restarted.is_authenticated
        assert restarted.get_token() == "tok"

    def test_clear_removes_token(self, tmp_path) -> None:
        store = SessionStore(TokenStorage(tmp_path / "session.json"))
        store.set_token("tok")

        assert store.clear() is True
        assert store.get_token() is None
        assert not store.is_authenticated
        assert SessionStore(TokenStorage(tmp_path / "session.json")).get_token() is None

    def test_clear_is_idempotent(self) -> None:
        store = SessionStore(MemoryTokenStorage())
        assert store.clear() is False
        assert store.clear() is False

    def test_generation_changes_on_set_and_clear(self) -> None:
        store = SessionStore(MemoryTokenStorage())
        start = store.generation

        store.set_token("a")
        after_set = store.generation
        store.clear()
        after_clear = store.generation
        store.clear()

        assert start < after_set < after_clear
        assert store.generation == after_clear
