import json

from client import FileTokenStore, MemoryTokenStore, default_token_store
from client import tokens


def test_memory_store_lifecycle():
    store = MemoryTokenStore()
    assert store.get_token() is None

    store.set_token("abc")
    assert store.get_token() == "abc"

    store.clear_token()
    assert store.get_token() is None


def test_file_store_persists_under_auth_token_key(tmp_path):
    path = tmp_path / "state" / "storage.json"
    store = FileTokenStore(path)
    assert store.get_token() is None

    store.set_token("persisted")

    assert json.loads(path.read_text(encoding="utf-8")) == {"authToken": "persisted"}
    assert FileTokenStore(path).get_token() == "persisted"


def test_file_store_clear_keeps_other_keys(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"authToken": "x", "theme": "dark"}), encoding="utf-8")
    store = FileTokenStore(path)

    store.clear_token()

    assert store.get_token() is None
    assert json.loads(path.read_text(encoding="utf-8")) == {"theme": "dark"}


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert FileTokenStore(path).get_token() is None


def test_default_store_is_process_wide_memory_store():
    assert default_token_store() is default_token_store()
    assert default_token_store() is tokens._memory_store


def test_default_store_uses_file_when_configured(tmp_path, monkeypatch):
    monkeypatch.setenv("AUTH_TOKEN_FILE", str(tmp_path / "token.json"))

    store = default_token_store()

    assert isinstance(store, FileTokenStore)
    assert store.path == tmp_path / "token.json"
