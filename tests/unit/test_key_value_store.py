"""Unit тесты для KeyValueStore бэкендов и контракта gatekeeper_store.

Coverage:
- InMemoryKeyValueStore get/set/remove/keys
- JsonFileKeyValueStore: durability между экземплярами, datetime значения
- Деградация до пустого хранилища при поврежденном файле
- JSON Schema контракт документа
"""

import json
from datetime import datetime, timezone

import pytest
from jsonschema import ValidationError

from src.core.contracts import GatekeeperStoreValidator, validate_gatekeeper_store
from src.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "state" / "gatekeeper.json"


# =============================================================================
# IN-MEMORY
# =============================================================================


def test_in_memory_roundtrip():
    store = InMemoryKeyValueStore()
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)

    store.set("a", "value")
    store.set("b", False)
    store.set("c", ts)

    assert store.get("a") == "value"
    assert store.get("b") is False
    assert store.get("c") == ts
    assert sorted(store.keys()) == ["a", "b", "c"]


def test_in_memory_missing_and_remove():
    store = InMemoryKeyValueStore({"a": "x"})

    assert store.get("missing") is None
    store.remove("a")
    store.remove("missing")
    assert store.get("a") is None
    assert store.keys() == []


# =============================================================================
# JSON FILE
# =============================================================================


def test_json_store_persists_across_instances(store_path):
    ts = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)

    first = JsonFileKeyValueStore(store_path)
    first.set("ns.deviceId", "DEVICE-1")
    first.set("ns.percentage.sdk.DEVICE-1", True)
    first.set("ns.firstSeen.DEVICE-1", ts)

    second = JsonFileKeyValueStore(store_path)

    assert second.get("ns.deviceId") == "DEVICE-1"
    assert second.get("ns.percentage.sdk.DEVICE-1") is True
    assert second.get("ns.firstSeen.DEVICE-1") == ts


def test_json_store_false_value_persists(store_path):
    JsonFileKeyValueStore(store_path).set("flag", False)

    assert JsonFileKeyValueStore(store_path).get("flag") is False


def test_json_store_remove_persists(store_path):
    store = JsonFileKeyValueStore(store_path)
    store.set("a", "1")
    store.set("b", "2")
    store.remove("a")

    reloaded = JsonFileKeyValueStore(store_path)
    assert reloaded.keys() == ["b"]


def test_json_store_document_matches_contract(store_path):
    store = JsonFileKeyValueStore(store_path)
    store.set("s", "x")
    store.set("b", True)
    store.set("t", datetime(2024, 1, 1, tzinfo=timezone.utc))

    document = json.loads(store_path.read_text(encoding="utf-8"))

    validate_gatekeeper_store(document)
    assert document["version"] == 1
    assert document["entries"]["t"]["type"] == "datetime"


def test_json_store_corrupted_file_starts_empty(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json", encoding="utf-8")

    store = JsonFileKeyValueStore(store_path)

    assert store.keys() == []
    store.set("a", "1")
    assert JsonFileKeyValueStore(store_path).get("a") == "1"


def test_json_store_invalid_utf8_starts_empty(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_bytes(b'{"version": 1, "entries": {"a": "\xff\xfe"}}')

    store = JsonFileKeyValueStore(store_path)

    assert store.keys() == []
    store.set("a", "1")
    assert JsonFileKeyValueStore(store_path).get("a") == "1"


def test_json_store_naive_datetime_read_as_utc(store_path):
    store_path.parent.mkdir(parents=True)
    document = {
        "version": 1,
        "entries": {"t": {"type": "datetime", "value": "2024-01-01T00:00:00"}},
    }
    store_path.write_text(json.dumps(document), encoding="utf-8")

    value = JsonFileKeyValueStore(store_path).get("t")

    assert value == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert value.tzinfo is not None


def test_json_store_contract_violation_starts_empty(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps({"version": 1, "entries": {"a": 42}}), encoding="utf-8")

    assert JsonFileKeyValueStore(store_path).keys() == []


# =============================================================================
# CONTRACT
# =============================================================================


def test_contract_rejects_missing_entries():
    with pytest.raises(ValidationError):
        validate_gatekeeper_store({"version": 1})


def test_contract_rejects_unknown_version():
    with pytest.raises(ValidationError):
        GatekeeperStoreValidator().validate({"version": 2, "entries": {}})


def test_contract_rejects_malformed_datetime_entry():
    with pytest.raises(ValidationError):
        GatekeeperStoreValidator().validate({"version": 1, "entries": {"t": {"type": "datetime"}}})
