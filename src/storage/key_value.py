"""
Key-Value Store — Бэкенды хранения состояния Gatekeeper

Контракт KeyValueStore: get / set / remove / keys по строковому ключу.
Поддерживаемые значения: str, bool, datetime.

Реализации:
- InMemoryKeyValueStore: состояние живет в пределах процесса
- JsonFileKeyValueStore: состояние переживает перезапуск процесса

Политика отказов: недоступное или поврежденное хранилище деградирует
до "значение отсутствует". Ошибки записи логируются, значение остается
в памяти до следующей успешной записи.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from jsonschema import ValidationError

from src.core.contracts import validate_gatekeeper_store

logger = logging.getLogger(__name__)

StoreValue = Union[str, bool, datetime]

STORE_DOCUMENT_VERSION = 1


class KeyValueStore(Protocol):
    """Минимальный контракт хранилища, который требуется Gatekeeper."""

    def get(self, key: str) -> Optional[StoreValue]:
        ...

    def set(self, key: str, value: StoreValue) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


# =============================================================================
# IN-MEMORY
# =============================================================================


class InMemoryKeyValueStore:
    """Хранилище в памяти процесса."""

    def __init__(self, initial: Optional[Dict[str, StoreValue]] = None):
        self._lock = threading.RLock()
        self._data: Dict[str, StoreValue] = dict(initial or {})

    def get(self, key: str) -> Optional[StoreValue]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: StoreValue) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())


# =============================================================================
# JSON FILE
# =============================================================================


def encode_value(value: StoreValue) -> Any:
    """Кодирование значения в JSON-совместимый вид (datetime → tagged dict)."""
    if isinstance(value, datetime):
        return {"type": "datetime", "value": value.isoformat()}
    return value


def decode_value(raw: Any) -> Optional[StoreValue]:
    """Обратное преобразование; нераспознанное значение → None.

    Naive timestamp считается UTC.
    """
    if isinstance(raw, (str, bool)):
        return raw
    if isinstance(raw, dict) and raw.get("type") == "datetime":
        try:
            value = datetime.fromisoformat(raw["value"])
        except (KeyError, TypeError, ValueError):
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
    return None


class JsonFileKeyValueStore:
    """
    Хранилище в JSON файле.

    Документ: {"version": 1, "entries": {key: value}}, контракт
    gatekeeper_store.json. Каждый set/remove перезаписывает файл атомарно
    (временный файл + os.replace).
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._data: Dict[str, StoreValue] = self._load()

    def get(self, key: str) -> Optional[StoreValue]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: StoreValue) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())

    def _load(self) -> Dict[str, StoreValue]:
        if not self.path.exists():
            return {}

        # ValueError покрывает JSONDecodeError и UnicodeDecodeError
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
            validate_gatekeeper_store(document)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Gatekeeper store %s is unusable, starting empty: %s", self.path, e)
            return {}

        data: Dict[str, StoreValue] = {}
        for key, raw in document["entries"].items():
            value = decode_value(raw)
            if value is not None:
                data[key] = value
        return data

    def _flush(self) -> None:
        document = {
            "version": STORE_DOCUMENT_VERSION,
            "entries": {key: encode_value(value) for key, value in self._data.items()},
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, sort_keys=True)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.warning("Failed to persist gatekeeper store %s: %s", self.path, e)
