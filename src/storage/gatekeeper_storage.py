"""
GatekeeperStorage — Device identity и персистентное состояние решений

Ключи (namespace по умолчанию "com.sdkgatekeeper"):
- <ns>.deviceId
- <ns>.firstSeen.<deviceId>
- <ns>.percentage.<featureName>.<deviceId>

Инварианты:
- deviceId создается один раз и меняется только после wipe_all()
- bucket assignment для (feature, device) разыгрывается не более одного раза;
  последующие вызовы возвращают сохраненное значение независимо от percentage
- get-or-insert операции атомарны в пределах ключа (lock striping: фиксированный пул locks, выбор по hash ключа)
"""

import logging
import random
import threading
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from src.storage.key_value import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "com.sdkgatekeeper"

# Критические секции по ключам не вкладываются друг в друга
KEY_LOCK_STRIPES = 64


def _default_device_id() -> str:
    return str(uuid.uuid4()).upper()


class GatekeeperStorage:
    """Namespacing и durability состояния Gatekeeper поверх KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        id_factory: Optional[Callable[[], str]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            store: бэкенд хранения
            key_prefix: namespace всех ключей
            id_factory: генератор глобально уникального device_id
            rng: источник случайности для bucket assignment
        """
        self.store = store
        self.key_prefix = key_prefix
        self._id_factory = id_factory or _default_device_id
        self._rng = rng or random.Random()

        self._key_locks: List[threading.Lock] = [threading.Lock() for _ in range(KEY_LOCK_STRIPES)]

    # =========================================================================
    # KEYS
    # =========================================================================

    @property
    def device_id_key(self) -> str:
        return f"{self.key_prefix}.deviceId"

    def first_seen_key(self, device_id: str) -> str:
        return f"{self.key_prefix}.firstSeen.{device_id}"

    def percentage_key(self, feature_name: str, device_id: str) -> str:
        return f"{self.key_prefix}.percentage.{feature_name}.{device_id}"

    def _lock_for(self, key: str) -> threading.Lock:
        return self._key_locks[hash(key) % len(self._key_locks)]

    # =========================================================================
    # DEVICE IDENTITY
    # =========================================================================

    def get_or_create_device_id(self) -> str:
        """Вернуть сохраненный device_id или создать и сохранить новый."""
        key = self.device_id_key
        with self._lock_for(key):
            existing = self.store.get(key)
            if isinstance(existing, str) and existing:
                return existing

            device_id = self._id_factory()
            self.store.set(key, device_id)
            logger.info("Created gatekeeper device identity %s", device_id)
            return device_id

    # =========================================================================
    # FIRST SEEN
    # =========================================================================

    def get_first_seen(self, device_id: str) -> Optional[datetime]:
        value = self.store.get(self.first_seen_key(device_id))
        return value if isinstance(value, datetime) else None

    def set_first_seen(self, device_id: str, ts: datetime) -> None:
        self.store.set(self.first_seen_key(device_id), ts)

    def record_first_seen_if_absent(self, device_id: str, ts: datetime) -> Optional[datetime]:
        """
        Атомарный get-or-insert для first-seen.

        Returns:
            Ранее сохраненный timestamp, либо None если ts только что записан
        """
        key = self.first_seen_key(device_id)
        with self._lock_for(key):
            existing = self.get_first_seen(device_id)
            if existing is not None:
                return existing
            self.set_first_seen(device_id, ts)
            return None

    # =========================================================================
    # PERCENTAGE BUCKET
    # =========================================================================

    def get_bucket_assignment(self, feature_name: str, device_id: str) -> Optional[bool]:
        value = self.store.get(self.percentage_key(feature_name, device_id))
        return value if isinstance(value, bool) else None

    def assign_bucket(self, feature_name: str, device_id: str, percentage: float) -> bool:
        """
        Bucket assignment для (feature, device).

        Если assignment уже есть, он возвращается без изменений, percentage
        игнорируется. Иначе r ∈ [0, 100), included = r < percentage.
        """
        key = self.percentage_key(feature_name, device_id)
        with self._lock_for(key):
            existing = self.get_bucket_assignment(feature_name, device_id)
            if existing is not None:
                return existing

            draw = self._rng.random() * 100.0
            included = draw < percentage
            self.store.set(key, included)
            logger.debug(
                "Bucket draw for %s/%s: r=%.4f percentage=%s included=%s",
                feature_name, device_id, draw, percentage, included,
            )
            return included

    # =========================================================================
    # RESET / WIPE
    # =========================================================================

    def reset_device(self, device_id: str) -> None:
        """Удалить first-seen и все bucket assignments устройства."""
        self.store.remove(self.first_seen_key(device_id))

        percentage_prefix = f"{self.key_prefix}.percentage."
        device_suffix = f".{device_id}"
        for key in self.store.keys():
            if key.startswith(percentage_prefix) and key.endswith(device_suffix):
                self.store.remove(key)

    def wipe_all(self) -> None:
        """Удалить все ключи namespace, включая device_id."""
        namespace = f"{self.key_prefix}."
        for key in self.store.keys():
            if key.startswith(namespace):
                self.store.remove(key)
