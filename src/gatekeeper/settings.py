"""Настройки Gatekeeper и фабрика engine с backend по умолчанию."""

import os
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Optional

from src.gatekeeper.engine import SDKGatekeeper
from src.storage import (
    DEFAULT_KEY_PREFIX,
    GatekeeperStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)

ENV_KEY_PREFIX = "SDK_GATEKEEPER_KEY_PREFIX"
ENV_STORE_PATH = "SDK_GATEKEEPER_STORE_PATH"


@dataclass(frozen=True)
class GatekeeperSettings:
    """
    Конфигурация Gatekeeper.

    key_prefix: namespace ключей в хранилище
    store_path: JSON файл состояния; None → состояние только в памяти процесса
    """

    key_prefix: str = DEFAULT_KEY_PREFIX
    store_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GatekeeperSettings":
        env = os.environ if environ is None else environ
        store_path = env.get(ENV_STORE_PATH)
        return cls(
            key_prefix=env.get(ENV_KEY_PREFIX) or DEFAULT_KEY_PREFIX,
            store_path=Path(store_path) if store_path else None,
        )


def create_store(settings: GatekeeperSettings) -> KeyValueStore:
    """Backend по умолчанию: JSON файл если задан store_path, иначе память."""
    if settings.store_path is not None:
        return JsonFileKeyValueStore(settings.store_path)
    return InMemoryKeyValueStore()


def create_gatekeeper(
    settings: Optional[GatekeeperSettings] = None,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
    id_factory: Optional[Callable[[], str]] = None,
    rng: Optional[random.Random] = None,
) -> SDKGatekeeper:
    """
    Собрать SDKGatekeeper.

    Создается один раз при старте приложения, до инициализации SDK,
    и передается тем, кому нужны решения.
    """
    settings = settings or GatekeeperSettings()
    storage = GatekeeperStorage(
        store if store is not None else create_store(settings),
        key_prefix=settings.key_prefix,
        id_factory=id_factory,
        rng=rng,
    )
    return SDKGatekeeper(storage, clock=clock)
