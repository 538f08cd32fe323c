"""Gatekeeper — решения о допуске SDK / фич для текущей установки.

- Фиксированный порядок gates: expiration > percentage > custom filter > default
- Неизвестные фичи запрещены (fail closed)
- Решения стабильны между перезапусками через GatekeeperStorage
"""

from .engine import SDKGatekeeper
from .settings import GatekeeperSettings, create_gatekeeper, create_store

__all__ = [
    "SDKGatekeeper",
    "GatekeeperSettings",
    "create_gatekeeper",
    "create_store",
]
