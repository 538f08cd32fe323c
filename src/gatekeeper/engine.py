"""SDKGatekeeper — решение "активна ли фича" для текущей установки.

Порядок gates фиксирован, первый вынесший решение gate завершает оценку:
1. Неизвестная фича → отказ (fail closed), состояние не создается
2. GATE 0 Expiration → отказ, если срок истек
3. GATE 1 Traffic Percentage → verdict = bucket assignment
4. GATE 2 Custom Filter → verdict = предикат(device_id)
5. Ни одного правила → допуск
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from src.core.domain import DecisionRule, FeatureConfiguration, GatekeeperDecision
from src.gatekeeper.gates import Gate00Expiration, Gate01TrafficPercentage, Gate02CustomFilter
from src.storage.gatekeeper_storage import GatekeeperStorage

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SDKGatekeeper:
    """
    Gatekeeper для SDK / фич.

    Конфигурации регистрируются при старте приложения через configure(),
    затем SDK спрашивают should_allow(). Все durable состояние делегировано
    GatekeeperStorage.
    """

    def __init__(self, storage: GatekeeperStorage, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            storage: персистентный слой (device identity + состояние решений)
            clock: источник текущего времени
        """
        self.storage = storage
        self._clock = clock or _utc_now

        self._configurations: Dict[str, FeatureConfiguration] = {}
        self._configurations_lock = threading.Lock()

        self.gate00 = Gate00Expiration(storage)
        self.gate01 = Gate01TrafficPercentage(storage)
        self.gate02 = Gate02CustomFilter()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def configure(self, feature_name: str, configuration: FeatureConfiguration) -> None:
        """Зарегистрировать конфигурацию фичи (повторная регистрация перезаписывает)."""
        with self._configurations_lock:
            replaced = feature_name in self._configurations
            self._configurations[feature_name] = configuration

        logger.info(
            "%s gatekeeper configuration for %s: percentage=%s expiration_days=%s custom_filter=%s",
            "Replaced" if replaced else "Registered",
            feature_name,
            configuration.traffic_percentage,
            configuration.expiration_days,
            configuration.custom_filter is not None,
        )

    def configuration_for(self, feature_name: str) -> Optional[FeatureConfiguration]:
        with self._configurations_lock:
            return self._configurations.get(feature_name)

    # =========================================================================
    # DECISIONS
    # =========================================================================

    def should_allow(self, feature_name: str) -> bool:
        """True если фича активна для текущей установки."""
        return self.evaluate(feature_name).entry_allowed

    def evaluate(self, feature_name: str) -> GatekeeperDecision:
        """
        Оценка фичи с указанием правила, вынесшего решение.

        Raises:
            Любое исключение custom_filter пробрасывается без изменений
        """
        config = self.configuration_for(feature_name)
        if config is None:
            return self._decide(
                feature_name, False, DecisionRule.UNCONFIGURED, None,
                "Feature is not configured",
            )

        device_id = self.storage.get_or_create_device_id()

        # 1. Expiration (высший приоритет отказа)
        if config.expiration_days is not None:
            gate00_result = self.gate00.evaluate(device_id, config.expiration_days, self._clock())
            if not gate00_result.entry_allowed:
                return self._decide(
                    feature_name, False, DecisionRule.EXPIRATION, device_id,
                    gate00_result.details,
                )

        # 2. Percentage rollout
        if config.traffic_percentage is not None:
            gate01_result = self.gate01.evaluate(feature_name, device_id, config.traffic_percentage)
            return self._decide(
                feature_name, gate01_result.entry_allowed, DecisionRule.TRAFFIC_PERCENTAGE,
                device_id, gate01_result.details,
            )

        # 3. Custom filter
        if config.custom_filter is not None:
            gate02_result = self.gate02.evaluate(device_id, config.custom_filter)
            return self._decide(
                feature_name, gate02_result.entry_allowed, DecisionRule.CUSTOM_FILTER,
                device_id, gate02_result.details,
            )

        # 4. Default allow
        return self._decide(
            feature_name, True, DecisionRule.DEFAULT, device_id,
            "PASS: no blocking rule",
        )

    def _decide(
        self,
        feature_name: str,
        entry_allowed: bool,
        decided_by: DecisionRule,
        device_id: Optional[str],
        details: str,
    ) -> GatekeeperDecision:
        logger.debug(
            "Gatekeeper decision for %s: allowed=%s rule=%s (%s)",
            feature_name, entry_allowed, decided_by.value, details,
        )
        return GatekeeperDecision(
            feature_name=feature_name,
            entry_allowed=entry_allowed,
            decided_by=decided_by,
            device_id=device_id,
            details=details,
        )

    # =========================================================================
    # RESET
    # =========================================================================

    def reset(self) -> None:
        """Сбросить состояние решений текущего устройства (identity и конфигурации остаются)."""
        device_id = self.storage.get_or_create_device_id()
        self.storage.reset_device(device_id)
        logger.info("Reset gatekeeper decision state for device %s", device_id)

    def wipe_all(self) -> None:
        """Удалить все состояние Gatekeeper, включая device identity."""
        self.storage.wipe_all()
        logger.info("Wiped all gatekeeper state")
