"""
FeatureConfiguration — Конфигурация гейтинга для одной фичи / SDK

Immutable Pydantic модель с тремя независимыми опциональными правилами:
- traffic_percentage: стабильный percentage rollout (доля устройств, 0..100)
- expiration_days: срок жизни фичи с момента первого наблюдения устройства
- custom_filter: произвольный предикат над device_id

Конфигурация без правил разрешает фичу безусловно.
Диапазоны ограничивает builder (эта модель), engine их не перепроверяет.
"""

from typing import Callable, Optional

from pydantic import BaseModel, Field


# Предикат над device_id
CustomFilter = Callable[[str], bool]


class FeatureConfiguration(BaseModel):
    """
    Конфигурация гейтинга фичи.

    Порядок применения правил фиксирован (см. SDKGatekeeper):
    expiration > traffic_percentage > custom_filter > default-allow.
    """

    traffic_percentage: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Доля устройств в rollout, r < percentage при r ∈ [0, 100)",
    )
    expiration_days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Количество дней с первого наблюдения, после которых фича выключается",
    )
    custom_filter: Optional[CustomFilter] = Field(
        default=None,
        description="Предикат device_id -> bool",
    )

    model_config = {"frozen": True}

    @classmethod
    def percentage(cls, percentage: float) -> "FeatureConfiguration":
        """Конфигурация только с percentage rollout."""
        return cls(traffic_percentage=percentage)

    @classmethod
    def expiration(cls, days: int) -> "FeatureConfiguration":
        """Конфигурация только с expiration."""
        return cls(expiration_days=days)

    @classmethod
    def custom(cls, custom_filter: CustomFilter) -> "FeatureConfiguration":
        """Конфигурация только с custom filter."""
        return cls(custom_filter=custom_filter)

    @property
    def has_rules(self) -> bool:
        """True если задано хотя бы одно правило."""
        return (
            self.traffic_percentage is not None
            or self.expiration_days is not None
            or self.custom_filter is not None
        )
