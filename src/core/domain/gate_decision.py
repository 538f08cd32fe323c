"""
GatekeeperDecision — Итоговое решение Gatekeeper по фиче

Фиксирует не только verdict, но и правило, которое его вынесло,
чтобы решения можно было диагностировать без повторной оценки.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DecisionRule(str, Enum):
    """Правило, вынесшее решение."""

    UNCONFIGURED = "UNCONFIGURED"
    EXPIRATION = "EXPIRATION"
    TRAFFIC_PERCENTAGE = "TRAFFIC_PERCENTAGE"
    CUSTOM_FILTER = "CUSTOM_FILTER"
    DEFAULT = "DEFAULT"


@dataclass(frozen=True)
class GatekeeperDecision:
    """Результат оценки фичи."""

    feature_name: str
    entry_allowed: bool
    decided_by: DecisionRule

    # None для неизвестной фичи (identity не резолвится)
    device_id: Optional[str]

    # Детали
    details: str
