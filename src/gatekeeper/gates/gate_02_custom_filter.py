"""GATE 2: Custom Filter

Вызывается только если GATE 0 и GATE 1 не вынесли решение.
Предикат получает только device_id. Исключения предиката не перехватываются
и не ретраятся, они уходят вызывающему коду как есть.
"""

from dataclasses import dataclass

from src.core.domain.feature_configuration import CustomFilter


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str
    details: str


class Gate02CustomFilter:
    """GATE 2: caller-supplied предикат (stateless)."""

    def evaluate(self, device_id: str, custom_filter: CustomFilter) -> Gate02Result:
        allowed = bool(custom_filter(device_id))

        if not allowed:
            return Gate02Result(
                entry_allowed=False,
                block_reason="custom_filter_rejected",
                details="Custom filter rejected device",
            )

        return Gate02Result(
            entry_allowed=True,
            block_reason="",
            details="PASS: custom filter accepted device",
        )
