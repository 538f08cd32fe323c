"""GATE 1: Traffic Percentage

Вызывается только если GATE 0 не заблокировал.
Verdict = сохраненный bucket assignment для (feature, device); при первом
обращении assignment разыгрывается и замораживается навсегда, даже если
traffic_percentage позже изменится. Результат gate завершает оценку.
"""

from dataclasses import dataclass

from src.storage.gatekeeper_storage import GatekeeperStorage


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str
    traffic_percentage: float
    details: str


class Gate01TrafficPercentage:
    """GATE 1: стабильный percentage rollout."""

    def __init__(self, storage: GatekeeperStorage):
        self.storage = storage

    def evaluate(self, feature_name: str, device_id: str, traffic_percentage: float) -> Gate01Result:
        included = self.storage.assign_bucket(feature_name, device_id, traffic_percentage)

        if not included:
            return Gate01Result(
                entry_allowed=False,
                block_reason="outside_rollout_bucket",
                traffic_percentage=traffic_percentage,
                details=f"Device outside {traffic_percentage}% rollout bucket",
            )

        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            traffic_percentage=traffic_percentage,
            details=f"PASS: device inside {traffic_percentage}% rollout bucket",
        )
