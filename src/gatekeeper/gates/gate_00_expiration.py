"""GATE 0: Expiration

Первый gate в цепочке (высший приоритет отказа):
- Первая проверка для устройства записывает first-seen и пропускает
  (новое наблюдение никогда не считается истекшим)
- Далее deadline = first_seen + expiration_days дней
- now > deadline (строго) → блокировка, остальные gates не вызываются
- now == deadline → пропуск
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from src.storage.gatekeeper_storage import GatekeeperStorage


def expiration_deadline(start: datetime, expiration_days: int) -> datetime:
    """start + expiration_days; за пределами календаря → datetime.max (не истекает)."""
    try:
        return start + timedelta(days=expiration_days)
    except OverflowError:
        return datetime.max.replace(tzinfo=start.tzinfo)


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    # True если first-seen был записан этой проверкой
    first_observation: bool
    first_seen_at: datetime
    deadline: datetime

    details: str


class Gate00Expiration:
    """GATE 0: expiration с момента первого наблюдения устройства."""

    def __init__(self, storage: GatekeeperStorage):
        self.storage = storage

    def evaluate(self, device_id: str, expiration_days: int, now: datetime) -> Gate00Result:
        """
        Args:
            device_id: идентификатор устройства
            expiration_days: срок жизни фичи в днях
            now: текущее время

        Returns:
            Gate00Result с решением о допуске
        """
        previous: Optional[datetime] = self.storage.record_first_seen_if_absent(device_id, now)

        if previous is None:
            return Gate00Result(
                entry_allowed=True,
                block_reason="",
                first_observation=True,
                first_seen_at=now,
                deadline=expiration_deadline(now, expiration_days),
                details=f"First observation recorded at {now.isoformat()}",
            )

        deadline = expiration_deadline(previous, expiration_days)
        if now > deadline:
            return Gate00Result(
                entry_allowed=False,
                block_reason="expired",
                first_observation=False,
                first_seen_at=previous,
                deadline=deadline,
                details=f"Expired: deadline {deadline.isoformat()} < now {now.isoformat()}",
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            first_observation=False,
            first_seen_at=previous,
            deadline=deadline,
            details=f"PASS: deadline {deadline.isoformat()}",
        )
