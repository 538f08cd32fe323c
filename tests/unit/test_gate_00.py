"""Unit тесты для GATE 0: Expiration.

Coverage:
- Первое наблюдение записывает first-seen и пропускает
- Граница deadline (строгое "после")
- Истечение → блокировка
- expiration_days = 0
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.gatekeeper.gates.gate_00_expiration import Gate00Expiration
from src.storage import GatekeeperStorage, InMemoryKeyValueStore

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    return GatekeeperStorage(InMemoryKeyValueStore())


@pytest.fixture
def gate00(storage):
    return Gate00Expiration(storage)


def test_gate00_first_observation_passes(gate00, storage):
    result = gate00.evaluate("D", expiration_days=7, now=T0)

    assert result.entry_allowed is True
    assert result.first_observation is True
    assert result.first_seen_at == T0
    assert result.deadline == T0 + timedelta(days=7)
    assert storage.get_first_seen("D") == T0


def test_gate00_within_window_passes(gate00):
    gate00.evaluate("D", expiration_days=7, now=T0)

    result = gate00.evaluate("D", expiration_days=7, now=T0 + timedelta(days=3))

    assert result.entry_allowed is True
    assert result.first_observation is False
    assert "PASS" in result.details


def test_gate00_exact_deadline_passes(gate00):
    gate00.evaluate("D", expiration_days=7, now=T0)

    result = gate00.evaluate("D", expiration_days=7, now=T0 + timedelta(days=7))

    assert result.entry_allowed is True


def test_gate00_after_deadline_blocks(gate00):
    gate00.evaluate("D", expiration_days=7, now=T0)

    result = gate00.evaluate("D", expiration_days=7, now=T0 + timedelta(days=7, seconds=1))

    assert result.entry_allowed is False
    assert result.block_reason == "expired"
    assert "Expired" in result.details


def test_gate00_first_seen_not_overwritten(gate00, storage):
    gate00.evaluate("D", expiration_days=7, now=T0)
    gate00.evaluate("D", expiration_days=7, now=T0 + timedelta(days=2))

    assert storage.get_first_seen("D") == T0


def test_gate00_zero_days(gate00):
    assert gate00.evaluate("D", expiration_days=0, now=T0).entry_allowed is True
    assert gate00.evaluate("D", expiration_days=0, now=T0).entry_allowed is True
    assert gate00.evaluate("D", expiration_days=0, now=T0 + timedelta(microseconds=1)).entry_allowed is False


def test_gate00_huge_expiration_never_expires(gate00):
    first = gate00.evaluate("D", expiration_days=3_000_000, now=T0)
    later = gate00.evaluate("D", expiration_days=3_000_000, now=T0 + timedelta(days=365 * 50))

    assert first.entry_allowed is True
    assert first.deadline == datetime.max.replace(tzinfo=timezone.utc)
    assert later.entry_allowed is True


def test_gate00_timedelta_limit_never_expires(gate00):
    result = gate00.evaluate("D", expiration_days=10**12, now=T0)

    assert result.entry_allowed is True
    assert result.deadline.year == 9999
