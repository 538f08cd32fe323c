"""Gates — индивидуальные правила Gatekeeper.

- GATE 0: Expiration (first-seen + N дней)
- GATE 1: Traffic Percentage (замороженный bucket assignment)
- GATE 2: Custom Filter (предикат над device_id)
"""

from .gate_00_expiration import Gate00Expiration, Gate00Result
from .gate_01_traffic_percentage import Gate01TrafficPercentage, Gate01Result
from .gate_02_custom_filter import Gate02CustomFilter, Gate02Result

__all__ = [
    "Gate00Expiration",
    "Gate00Result",
    "Gate01TrafficPercentage",
    "Gate01Result",
    "Gate02CustomFilter",
    "Gate02Result",
]
