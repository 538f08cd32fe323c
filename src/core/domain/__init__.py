"""
Domain models and value objects.

Contains feature configurations and gating decisions.
"""

from src.core.domain.feature_configuration import CustomFilter, FeatureConfiguration
from src.core.domain.gate_decision import DecisionRule, GatekeeperDecision

__all__ = [
    "CustomFilter",
    "FeatureConfiguration",
    "DecisionRule",
    "GatekeeperDecision",
]
