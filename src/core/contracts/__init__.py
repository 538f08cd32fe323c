"""
Contract Validation Module

Модуль для валидации JSON контрактов SDK Gatekeeper.
"""

from .validators import (
    ContractValidator,
    GatekeeperStoreValidator,
    SchemaLoader,
    validate_gatekeeper_store,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "GatekeeperStoreValidator",
    # Functions
    "validate_gatekeeper_store",
]
