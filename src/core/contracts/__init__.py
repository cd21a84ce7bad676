"""
Contract Validation Module

Валидация JSON контрактов пула.
"""

from .validators import (
    CONTRACTS,
    POLICY,
    POOL_EVENT,
    POOL_STATE,
    SCHEMA_DIR,
    contract_validator,
    validate_policy,
    validate_pool_event,
    validate_pool_state,
)

__all__ = [
    "CONTRACTS",
    "POLICY",
    "POOL_EVENT",
    "POOL_STATE",
    "SCHEMA_DIR",
    "contract_validator",
    "validate_pool_state",
    "validate_policy",
    "validate_pool_event",
]
