"""
Domain models and value objects.

Contains fundamental domain entities like Policy, PoolState and pool events.
"""

from src.core.domain.events import (
    EventLog,
    EventType,
    LPDeposited,
    LPWithdrawn,
    PauseToggled,
    PolicyCreated,
    PolicySettled,
    PoolEvent,
    ReserveRatioChanged,
    RoleGranted,
    RoleRevoked,
)
from src.core.domain.policy import Policy, PolicyStatus
from src.core.domain.pool_state import Capital, Gate, PoolState, Shares

__all__ = [
    # Policy model
    "Policy",
    "PolicyStatus",
    # Pool state
    "PoolState",
    "Capital",
    "Shares",
    "Gate",
    # Events
    "EventLog",
    "EventType",
    "PoolEvent",
    "LPDeposited",
    "LPWithdrawn",
    "PolicyCreated",
    "PolicySettled",
    "PauseToggled",
    "ReserveRatioChanged",
    "RoleGranted",
    "RoleRevoked",
]
