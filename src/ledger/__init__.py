"""Ledger — реестры состояния пула (капитал, LP shares, полисы)."""

from .capital_ledger import CapitalLedger
from .policy_registry import PolicyRegistry
from .share_registry import ShareRegistry

__all__ = [
    "CapitalLedger",
    "PolicyRegistry",
    "ShareRegistry",
]
