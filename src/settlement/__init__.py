"""Settlement — пакетное урегулирование полисов."""

from .engine import ItemOutcome, SettlementEngine, SettlementItem, SettlementResult

__all__ = [
    "ItemOutcome",
    "SettlementEngine",
    "SettlementItem",
    "SettlementResult",
]
