"""Внешние порты пула: перевод стоимости и время."""

from .clock import Clock, ManualClock, SystemClock
from .transfer import InMemoryTransferPort, TransferResult, ValueTransferPort

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "InMemoryTransferPort",
    "TransferResult",
    "ValueTransferPort",
]
