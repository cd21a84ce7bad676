"""Gatekeeper — допуск вызывающих к мутирующим операциям пула.

- Глобальный halt-флаг (pause)
- Роли ADMIN / ORACLE
"""

from .access_gate import AccessGate, GateResult, Operation, Role

__all__ = [
    "AccessGate",
    "GateResult",
    "Operation",
    "Role",
]
