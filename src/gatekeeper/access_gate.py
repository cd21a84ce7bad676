"""Access/Pause Gate — capability-проверка и глобальный halt-флаг

Каждая мутирующая операция пула сначала проходит через evaluate().

Правила:
- DEPOSIT, PURCHASE, WITHDRAW: только не paused
- SETTLE: не paused + роль ORACLE
- SET_RESERVE_RATIO: роль ADMIN (paused не блокирует)
- PAUSE, UNPAUSE, GRANT_ROLE, REVOKE_ROLE: роль ADMIN (paused не блокирует)

Порядок проверок:
1. Pause флаг (только для операций, которые он блокирует)
2. Роль вызывающего
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set


class Role(str, Enum):
    ADMIN = "ADMIN"
    ORACLE = "ORACLE"


class Operation(str, Enum):
    DEPOSIT = "DEPOSIT"
    PURCHASE = "PURCHASE"
    SETTLE = "SETTLE"
    WITHDRAW = "WITHDRAW"
    SET_RESERVE_RATIO = "SET_RESERVE_RATIO"
    PAUSE = "PAUSE"
    UNPAUSE = "UNPAUSE"
    GRANT_ROLE = "GRANT_ROLE"
    REVOKE_ROLE = "REVOKE_ROLE"


# Операции, которые halt-флаг блокирует
PAUSABLE_OPERATIONS: FrozenSet[Operation] = frozenset(
    {Operation.DEPOSIT, Operation.PURCHASE, Operation.SETTLE, Operation.WITHDRAW}
)

# Требуемая роль (None — доступно любому аккаунту)
REQUIRED_ROLE: Dict[Operation, Optional[Role]] = {
    Operation.DEPOSIT: None,
    Operation.PURCHASE: None,
    Operation.WITHDRAW: None,
    Operation.SETTLE: Role.ORACLE,
    Operation.SET_RESERVE_RATIO: Role.ADMIN,
    Operation.PAUSE: Role.ADMIN,
    Operation.UNPAUSE: Role.ADMIN,
    Operation.GRANT_ROLE: Role.ADMIN,
    Operation.REVOKE_ROLE: Role.ADMIN,
}


@dataclass(frozen=True)
class GateResult:
    """Результат проверки gate."""

    allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    caller: str
    operation: Operation
    paused: bool

    details: str


@dataclass
class AccessGate:
    """Роли аккаунтов + halt-флаг.

    Gate не знает о капитале и полисах: только кто и когда может вызывать.
    """

    roles: Dict[str, Set[Role]] = field(default_factory=dict)
    paused: bool = False

    @classmethod
    def with_admin(cls, admin: str) -> "AccessGate":
        """Gate, где admin получает ADMIN и ORACLE."""
        return cls(roles={admin: {Role.ADMIN, Role.ORACLE}})

    # -------------------------------------------------------------------------
    # Capability checks
    # -------------------------------------------------------------------------

    def has_role(self, account: str, role: Role) -> bool:
        return role in self.roles.get(account, set())

    def is_authorized(self, caller: str, operation: Operation) -> bool:
        role = REQUIRED_ROLE[operation]
        return role is None or self.has_role(caller, role)

    def is_paused(self) -> bool:
        return self.paused

    def evaluate(self, caller: str, operation: Operation) -> GateResult:
        """Оценка допуска caller к operation."""
        if operation in PAUSABLE_OPERATIONS and self.paused:
            return GateResult(
                allowed=False,
                block_reason="paused",
                caller=caller,
                operation=operation,
                paused=self.paused,
                details=f"{operation.value} blocked: pool is paused",
            )

        if not self.is_authorized(caller, operation):
            required = REQUIRED_ROLE[operation]
            return GateResult(
                allowed=False,
                block_reason="unauthorized",
                caller=caller,
                operation=operation,
                paused=self.paused,
                details=f"{operation.value} requires role {required.value}, caller={caller}",
            )

        return GateResult(
            allowed=True,
            block_reason="",
            caller=caller,
            operation=operation,
            paused=self.paused,
            details=f"PASS: {operation.value} by {caller}",
        )

    # -------------------------------------------------------------------------
    # Mutations (вызываются пулом после evaluate)
    # -------------------------------------------------------------------------

    def set_paused(self, paused: bool) -> None:
        self.paused = paused

    def grant(self, account: str, role: Role) -> bool:
        """Выдать роль. Возвращает False, если роль уже была."""
        current = self.roles.setdefault(account, set())
        if role in current:
            return False
        current.add(role)
        return True

    def revoke(self, account: str, role: Role) -> bool:
        """Отозвать роль. Возвращает False, если роли не было."""
        current = self.roles.get(account, set())
        if role not in current:
            return False
        current.discard(role)
        if not current:
            self.roles.pop(account, None)
        return True
