"""
Value Transfer Port — граница эффектов для перемещения стоимости

Пул не знает, как именно двигаются токены. Он вызывает порт и получает
явный TransferResult (успех/отказ). Порт не хранит состояния страхового
домена.

- pull(account, amount): списать с account в пользу пула
- push(account, amount): выплатить из пула на account

InMemoryTransferPort — реализация для тестов и локального запуска:
балансы, allowance (как у ERC20 approve/transferFrom) и инъекция отказов.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Set, Tuple

from src.core.math.basis_points import validate_amount

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class TransferResult:
    """Результат перевода."""

    ok: bool
    reason: str = ""

    @classmethod
    def success(cls) -> "TransferResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> "TransferResult":
        return cls(ok=False, reason=reason)


# =============================================================================
# PORT
# =============================================================================


class ValueTransferPort(Protocol):
    def pull(self, account: str, amount: int) -> TransferResult:
        ...

    def push(self, account: str, amount: int) -> TransferResult:
        ...


class InMemoryTransferPort:
    """
    Токен в памяти с балансами и allowance в пользу пула.

    pull требует balance >= amount и allowance >= amount (если
    require_allowance=True). Аккаунты из fail_pull_for / fail_push_for
    всегда получают отказ.
    """

    def __init__(self, pool_account: str = "pool", require_allowance: bool = True):
        self.pool_account = pool_account
        self.require_allowance = require_allowance
        self.balances: Dict[str, int] = {}
        self.allowances: Dict[str, int] = {}
        self.fail_pull_for: Set[str] = set()
        self.fail_push_for: Set[str] = set()
        self.history: list[Tuple[str, str, int]] = []

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    def mint(self, account: str, amount: int) -> None:
        validate_amount(amount)
        self.balances[account] = self.balances.get(account, 0) + amount

    def approve(self, account: str, amount: int) -> None:
        validate_amount(amount, allow_zero=True)
        self.allowances[account] = amount

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def allowance(self, account: str) -> int:
        return self.allowances.get(account, 0)

    # -------------------------------------------------------------------------
    # Port
    # -------------------------------------------------------------------------

    def pull(self, account: str, amount: int) -> TransferResult:
        reason = self._check_pull(account, amount)
        if reason:
            logger.warning("Pull rejected: account=%s amount=%d reason=%s", account, amount, reason)
            return TransferResult.failure(reason)

        if self.require_allowance:
            self.allowances[account] -= amount
        self._move(account, self.pool_account, amount)
        self.history.append(("pull", account, amount))
        return TransferResult.success()

    def push(self, account: str, amount: int) -> TransferResult:
        reason = self._check_push(account, amount)
        if reason:
            logger.warning("Push rejected: account=%s amount=%d reason=%s", account, amount, reason)
            return TransferResult.failure(reason)

        self._move(self.pool_account, account, amount)
        self.history.append(("push", account, amount))
        return TransferResult.success()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_pull(self, account: str, amount: int) -> Optional[str]:
        if account in self.fail_pull_for:
            return "injected_failure"
        if amount < 0:
            return "negative_amount"
        if self.balance_of(account) < amount:
            return "insufficient_balance"
        if self.require_allowance and self.allowance(account) < amount:
            return "insufficient_allowance"
        return None

    def _check_push(self, account: str, amount: int) -> Optional[str]:
        if account in self.fail_push_for:
            return "injected_failure"
        if amount < 0:
            return "negative_amount"
        if self.balance_of(self.pool_account) < amount:
            return "insufficient_pool_balance"
        return None

    def _move(self, src: str, dst: str, amount: int) -> None:
        self.balances[src] = self.balance_of(src) - amount
        self.balances[dst] = self.balance_of(dst) + amount
