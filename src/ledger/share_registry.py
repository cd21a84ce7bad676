"""
LP Share Registry — пропорциональное владение пулом

Инвариант (в каждой точке наблюдения):
    total_shares == sum(balances.values())

Shares создаются при депозите (mint) и сжигаются при выводе (burn).
Peer-to-peer переводов нет. Аккаунт с нулевым балансом удаляется из реестра.
"""

from typing import Dict

from src.core.errors import InsufficientShares
from src.core.math.basis_points import validate_amount


class ShareRegistry:
    """Балансы shares по аккаунтам + total_shares."""

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._total_shares = 0

    @property
    def total_shares(self) -> int:
        return self._total_shares

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def balances(self) -> Dict[str, int]:
        return dict(self._balances)

    def mint(self, account: str, shares: int) -> None:
        # 0 shares допустимо (потеря на округлении при депозите)
        validate_amount(shares, "shares", allow_zero=True)
        if shares == 0:
            return
        self._balances[account] = self.balance_of(account) + shares
        self._total_shares += shares

    def burn(self, account: str, shares: int) -> None:
        """
        Raises:
            InvalidAmount: Если shares <= 0
            InsufficientShares: Если баланс аккаунта меньше shares
        """
        validate_amount(shares, "shares")
        balance = self.balance_of(account)
        if balance < shares:
            raise InsufficientShares(
                f"account {account} has {balance} shares, requested {shares}"
            )
        remaining = balance - shares
        if remaining == 0:
            del self._balances[account]
        else:
            self._balances[account] = remaining
        self._total_shares -= shares

    def check_invariant(self) -> bool:
        return sum(self._balances.values()) == self._total_shares
