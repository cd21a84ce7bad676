"""Capital Ledger — единый скалярный баланс пула (никогда не отрицательный)."""

from src.core.errors import InvalidAmount
from src.core.math.basis_points import validate_amount


class CapitalLedger:
    """Суммарная стоимость пула: депозиты + премии - выплаты - выводы."""

    def __init__(self, balance: int = 0):
        self._balance = validate_amount(balance, "balance", allow_zero=True)

    @property
    def balance(self) -> int:
        return self._balance

    def credit(self, amount: int) -> int:
        validate_amount(amount, allow_zero=True)
        self._balance += amount
        return self._balance

    def debit(self, amount: int) -> int:
        """
        Raises:
            InvalidAmount: Если amount превышает баланс
        """
        validate_amount(amount, allow_zero=True)
        if amount > self._balance:
            raise InvalidAmount(f"debit {amount} exceeds capital {self._balance}")
        self._balance -= amount
        return self._balance
