"""
Pool Errors — таксономия ошибок пула

Все ошибки локальные, синхронные и не повторяются движком самостоятельно.
Любой путь с ошибкой гарантирует отсутствие частичной мутации состояния.

Иерархия:
- PoolError
  - InvalidInput (InvalidAmount, InvalidRatio)
  - Unauthorized
  - Paused
  - TransferFailed
  - InsufficientShares
  - InsufficientAvailableLiquidity
  - IllegalPolicyTransition
"""


class PoolError(Exception):
    """Базовая ошибка пула. code — машинно-читаемый идентификатор."""

    code: str = "pool_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidInput(PoolError, ValueError):
    """Нулевая/вне диапазона сумма, ratio или duration."""

    code = "invalid_input"


class InvalidAmount(InvalidInput):
    code = "invalid_amount"


class InvalidRatio(InvalidInput):
    code = "invalid_ratio"


class Unauthorized(PoolError):
    """Проверка capability не пройдена."""

    code = "unauthorized"


class Paused(PoolError):
    """Операция заблокирована halt-флагом."""

    code = "paused"


class TransferFailed(PoolError):
    """Внешний перевод стоимости отклонён."""

    code = "transfer_failed"


class InsufficientShares(PoolError):
    code = "insufficient_shares"


class InsufficientAvailableLiquidity(PoolError):
    """Entitlement равен нулю: ликвидность зарезервирована или округлена в ноль."""

    code = "insufficient_available_liquidity"


class IllegalPolicyTransition(PoolError):
    """Попытка повторного перехода полиса (SETTLED → SETTLED или обратно)."""

    code = "illegal_policy_transition"
