"""
Share Math — формулы пропорционального владения пулом

Чистые функции без состояния. Все деления — floor.

Формулы:
- mint:        shares = amount                             (bootstrap: T == 0 или P == 0)
               shares = floor(amount * T / P)              (иначе, P — до депозита)
- reserved:    floor(P * reserve_bps / 10000)
- available:   P - reserved
- entitlement: floor(available * share_amount / T)
- payout:      min(floor(max_payout * ratio_bps / 10000), P)
"""

from dataclasses import dataclass

from src.core.math.basis_points import (
    apply_bps,
    complement_bps,
    mul_div_floor,
    validate_amount,
)


@dataclass(frozen=True)
class WithdrawalQuote:
    """Расчёт выплаты LP при сжигании share_amount."""

    share_amount: int
    reserved: int
    available: int
    entitlement: int


@dataclass(frozen=True)
class PayoutQuote:
    """Расчёт выплаты по полису с cap по капиталу пула."""

    raw_payout: int
    payout: int
    capped: bool


def shares_to_mint(amount: int, total_shares: int, capital_pool: int) -> int:
    """
    Количество shares за депозит amount.

    Bootstrap 1:1, если пул без shares или полностью опустошён.
    Иначе пропорционально капиталу до депозита. Результат может быть 0
    (потеря на округлении), это не ошибка.

    Examples:
        >>> shares_to_mint(100, 0, 0)
        100
        >>> shares_to_mint(50, 150, 150)
        50
        >>> shares_to_mint(1, 10, 1000)
        0
    """
    validate_amount(amount)
    validate_amount(total_shares, "total_shares", allow_zero=True)
    validate_amount(capital_pool, "capital_pool", allow_zero=True)

    if total_shares == 0 or capital_pool == 0:
        return amount
    return mul_div_floor(amount, total_shares, capital_pool)


def quote_withdrawal(
    share_amount: int,
    total_shares: int,
    capital_pool: int,
    reserve_ratio_bps: int,
) -> WithdrawalQuote:
    """
    Расчёт entitlement для сжигания share_amount.

    Предполагается 0 < share_amount <= total_shares (проверяет вызывающий).
    """
    validate_amount(share_amount, "share_amount")
    validate_amount(total_shares, "total_shares")
    validate_amount(capital_pool, "capital_pool", allow_zero=True)

    reserved = apply_bps(capital_pool, reserve_ratio_bps)
    available = complement_bps(capital_pool, reserve_ratio_bps)
    entitlement = mul_div_floor(available, share_amount, total_shares)

    return WithdrawalQuote(
        share_amount=share_amount,
        reserved=reserved,
        available=available,
        entitlement=entitlement,
    )


def quote_payout(max_payout: int, payout_ratio_bps: int, capital_pool: int) -> PayoutQuote:
    """
    Выплата по полису: ratio от max_payout, ограниченная капиталом пула.

    Examples:
        >>> quote_payout(100, 5000, 200).payout
        50
        >>> quote_payout(100, 5000, 30).payout
        30
    """
    raw = apply_bps(max_payout, payout_ratio_bps)
    payout = min(raw, capital_pool)
    return PayoutQuote(raw_payout=raw, payout=payout, capped=payout < raw)
