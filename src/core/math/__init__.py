"""
Core math modules

Целочисленная арифметика basis points и формулы долей пула.
"""

# Basis points
from src.core.math.basis_points import (
    BPS_DENOMINATOR,
    BPS_MAX,
    BPS_MIN,
    apply_bps,
    complement_bps,
    mul_div_floor,
    validate_account,
    validate_amount,
    validate_bps,
)

# Share / payout formulas
from src.core.math.share_math import (
    PayoutQuote,
    WithdrawalQuote,
    quote_payout,
    quote_withdrawal,
    shares_to_mint,
)

__all__ = [
    # Basis points
    "BPS_DENOMINATOR",
    "BPS_MIN",
    "BPS_MAX",
    "apply_bps",
    "complement_bps",
    "mul_div_floor",
    "validate_account",
    "validate_amount",
    "validate_bps",
    # Share math
    "PayoutQuote",
    "WithdrawalQuote",
    "quote_payout",
    "quote_withdrawal",
    "shares_to_mint",
]
