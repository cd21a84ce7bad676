"""
Tests for Share Math

Покрывает:
- Bootstrap mint 1:1
- Пропорциональный mint против капитала до депозита
- Потеря на округлении (0 shares)
- Withdrawal quote с резервом
- Payout quote с cap по капиталу
"""

import pytest

from src.core.errors import InvalidAmount
from src.core.math.share_math import quote_payout, quote_withdrawal, shares_to_mint


class TestSharesToMint:
    def test_bootstrap_empty_pool(self):
        assert shares_to_mint(100, 0, 0) == 100

    def test_bootstrap_drained_pool(self):
        """Пул с shares, но без капитала — снова 1:1."""
        assert shares_to_mint(40, 500, 0) == 40

    def test_bootstrap_shareless_pool_with_capital(self):
        """Капитал от премий без shares — 1:1."""
        assert shares_to_mint(40, 0, 75) == 40

    def test_proportional(self):
        assert shares_to_mint(50, 150, 150) == 50
        assert shares_to_mint(50, 100, 200) == 25

    def test_proportional_floors(self):
        assert shares_to_mint(10, 100, 300) == 3

    def test_rounding_loss_to_zero(self):
        assert shares_to_mint(1, 10, 1000) == 0

    def test_zero_amount_rejected(self):
        with pytest.raises(InvalidAmount):
            shares_to_mint(0, 100, 100)


class TestQuoteWithdrawal:
    def test_reserve_30_percent(self):
        quote = quote_withdrawal(100, 100, 100, 3000)
        assert quote.reserved == 30
        assert quote.available == 70
        assert quote.entitlement == 70

    def test_full_reserve(self):
        quote = quote_withdrawal(100, 100, 100, 10_000)
        assert quote.available == 0
        assert quote.entitlement == 0

    def test_partial_shares(self):
        quote = quote_withdrawal(25, 100, 200, 0)
        assert quote.entitlement == 50

    def test_small_share_floors_to_zero(self):
        quote = quote_withdrawal(1, 1_000_000, 100, 3000)
        assert quote.entitlement == 0

    def test_zero_total_shares_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_withdrawal(1, 0, 100, 0)


class TestQuotePayout:
    def test_uncapped(self):
        quote = quote_payout(100, 5000, 200)
        assert quote.raw_payout == 50
        assert quote.payout == 50
        assert not quote.capped

    def test_exactly_enough_capital(self):
        quote = quote_payout(100, 5000, 50)
        assert quote.payout == 50
        assert not quote.capped

    def test_capped(self):
        quote = quote_payout(100, 5000, 30)
        assert quote.raw_payout == 50
        assert quote.payout == 30
        assert quote.capped

    def test_empty_pool(self):
        quote = quote_payout(100, 5000, 0)
        assert quote.payout == 0
        assert quote.capped

    def test_zero_ratio(self):
        quote = quote_payout(100, 0, 100)
        assert quote.payout == 0
        assert not quote.capped
