"""
Tests for Ledger registries

Покрывает:
- CapitalLedger: credit/debit, запрет отрицательного баланса
- ShareRegistry: mint/burn, инвариант total_shares == sum(balances)
- PolicyRegistry: монотонные id, create/replace/restore
"""

import pytest

from src.core.domain.policy import PolicyStatus
from src.core.errors import (
    IllegalPolicyTransition,
    InsufficientShares,
    InvalidAmount,
    InvalidInput,
)
from src.ledger import CapitalLedger, PolicyRegistry, ShareRegistry


# =============================================================================
# CAPITAL LEDGER
# =============================================================================


class TestCapitalLedger:
    def test_starts_empty(self):
        assert CapitalLedger().balance == 0

    def test_credit_debit(self):
        ledger = CapitalLedger()
        ledger.credit(200)
        ledger.credit(50)
        ledger.debit(50)
        assert ledger.balance == 200

    def test_debit_beyond_balance(self):
        ledger = CapitalLedger(10)
        with pytest.raises(InvalidAmount):
            ledger.debit(11)
        assert ledger.balance == 10

    def test_zero_moves_allowed(self):
        ledger = CapitalLedger(5)
        ledger.debit(0)
        ledger.credit(0)
        assert ledger.balance == 5

    def test_negative_initial_rejected(self):
        with pytest.raises(InvalidAmount):
            CapitalLedger(-1)


# =============================================================================
# SHARE REGISTRY
# =============================================================================


class TestShareRegistry:
    def test_mint(self):
        registry = ShareRegistry()
        registry.mint("lp1", 100)
        registry.mint("lp2", 50)
        registry.mint("lp1", 10)

        assert registry.balance_of("lp1") == 110
        assert registry.balance_of("lp2") == 50
        assert registry.total_shares == 160
        assert registry.check_invariant()

    def test_mint_zero_is_noop(self):
        registry = ShareRegistry()
        registry.mint("lp1", 0)
        assert registry.balances() == {}
        assert registry.total_shares == 0

    def test_burn(self):
        registry = ShareRegistry()
        registry.mint("lp1", 100)
        registry.burn("lp1", 40)
        assert registry.balance_of("lp1") == 60
        assert registry.total_shares == 60
        assert registry.check_invariant()

    def test_burn_to_zero_removes_account(self):
        registry = ShareRegistry()
        registry.mint("lp1", 100)
        registry.burn("lp1", 100)
        assert "lp1" not in registry.balances()
        assert registry.total_shares == 0

    def test_burn_more_than_balance(self):
        registry = ShareRegistry()
        registry.mint("lp1", 10)
        with pytest.raises(InsufficientShares):
            registry.burn("lp1", 11)
        assert registry.balance_of("lp1") == 10

    def test_burn_zero_rejected(self):
        registry = ShareRegistry()
        registry.mint("lp1", 10)
        with pytest.raises(InvalidAmount):
            registry.burn("lp1", 0)

    def test_balances_is_copy(self):
        registry = ShareRegistry()
        registry.mint("lp1", 10)
        registry.balances()["lp1"] = 999
        assert registry.balance_of("lp1") == 10


# =============================================================================
# POLICY REGISTRY
# =============================================================================


@pytest.fixture
def registry() -> PolicyRegistry:
    return PolicyRegistry()


def _create(registry: PolicyRegistry, owner: str = "user1", now: int = 1_000):
    return registry.create(
        owner=owner, premium=50, max_payout=100, duration=1, region="TestRegion", now=now
    )


class TestPolicyRegistry:
    def test_ids_start_at_one_and_increase(self, registry):
        assert registry.next_policy_id == 1
        first = _create(registry)
        second = _create(registry)
        assert first.policy_id == 1
        assert second.policy_id == 2
        assert registry.next_policy_id == 3
        assert len(registry) == 2

    def test_time_window(self, registry):
        policy = registry.create(
            owner="u", premium=1, max_payout=2, duration=3600, region="r", now=500
        )
        assert policy.start_time == 500
        assert policy.end_time == 4100
        assert policy.status == PolicyStatus.ACTIVE

    @pytest.mark.parametrize(
        "premium,max_payout,duration",
        [(0, 100, 1), (50, 0, 1), (50, 100, 0), (-1, 100, 1)],
    )
    def test_invalid_inputs(self, registry, premium, max_payout, duration):
        with pytest.raises(InvalidAmount):
            registry.create(
                owner="u", premium=premium, max_payout=max_payout,
                duration=duration, region="r", now=0,
            )
        assert registry.next_policy_id == 1

    def test_get_missing(self, registry):
        assert registry.get(42) is None

    def test_policies_of(self, registry):
        _create(registry, owner="a")
        _create(registry, owner="b")
        _create(registry, owner="a")
        assert [p.policy_id for p in registry.policies_of("a")] == [1, 3]

    def test_replace_with_settled(self, registry):
        policy = _create(registry)
        registry.replace(policy.settle(payout_ratio_bps=5000, payout=50, now=2_000))
        assert registry.get(1).claimed

    def test_replace_twice_rejected(self, registry):
        policy = _create(registry)
        settled = policy.settle(payout_ratio_bps=5000, payout=50, now=2_000)
        registry.replace(settled)
        with pytest.raises(IllegalPolicyTransition):
            registry.replace(settled)

    def test_replace_with_active_rejected(self, registry):
        policy = _create(registry)
        with pytest.raises(IllegalPolicyTransition):
            registry.replace(policy)

    def test_restore(self, registry):
        policy = _create(registry)
        registry.replace(policy.settle(payout_ratio_bps=5000, payout=50, now=2_000))
        registry.restore(policy)
        assert registry.get(1).status == PolicyStatus.ACTIVE

    def test_ids_not_reused(self, registry):
        _create(registry)
        _create(registry)
        assert {p.policy_id for p in registry} == {1, 2}
        assert _create(registry).policy_id == 3

    def test_draft_does_not_store(self, registry):
        policy = registry.draft(
            owner="u", premium=1, max_payout=2, duration=10, region="r", now=0
        )
        assert policy.policy_id == 1
        assert registry.next_policy_id == 1
        assert registry.get(1) is None

        registry.add(policy)
        assert registry.get(1) == policy
        assert registry.next_policy_id == 2

    def test_add_stale_draft_rejected(self, registry):
        stale = registry.draft(owner="u", premium=1, max_payout=2, duration=10, region="r", now=0)
        _create(registry)
        with pytest.raises(IllegalPolicyTransition):
            registry.add(stale)
        assert len(registry) == 1

    @pytest.mark.parametrize("owner,region", [("", "r"), (None, "r"), ("u", None), ("u", 5)])
    def test_invalid_owner_or_region(self, registry, owner, region):
        with pytest.raises(InvalidInput):
            registry.create(
                owner=owner, premium=1, max_payout=2, duration=10, region=region, now=0
            )
        assert registry.next_policy_id == 1
