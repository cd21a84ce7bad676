"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация снапшотов, полисов и событий, полученных из Pydantic моделей
- Детекция нарушений required полей, типов и constraints
"""

import json

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    CONTRACTS,
    POLICY,
    POOL_EVENT,
    POOL_STATE,
    SCHEMA_DIR,
    contract_validator,
    validate_policy,
    validate_pool_event,
    validate_pool_state,
)
from src.pool import ParametricPool, PoolConfig
from src.ports import InMemoryTransferPort, ManualClock


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def busy_pool() -> ParametricPool:
    """Пул с депозитом, двумя полисами (один урегулирован) и паузой."""
    port = InMemoryTransferPort(pool_account="pool", require_allowance=False)
    port.mint("lp1", 1_000)
    port.mint("user1", 1_000)
    clock = ManualClock(start_time=1_700_000_000)
    pool = ParametricPool(
        transfer_port=port,
        config=PoolConfig(admin="admin", validate_contracts=True),
        clock=clock,
    )
    pool.deposit("lp1", 200)
    p1 = pool.purchase_policy("user1", 50, 100, 1, "TestRegion")
    pool.purchase_policy("user1", 20, 300, 3600, "Coast")
    clock.fast_forward(2)
    pool.settle("admin", [p1], 5000)
    pool.withdraw("lp1", 10)
    pool.pause("admin")
    pool.unpause("admin")
    return pool


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemas:
    @pytest.mark.parametrize("name", CONTRACTS)
    def test_schema_loads(self, name):
        validator = contract_validator(name)
        assert validator.schema["$schema"].endswith("2020-12/schema")

    def test_validator_cached(self):
        assert contract_validator(POLICY) is contract_validator(POLICY)

    def test_schema_files_are_json(self):
        paths = sorted(SCHEMA_DIR.glob("*.json"))
        assert {p.stem for p in paths} == set(CONTRACTS)
        for path in paths:
            json.loads(path.read_text(encoding="utf-8"))

    def test_unknown_schema(self):
        with pytest.raises(FileNotFoundError):
            contract_validator("nope")


# =============================================================================
# POOL STATE
# =============================================================================


class TestPoolStateContract:
    def test_snapshot_valid(self, busy_pool):
        data = busy_pool.snapshot().to_contract_dict()
        validate_pool_state(data)
        assert data["capital"]["capital_pool"] == busy_pool.capital_pool
        assert len(data["policies"]) == 2

    def test_missing_required(self, busy_pool):
        data = busy_pool.snapshot().to_contract_dict()
        del data["capital"]
        with pytest.raises(ValidationError):
            validate_pool_state(data)

    def test_negative_capital(self, busy_pool):
        data = busy_pool.snapshot().to_contract_dict()
        data["capital"]["capital_pool"] = -1
        assert not contract_validator(POOL_STATE).is_valid(data)

    def test_ratio_out_of_range(self, busy_pool):
        data = busy_pool.snapshot().to_contract_dict()
        data["capital"]["reserve_ratio_bps"] = 10_001
        errors = list(contract_validator(POOL_STATE).iter_errors(data))
        assert errors


# =============================================================================
# POLICY
# =============================================================================


class TestPolicyContract:
    def test_active_and_settled_valid(self, busy_pool):
        for policy in busy_pool.policies_of("user1"):
            validate_policy(policy.model_dump(mode="json"))

    def test_active_with_ratio_invalid(self, busy_pool):
        active = busy_pool.policy(2).model_dump(mode="json")
        active["payout_ratio_bps"] = 5000
        assert not contract_validator(POLICY).is_valid(active)

    def test_settled_without_payout_invalid(self, busy_pool):
        settled = busy_pool.policy(1).model_dump(mode="json")
        settled["payout"] = None
        assert not contract_validator(POLICY).is_valid(settled)

    def test_unknown_status(self, busy_pool):
        data = busy_pool.policy(1).model_dump(mode="json")
        data["status"] = "CANCELLED"
        with pytest.raises(ValidationError):
            validate_policy(data)


# =============================================================================
# EVENTS
# =============================================================================


class TestEventContract:
    def test_all_emitted_events_valid(self, busy_pool):
        events = busy_pool.events.tail()
        assert len(events) == 7
        for event in events:
            validate_pool_event(event.model_dump(mode="json"))

    def test_settled_event_missing_payout(self, busy_pool):
        event = busy_pool.events.tail()[3].model_dump(mode="json")
        assert event["event_type"] == "POLICY_SETTLED"
        del event["payout"]
        assert not contract_validator(POOL_EVENT).is_valid(event)

    def test_unknown_event_type(self):
        with pytest.raises(ValidationError):
            validate_pool_event({"event_type": "MINTED", "seq": 1, "timestamp": 0})


# =============================================================================
# POOL INTEGRATION
# =============================================================================


class TestPoolContractChecks:
    def _pool(self, validate_contracts: bool) -> ParametricPool:
        port = InMemoryTransferPort(pool_account="pool", require_allowance=False)
        port.mint("lp1", 1_000)
        port.mint("user1", 1_000)
        return ParametricPool(
            transfer_port=port,
            config=PoolConfig(validate_contracts=validate_contracts),
            clock=ManualClock(start_time=0),
        )

    def test_pool_checks_every_contract(self, monkeypatch):
        checked = []
        for name in ("validate_pool_state", "validate_policy", "validate_pool_event"):
            monkeypatch.setattr(
                f"src.pool.fund.{name}", lambda data, name=name: checked.append(name)
            )
        pool = self._pool(validate_contracts=True)

        pool.deposit("lp1", 100)
        pool.purchase_policy("user1", 10, 50, 60, "r")
        pool.snapshot()

        assert checked == [
            "validate_pool_event",
            "validate_policy",
            "validate_pool_event",
            "validate_pool_state",
        ]

    def test_checks_off_by_default(self, monkeypatch):
        checked = []
        monkeypatch.setattr("src.pool.fund.validate_pool_event", checked.append)
        monkeypatch.setattr("src.pool.fund.validate_pool_state", checked.append)
        pool = self._pool(validate_contracts=False)

        pool.deposit("lp1", 100)
        pool.snapshot()

        assert checked == []
