"""
PoolState — Модель снапшота состояния пула

Immutable Pydantic модель, представляющая полностью закоммиченное
состояние пула. Совместима с JSON Schema (contracts/schema/pool_state.json).
"""

from pydantic import BaseModel, Field, model_validator

from .policy import Policy


# =============================================================================
# NESTED MODELS
# =============================================================================


class Capital(BaseModel):
    """Капитал пула и резерв."""

    capital_pool: int = Field(..., ge=0, description="Суммарная стоимость пула")
    reserve_ratio_bps: int = Field(..., ge=0, le=10_000, description="Резервный ratio (bps)")
    reserved: int = Field(..., ge=0, description="Недоступно для вывода LP")
    available: int = Field(..., ge=0, description="Доступно для вывода LP")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_split(self) -> "Capital":
        if self.reserved + self.available != self.capital_pool:
            raise ValueError(
                f"reserved {self.reserved} + available {self.available} "
                f"!= capital_pool {self.capital_pool}"
            )
        return self


class Shares(BaseModel):
    """Реестр LP shares."""

    total_shares: int = Field(..., ge=0)
    balances: dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_total(self) -> "Shares":
        if any(v < 0 for v in self.balances.values()):
            raise ValueError("share balances must be non-negative")
        if sum(self.balances.values()) != self.total_shares:
            raise ValueError(
                f"sum of balances {sum(self.balances.values())} "
                f"!= total_shares {self.total_shares}"
            )
        return self


class Gate(BaseModel):
    paused: bool = Field(..., description="Глобальный halt-флаг")

    model_config = {"frozen": True}


# =============================================================================
# POOL STATE MODEL
# =============================================================================


class PoolState(BaseModel):
    """
    Снапшот пула.

    Содержит:
    - Метаданные (snapshot_id, ts)
    - Капитал и резерв (capital)
    - LP shares (shares)
    - Состояние gate (gate)
    - Полисы (policies) и следующий идентификатор
    """

    schema_version: str = Field("1", pattern="^1$")
    snapshot_id: int = Field(..., ge=0, description="Монотонный идентификатор снапшота")
    ts: int = Field(..., ge=0, description="Timestamp снапшота (Unix seconds)")

    capital: Capital
    shares: Shares
    gate: Gate
    next_policy_id: int = Field(..., ge=1)
    policies: list[Policy] = Field(default_factory=list)

    model_config = {"frozen": True}

    def to_contract_dict(self) -> dict:
        """JSON-совместимый dict для валидации против контракта."""
        return self.model_dump(mode="json")
