"""
Policy — Модель параметрического страхового полиса

Immutable Pydantic модель. Жизненный цикл — явная двухсостоянийная машина:

    ACTIVE ──settle()──▶ SETTLED

Обратного перехода нет. payout_ratio_bps и payout записываются один раз,
только при settlement (в том числе если выплата была урезана до 0).
Полисы никогда не удаляются — остаются как историческая запись.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from src.core.errors import IllegalPolicyTransition
from src.core.math.basis_points import BPS_MAX


# =============================================================================
# ENUMS
# =============================================================================


class PolicyStatus(str, Enum):
    """Состояние полиса."""

    ACTIVE = "ACTIVE"
    SETTLED = "SETTLED"


# =============================================================================
# POLICY MODEL
# =============================================================================


class Policy(BaseModel):
    """
    Запись полиса.

    Immutable (frozen=True): settlement создаёт новый экземпляр через settle().
    """

    # Идентификация
    policy_id: int = Field(..., ge=1, description="Монотонный идентификатор (с 1)")
    owner: str = Field(..., min_length=1, description="Владелец полиса")
    region: str = Field(..., description="Метка региона покрытия")

    # Экономика
    premium: int = Field(..., gt=0, description="Уплаченная премия")
    max_payout: int = Field(..., gt=0, description="Максимальная выплата")

    # Окно покрытия (Unix seconds)
    start_time: int = Field(..., ge=0, description="Начало покрытия")
    end_time: int = Field(..., ge=0, description="Момент зрелости полиса")

    # Settlement (write-once)
    status: PolicyStatus = Field(default=PolicyStatus.ACTIVE)
    payout_ratio_bps: int | None = Field(
        default=None, ge=0, le=BPS_MAX, description="Применённый ratio (None до settlement)"
    )
    payout: int | None = Field(default=None, ge=0, description="Фактическая выплата")
    settled_at: int | None = Field(default=None, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_lifecycle(self) -> "Policy":
        if self.end_time <= self.start_time:
            raise ValueError(
                f"end_time {self.end_time} must be after start_time {self.start_time}"
            )
        settled_fields = (self.payout_ratio_bps, self.payout, self.settled_at)
        if self.status == PolicyStatus.ACTIVE and any(f is not None for f in settled_fields):
            raise ValueError("ACTIVE policy cannot carry settlement fields")
        if self.status == PolicyStatus.SETTLED and any(f is None for f in settled_fields):
            raise ValueError("SETTLED policy requires payout_ratio_bps, payout, settled_at")
        return self

    @property
    def claimed(self) -> bool:
        return self.status == PolicyStatus.SETTLED

    def is_matured(self, now: int) -> bool:
        return now >= self.end_time

    def is_eligible(self, now: int) -> bool:
        """Полис можно урегулировать: ACTIVE и зрелый."""
        return self.status == PolicyStatus.ACTIVE and self.is_matured(now)

    def settle(self, payout_ratio_bps: int, payout: int, now: int) -> "Policy":
        """
        Переход ACTIVE → SETTLED.

        Raises:
            IllegalPolicyTransition: Если полис уже SETTLED
        """
        if self.status != PolicyStatus.ACTIVE:
            raise IllegalPolicyTransition(
                f"policy {self.policy_id} already {self.status.value}"
            )
        return Policy(
            **self.model_dump(exclude={"status", "payout_ratio_bps", "payout", "settled_at"}),
            status=PolicyStatus.SETTLED,
            payout_ratio_bps=payout_ratio_bps,
            payout=payout,
            settled_at=now,
        )
