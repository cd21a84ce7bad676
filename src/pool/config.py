"""Конфигурация пула."""

from dataclasses import dataclass
from typing import Optional

from src.core.errors import InvalidInput
from src.core.math.basis_points import validate_bps


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация ParametricPool.

    - reserve_ratio_bps: доля капитала, недоступная для вывода LP (начальная)
    - admin: аккаунт с ролями ADMIN и ORACLE при создании пула
    - event_log_maxlen: размер истории событий (None — без ограничения)
    - validate_contracts: проверять снапшоты, новые полисы и события против
      JSON контрактов (отладочный режим; нарушение — ошибка в коде пула)
    """

    admin: str = "admin"
    reserve_ratio_bps: int = 3000
    event_log_maxlen: Optional[int] = 10_000
    validate_contracts: bool = False

    def __post_init__(self) -> None:
        validate_bps(self.reserve_ratio_bps, "reserve_ratio_bps")
        if not self.admin:
            raise InvalidInput("admin must be non-empty")
        if self.event_log_maxlen is not None and self.event_log_maxlen <= 0:
            raise InvalidInput(
                f"event_log_maxlen must be positive or None, got {self.event_log_maxlen}"
            )
