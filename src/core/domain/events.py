"""
Pool Events — наблюдаемые уведомления для внешних потребителей

События публикуются только после закоммиченного перехода состояния.
Каждое событие несёт монотонный seq и timestamp (Unix seconds).
"""

import logging
from collections import deque
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class EventType(str, Enum):
    LP_DEPOSITED = "LP_DEPOSITED"
    POLICY_CREATED = "POLICY_CREATED"
    POLICY_SETTLED = "POLICY_SETTLED"
    LP_WITHDRAWN = "LP_WITHDRAWN"
    PAUSE_TOGGLED = "PAUSE_TOGGLED"
    RESERVE_RATIO_CHANGED = "RESERVE_RATIO_CHANGED"
    ROLE_GRANTED = "ROLE_GRANTED"
    ROLE_REVOKED = "ROLE_REVOKED"


# =============================================================================
# EVENT MODELS
# =============================================================================


class PoolEvent(BaseModel):
    """Базовое событие."""

    event_type: EventType
    seq: int = Field(..., ge=1)
    timestamp: int = Field(..., ge=0)

    model_config = {"frozen": True}


class LPDeposited(PoolEvent):
    event_type: EventType = EventType.LP_DEPOSITED
    account: str
    amount: int = Field(..., gt=0)
    shares_minted: int = Field(..., ge=0)


class PolicyCreated(PoolEvent):
    event_type: EventType = EventType.POLICY_CREATED
    policy_id: int = Field(..., ge=1)
    owner: str
    premium: int = Field(..., gt=0)
    max_payout: int = Field(..., gt=0)
    start_time: int
    end_time: int
    region: str


class PolicySettled(PoolEvent):
    event_type: EventType = EventType.POLICY_SETTLED
    policy_id: int = Field(..., ge=1)
    owner: str
    payout_ratio_bps: int = Field(..., ge=0, le=10_000)
    payout: int = Field(..., ge=0)


class LPWithdrawn(PoolEvent):
    event_type: EventType = EventType.LP_WITHDRAWN
    account: str
    shares_burned: int = Field(..., gt=0)
    amount_paid: int = Field(..., gt=0)


class PauseToggled(PoolEvent):
    event_type: EventType = EventType.PAUSE_TOGGLED
    paused: bool
    by: str


class ReserveRatioChanged(PoolEvent):
    event_type: EventType = EventType.RESERVE_RATIO_CHANGED
    old_bps: int = Field(..., ge=0, le=10_000)
    new_bps: int = Field(..., ge=0, le=10_000)
    by: str


class RoleGranted(PoolEvent):
    event_type: EventType = EventType.ROLE_GRANTED
    account: str
    role: str
    by: str


class RoleRevoked(PoolEvent):
    event_type: EventType = EventType.ROLE_REVOKED
    account: str
    role: str
    by: str


# =============================================================================
# EVENT LOG
# =============================================================================

EventCallback = Callable[[PoolEvent], None]


class EventLog:
    """
    Ограниченная история событий + подписчики.

    Ошибка подписчика не откатывает уже закоммиченный переход:
    она логируется и доставка продолжается остальным подписчикам.
    """

    def __init__(self, maxlen: Optional[int] = None) -> None:
        self.events: deque[PoolEvent] = deque(maxlen=maxlen)
        self._subscribers: List[EventCallback] = []
        self._seq = 0

    def next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """Подписка; возвращает функцию отписки."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: PoolEvent) -> None:
        self.events.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Event subscriber %r failed on %s seq=%d",
                    callback, event.event_type.value, event.seq,
                )

    def tail(self, n: int = 200) -> List[PoolEvent]:
        if n <= 0:
            return []
        if n >= len(self.events):
            return list(self.events)
        return list(self.events)[-n:]

    def of_type(self, event_type: EventType) -> List[PoolEvent]:
        return [e for e in self.events if e.event_type == event_type]
