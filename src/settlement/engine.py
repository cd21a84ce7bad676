"""Settlement Engine — пакетное урегулирование зрелых полисов

Один ratio (от оракула) применяется ко всем элементам пакета.

Для каждого policy_id строго в порядке пакета:
1. Пропуск (не ошибка), если полиса нет, он SETTLED или ещё не созрел
2. raw = floor(max_payout * ratio_bps / 10000); payout = min(raw, capital_pool)
3. ACTIVE → SETTLED (ratio и payout записываются навсегда, даже payout=0)
4. capital_pool -= payout; push(owner, payout) через порт

Shortfall: при нехватке капитала ранние элементы пакета получают выплату
первыми, поздние урезаются или обнуляются. Порядок наблюдаем снаружи.

Отказ push: элемент откатывается (полис снова ACTIVE, капитал восстановлен),
id попадает в failed_ids, пакет продолжается. Такой полис остаётся
eligible для следующего пакета.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from src.core.domain.policy import Policy, PolicyStatus
from src.core.math.basis_points import validate_bps
from src.core.math.share_math import quote_payout
from src.ledger.capital_ledger import CapitalLedger
from src.ledger.policy_registry import PolicyRegistry
from src.ports.transfer import ValueTransferPort

logger = logging.getLogger(__name__)


class ItemOutcome(str, Enum):
    PAID = "PAID"
    SKIPPED_MISSING = "SKIPPED_MISSING"
    SKIPPED_CLAIMED = "SKIPPED_CLAIMED"
    SKIPPED_NOT_MATURED = "SKIPPED_NOT_MATURED"
    FAILED_TRANSFER = "FAILED_TRANSFER"


@dataclass(frozen=True)
class SettlementItem:
    """Исход обработки одного policy_id."""

    policy_id: int
    outcome: ItemOutcome
    payout: int = 0
    raw_payout: int = 0
    capped: bool = False
    policy: Optional[Policy] = None
    reason: str = ""


@dataclass(frozen=True)
class SettlementResult:
    """Результат пакета."""

    payout_ratio_bps: int
    items: Tuple[SettlementItem, ...]

    @property
    def settled_count(self) -> int:
        return sum(1 for i in self.items if i.outcome == ItemOutcome.PAID)

    @property
    def total_paid(self) -> int:
        return sum(i.payout for i in self.items if i.outcome == ItemOutcome.PAID)

    @property
    def settled_ids(self) -> Tuple[int, ...]:
        return tuple(i.policy_id for i in self.items if i.outcome == ItemOutcome.PAID)

    @property
    def skipped_ids(self) -> Tuple[int, ...]:
        return tuple(
            i.policy_id for i in self.items if i.outcome.value.startswith("SKIPPED")
        )

    @property
    def failed_ids(self) -> Tuple[int, ...]:
        return tuple(
            i.policy_id for i in self.items if i.outcome == ItemOutcome.FAILED_TRANSFER
        )


class SettlementEngine:
    """Пакетное урегулирование поверх Capital Ledger и Policy Registry.

    Не проверяет pause/роли: это делает вызывающий пул до вызова settle_batch.
    """

    def __init__(
        self,
        capital: CapitalLedger,
        policies: PolicyRegistry,
        transfer_port: ValueTransferPort,
    ):
        self.capital = capital
        self.policies = policies
        self.transfer_port = transfer_port

    def settle_batch(
        self,
        policy_ids: Iterable[int],
        payout_ratio_bps: int,
        now: int,
    ) -> SettlementResult:
        """
        Урегулирование пакета.

        Args:
            policy_ids: Упорядоченная последовательность идентификаторов
            payout_ratio_bps: Ratio для всех eligible элементов [0, 10000]
            now: Текущее время (Unix seconds)

        Raises:
            InvalidRatio: Если ratio вне диапазона (до обработки элементов)
        """
        validate_bps(payout_ratio_bps, "payout_ratio_bps")
        ids = list(policy_ids)

        items = tuple(self._settle_one(pid, payout_ratio_bps, now) for pid in ids)
        result = SettlementResult(payout_ratio_bps=payout_ratio_bps, items=items)

        logger.info(
            "Settlement batch: size=%d ratio_bps=%d settled=%d paid=%d skipped=%d failed=%d",
            len(ids), payout_ratio_bps, result.settled_count, result.total_paid,
            len(result.skipped_ids), len(result.failed_ids),
        )
        return result

    def _settle_one(self, policy_id: int, payout_ratio_bps: int, now: int) -> SettlementItem:
        # True == 1 и 1.0 == 1 в dict lookup: такие id не адресуют полис
        if not isinstance(policy_id, int) or isinstance(policy_id, bool):
            logger.debug("Skip policy %r: id is not int", policy_id)
            return SettlementItem(policy_id=policy_id, outcome=ItemOutcome.SKIPPED_MISSING)

        policy = self.policies.get(policy_id)

        # 1. Пропуски
        if policy is None:
            logger.debug("Skip policy %s: not found", policy_id)
            return SettlementItem(policy_id=policy_id, outcome=ItemOutcome.SKIPPED_MISSING)
        if policy.status == PolicyStatus.SETTLED:
            logger.debug("Skip policy %s: already settled", policy_id)
            return SettlementItem(
                policy_id=policy_id, outcome=ItemOutcome.SKIPPED_CLAIMED, policy=policy
            )
        if not policy.is_matured(now):
            logger.debug(
                "Skip policy %s: matures at %d, now=%d", policy_id, policy.end_time, now
            )
            return SettlementItem(
                policy_id=policy_id, outcome=ItemOutcome.SKIPPED_NOT_MATURED, policy=policy
            )

        # 2. Выплата с cap по капиталу
        quote = quote_payout(policy.max_payout, payout_ratio_bps, self.capital.balance)

        # 3-4. Переход + дебет
        settled = policy.settle(payout_ratio_bps=payout_ratio_bps, payout=quote.payout, now=now)
        self.policies.replace(settled)
        self.capital.debit(quote.payout)

        if quote.payout > 0:
            transfer = self.transfer_port.push(policy.owner, quote.payout)
            if not transfer.ok:
                # Откат элемента
                self.capital.credit(quote.payout)
                self.policies.restore(policy)
                logger.warning(
                    "Payout push failed for policy %s (owner=%s, payout=%d): %s; rolled back",
                    policy_id, policy.owner, quote.payout, transfer.reason,
                )
                return SettlementItem(
                    policy_id=policy_id,
                    outcome=ItemOutcome.FAILED_TRANSFER,
                    payout=0,
                    raw_payout=quote.raw_payout,
                    capped=quote.capped,
                    policy=policy,
                    reason=transfer.reason,
                )

        if quote.capped:
            logger.warning(
                "Shortfall: policy %s payout capped %d -> %d",
                policy_id, quote.raw_payout, quote.payout,
            )
        logger.info(
            "Policy %s settled: owner=%s ratio_bps=%d payout=%d",
            policy_id, policy.owner, payout_ratio_bps, quote.payout,
        )
        return SettlementItem(
            policy_id=policy_id,
            outcome=ItemOutcome.PAID,
            payout=quote.payout,
            raw_payout=quote.raw_payout,
            capped=quote.capped,
            policy=settled,
        )
