"""ParametricPool — общий фонд LP и держателей полисов

Единственный владелец всего состояния:
- CapitalLedger (capital_pool)
- ShareRegistry (LP shares)
- PolicyRegistry (полисы)
- reserve_ratio_bps
- AccessGate (роли + pause)

Все мутирующие операции сериализуются одним RLock и атомарны:
либо полный переход состояния, либо исключение без изменений.

Порядок в операциях:
- deposit / purchase_policy: gate → валидация → pull → credit (pull-then-credit)
- withdraw: gate → валидация → burn + debit → push (откат при отказе push)
- settle: gate → SettlementEngine (откат отдельного элемента при отказе push)
"""

import logging
import threading
from typing import Iterable, List, Optional

from src.core.contracts.validators import (
    validate_policy,
    validate_pool_event,
    validate_pool_state,
)
from src.core.domain.events import (
    EventLog,
    LPDeposited,
    LPWithdrawn,
    PauseToggled,
    PoolEvent,
    PolicyCreated,
    PolicySettled,
    ReserveRatioChanged,
    RoleGranted,
    RoleRevoked,
)
from src.core.domain.policy import Policy
from src.core.domain.pool_state import Capital, Gate, PoolState, Shares
from src.core.errors import (
    InsufficientAvailableLiquidity,
    InsufficientShares,
    Paused,
    TransferFailed,
    Unauthorized,
)
from src.core.math.basis_points import (
    apply_bps,
    validate_account,
    validate_amount,
    validate_bps,
)
from src.core.math.share_math import WithdrawalQuote, quote_withdrawal, shares_to_mint
from src.gatekeeper.access_gate import AccessGate, Operation, Role
from src.ledger.capital_ledger import CapitalLedger
from src.ledger.policy_registry import PolicyRegistry
from src.ledger.share_registry import ShareRegistry
from src.pool.config import PoolConfig
from src.ports.clock import Clock, SystemClock
from src.ports.transfer import ValueTransferPort
from src.settlement.engine import ItemOutcome, SettlementEngine, SettlementResult

logger = logging.getLogger(__name__)


class ParametricPool:
    """Пул капитала для параметрического страхования."""

    def __init__(
        self,
        transfer_port: ValueTransferPort,
        config: Optional[PoolConfig] = None,
        clock: Optional[Clock] = None,
        gate: Optional[AccessGate] = None,
    ):
        self.config = config or PoolConfig()
        self.transfer_port = transfer_port
        self.clock = clock or SystemClock()
        self.gate = gate or AccessGate.with_admin(self.config.admin)
        self.events = EventLog(maxlen=self.config.event_log_maxlen)

        self._capital = CapitalLedger()
        self._shares = ShareRegistry()
        self._policies = PolicyRegistry()
        self._reserve_ratio_bps = self.config.reserve_ratio_bps
        self._settlement = SettlementEngine(self._capital, self._policies, transfer_port)

        self._lock = threading.RLock()
        self._snapshot_seq = 0

    # =========================================================================
    # READ-ONLY VIEWS
    # =========================================================================

    @property
    def capital_pool(self) -> int:
        with self._lock:
            return self._capital.balance

    @property
    def total_shares(self) -> int:
        with self._lock:
            return self._shares.total_shares

    @property
    def reserve_ratio_bps(self) -> int:
        with self._lock:
            return self._reserve_ratio_bps

    @property
    def paused(self) -> bool:
        with self._lock:
            return self.gate.is_paused()

    @property
    def next_policy_id(self) -> int:
        with self._lock:
            return self._policies.next_policy_id

    def shares_of(self, account: str) -> int:
        with self._lock:
            return self._shares.balance_of(account)

    def policy(self, policy_id: int) -> Optional[Policy]:
        with self._lock:
            return self._policies.get(policy_id)

    def policies_of(self, owner: str) -> List[Policy]:
        with self._lock:
            return self._policies.policies_of(owner)

    def preview_deposit(self, amount: int) -> int:
        """Сколько shares будет выпущено за amount при текущем состоянии."""
        with self._lock:
            return shares_to_mint(amount, self._shares.total_shares, self._capital.balance)

    def preview_withdraw(self, share_amount: int) -> WithdrawalQuote:
        """Расчёт выплаты за share_amount при текущем состоянии (без проверки баланса)."""
        with self._lock:
            return quote_withdrawal(
                share_amount,
                self._shares.total_shares,
                self._capital.balance,
                self._reserve_ratio_bps,
            )

    def snapshot(self) -> PoolState:
        """Immutable снапшот последнего закоммиченного состояния."""
        with self._lock:
            self._snapshot_seq += 1
            capital_pool = self._capital.balance
            reserved = apply_bps(capital_pool, self._reserve_ratio_bps)
            state = PoolState(
                snapshot_id=self._snapshot_seq,
                ts=self.clock.now(),
                capital=Capital(
                    capital_pool=capital_pool,
                    reserve_ratio_bps=self._reserve_ratio_bps,
                    reserved=reserved,
                    available=capital_pool - reserved,
                ),
                shares=Shares(
                    total_shares=self._shares.total_shares,
                    balances=self._shares.balances(),
                ),
                gate=Gate(paused=self.gate.is_paused()),
                next_policy_id=self._policies.next_policy_id,
                policies=list(self._policies),
            )
        if self.config.validate_contracts:
            validate_pool_state(state.to_contract_dict())
        return state

    # =========================================================================
    # LP
    # =========================================================================

    def deposit(self, account: str, amount: int) -> int:
        """
        Депозит LP.

        Returns:
            Количество выпущенных shares (может быть 0 при потере на округлении)

        Raises:
            Paused, InvalidAmount, TransferFailed
        """
        with self._lock:
            self._check_gate(account, Operation.DEPOSIT)
            validate_account(account)
            validate_amount(amount)

            # Против капитала до депозита
            minted = shares_to_mint(amount, self._shares.total_shares, self._capital.balance)

            self._pull(account, amount)
            self._capital.credit(amount)
            self._shares.mint(account, minted)

            logger.info(
                "LP deposit: account=%s amount=%d minted=%d capital=%d total_shares=%d",
                account, amount, minted, self._capital.balance, self._shares.total_shares,
            )
            if minted == 0:
                logger.warning("LP deposit by %s of %d minted zero shares", account, amount)

            self._publish(LPDeposited(
                seq=self.events.next_seq(),
                timestamp=self.clock.now(),
                account=account,
                amount=amount,
                shares_minted=minted,
            ))
            return minted

    def withdraw(self, account: str, share_amount: int) -> int:
        """
        Вывод LP сжиганием share_amount.

        Returns:
            Выплаченная сумма

        Raises:
            Paused, InvalidAmount, InsufficientShares,
            InsufficientAvailableLiquidity, TransferFailed
        """
        with self._lock:
            self._check_gate(account, Operation.WITHDRAW)
            validate_account(account)
            validate_amount(share_amount, "share_amount")

            balance = self._shares.balance_of(account)
            if balance < share_amount:
                raise InsufficientShares(
                    f"account {account} has {balance} shares, requested {share_amount}"
                )

            quote = quote_withdrawal(
                share_amount,
                self._shares.total_shares,
                self._capital.balance,
                self._reserve_ratio_bps,
            )
            if quote.entitlement == 0:
                raise InsufficientAvailableLiquidity(
                    f"Withdraw amount zero or exceeds available liquidity "
                    f"(available={quote.available}, shares={share_amount})"
                )

            self._shares.burn(account, share_amount)
            self._capital.debit(quote.entitlement)

            transfer = self.transfer_port.push(account, quote.entitlement)
            if not transfer.ok:
                self._capital.credit(quote.entitlement)
                self._shares.mint(account, share_amount)
                logger.warning(
                    "Withdraw push failed for %s (amount=%d): %s; rolled back",
                    account, quote.entitlement, transfer.reason,
                )
                raise TransferFailed(f"push to {account} failed: {transfer.reason}")

            logger.info(
                "LP withdraw: account=%s burned=%d paid=%d capital=%d total_shares=%d",
                account, share_amount, quote.entitlement,
                self._capital.balance, self._shares.total_shares,
            )
            self._publish(LPWithdrawn(
                seq=self.events.next_seq(),
                timestamp=self.clock.now(),
                account=account,
                shares_burned=share_amount,
                amount_paid=quote.entitlement,
            ))
            return quote.entitlement

    # =========================================================================
    # POLICIES
    # =========================================================================

    def purchase_policy(
        self,
        owner: str,
        premium: int,
        max_payout: int,
        duration_seconds: int,
        region: str,
    ) -> int:
        """
        Покупка полиса.

        max_payout не проверяется против капитала: недообеспеченность
        разрешается при settlement через cap.

        Returns:
            policy_id

        Raises:
            Paused, InvalidAmount, InvalidInput, TransferFailed
        """
        with self._lock:
            self._check_gate(owner, Operation.PURCHASE)
            # Полис строится до pull: ошибка ввода не трогает капитал
            policy = self._policies.draft(
                owner=owner,
                premium=premium,
                max_payout=max_payout,
                duration=duration_seconds,
                region=region,
                now=self.clock.now(),
            )
            if self.config.validate_contracts:
                validate_policy(policy.model_dump(mode="json"))

            self._pull(owner, premium)
            self._capital.credit(premium)
            self._policies.add(policy)

            logger.info(
                "Policy created: id=%d owner=%s premium=%d max_payout=%d end=%d region=%s",
                policy.policy_id, owner, premium, max_payout, policy.end_time, region,
            )
            self._publish(PolicyCreated(
                seq=self.events.next_seq(),
                timestamp=policy.start_time,
                policy_id=policy.policy_id,
                owner=owner,
                premium=premium,
                max_payout=max_payout,
                start_time=policy.start_time,
                end_time=policy.end_time,
                region=region,
            ))
            return policy.policy_id

    def settle(
        self,
        caller: str,
        policy_ids: Iterable[int],
        payout_ratio_bps: int,
    ) -> SettlementResult:
        """
        Пакетное урегулирование (роль ORACLE).

        Пропуски элементов не являются ошибкой. Пакет целиком отклоняется
        только при Paused / Unauthorized / InvalidRatio.
        """
        with self._lock:
            self._check_gate(caller, Operation.SETTLE)
            now = self.clock.now()
            result = self._settlement.settle_batch(policy_ids, payout_ratio_bps, now)

            for item in result.items:
                if item.outcome != ItemOutcome.PAID:
                    continue
                self._publish(PolicySettled(
                    seq=self.events.next_seq(),
                    timestamp=now,
                    policy_id=item.policy_id,
                    owner=item.policy.owner,
                    payout_ratio_bps=payout_ratio_bps,
                    payout=item.payout,
                ))
            return result

    # =========================================================================
    # ADMIN
    # =========================================================================

    def set_reserve_ratio(self, caller: str, bps: int) -> None:
        with self._lock:
            self._check_gate(caller, Operation.SET_RESERVE_RATIO)
            validate_bps(bps, "reserve_ratio_bps")

            old = self._reserve_ratio_bps
            self._reserve_ratio_bps = bps
            logger.info("Reserve ratio changed: %d -> %d bps by %s", old, bps, caller)
            self._publish(ReserveRatioChanged(
                seq=self.events.next_seq(),
                timestamp=self.clock.now(),
                old_bps=old,
                new_bps=bps,
                by=caller,
            ))

    def pause(self, caller: str) -> None:
        self._set_paused(caller, True)

    def unpause(self, caller: str) -> None:
        self._set_paused(caller, False)

    def grant_role(self, caller: str, account: str, role: Role) -> None:
        with self._lock:
            self._check_gate(caller, Operation.GRANT_ROLE)
            if self.gate.grant(account, role):
                logger.info("Role %s granted to %s by %s", role.value, account, caller)
                self._publish(RoleGranted(
                    seq=self.events.next_seq(),
                    timestamp=self.clock.now(),
                    account=account,
                    role=role.value,
                    by=caller,
                ))

    def revoke_role(self, caller: str, account: str, role: Role) -> None:
        with self._lock:
            self._check_gate(caller, Operation.REVOKE_ROLE)
            if self.gate.revoke(account, role):
                logger.info("Role %s revoked from %s by %s", role.value, account, caller)
                self._publish(RoleRevoked(
                    seq=self.events.next_seq(),
                    timestamp=self.clock.now(),
                    account=account,
                    role=role.value,
                    by=caller,
                ))

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _set_paused(self, caller: str, paused: bool) -> None:
        operation = Operation.PAUSE if paused else Operation.UNPAUSE
        with self._lock:
            self._check_gate(caller, operation)
            self.gate.set_paused(paused)
            logger.info("Pool %s by %s", "paused" if paused else "unpaused", caller)
            self._publish(PauseToggled(
                seq=self.events.next_seq(),
                timestamp=self.clock.now(),
                paused=paused,
                by=caller,
            ))

    def _check_gate(self, caller: str, operation: Operation) -> None:
        result = self.gate.evaluate(caller, operation)
        if result.allowed:
            return
        logger.warning("Gate blocked %s: %s", operation.value, result.details)
        if result.block_reason == "paused":
            raise Paused(result.details)
        raise Unauthorized(result.details)

    def _pull(self, account: str, amount: int) -> None:
        transfer = self.transfer_port.pull(account, amount)
        if not transfer.ok:
            raise TransferFailed(f"pull of {amount} from {account} failed: {transfer.reason}")

    def _publish(self, event: PoolEvent) -> None:
        if self.config.validate_contracts:
            validate_pool_event(event.model_dump(mode="json"))
        self.events.publish(event)
