"""
Policy Registry — хранилище полисов и их жизненного цикла

- Идентификаторы строго возрастают с 1 и никогда не переиспользуются
- Полисы не удаляются
- Создание в два шага: draft() строит полис, add() записывает его
- Единственная мутация — replace() ACTIVE → SETTLED из Settlement Engine
"""

from typing import Dict, Iterator, List, Optional

from pydantic import ValidationError

from src.core.domain.policy import Policy, PolicyStatus
from src.core.errors import IllegalPolicyTransition, InvalidInput
from src.core.math.basis_points import validate_account, validate_amount


class PolicyRegistry:
    def __init__(self) -> None:
        self._policies: Dict[int, Policy] = {}
        self._next_policy_id = 1

    @property
    def next_policy_id(self) -> int:
        return self._next_policy_id

    def __len__(self) -> int:
        return len(self._policies)

    def __iter__(self) -> Iterator[Policy]:
        return iter(self._policies.values())

    def get(self, policy_id: int) -> Optional[Policy]:
        return self._policies.get(policy_id)

    def policies_of(self, owner: str) -> List[Policy]:
        return [p for p in self._policies.values() if p.owner == owner]

    def draft(
        self,
        owner: str,
        premium: int,
        max_payout: int,
        duration: int,
        region: str,
        now: int,
    ) -> Policy:
        """
        Построение ACTIVE полиса с окном [now, now + duration) без записи в реестр.

        Полис получает следующий id; реестр не меняется до add().

        Raises:
            InvalidAmount: Если premium, max_payout или duration <= 0
            InvalidInput: Если owner или region некорректны
        """
        validate_amount(premium, "premium")
        validate_amount(max_payout, "max_payout")
        validate_amount(duration, "duration")
        validate_account(owner, "owner")
        if not isinstance(region, str):
            raise InvalidInput(f"region must be str, got {type(region).__name__}")

        try:
            return Policy(
                policy_id=self._next_policy_id,
                owner=owner,
                region=region,
                premium=premium,
                max_payout=max_payout,
                start_time=now,
                end_time=now + duration,
            )
        except ValidationError as e:
            raise InvalidInput(f"invalid policy: {e}") from e

    def add(self, policy: Policy) -> Policy:
        """
        Запись полиса, построенного draft().

        Raises:
            IllegalPolicyTransition: Если id не следующий по порядку или полис не ACTIVE
        """
        if policy.policy_id != self._next_policy_id:
            raise IllegalPolicyTransition(
                f"policy id {policy.policy_id} does not match next id {self._next_policy_id}"
            )
        if policy.status != PolicyStatus.ACTIVE:
            raise IllegalPolicyTransition(f"new policy {policy.policy_id} must be ACTIVE")
        self._policies[policy.policy_id] = policy
        self._next_policy_id += 1
        return policy

    def create(
        self,
        owner: str,
        premium: int,
        max_payout: int,
        duration: int,
        region: str,
        now: int,
    ) -> Policy:
        """draft() + add()."""
        return self.add(self.draft(owner, premium, max_payout, duration, region, now))

    def replace(self, settled: Policy) -> None:
        """
        Запись SETTLED версии полиса.

        Raises:
            IllegalPolicyTransition: Если текущая запись не ACTIVE или новая не SETTLED
        """
        current = self._policies.get(settled.policy_id)
        if current is None or current.status != PolicyStatus.ACTIVE:
            raise IllegalPolicyTransition(
                f"policy {settled.policy_id} is not ACTIVE in registry"
            )
        if settled.status != PolicyStatus.SETTLED:
            raise IllegalPolicyTransition(
                f"policy {settled.policy_id} replacement must be SETTLED"
            )
        self._policies[settled.policy_id] = settled

    def restore(self, policy: Policy) -> None:
        """Откат записи к сохранённой версии (используется при rollback выплаты)."""
        if policy.policy_id not in self._policies:
            raise IllegalPolicyTransition(f"policy {policy.policy_id} unknown")
        self._policies[policy.policy_id] = policy
