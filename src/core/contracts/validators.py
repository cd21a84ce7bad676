"""
JSON контракты пула

Три контракта в contracts/schema/ (Draft 2020-12):
- pool_state — снапшот ParametricPool.snapshot().to_contract_dict()
- policy — запись полиса (Policy.model_dump(mode="json"))
- pool_event — уведомление из EventLog

ParametricPool проверяет снапшоты, новые полисы и публикуемые события
при PoolConfig.validate_contracts=True.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

from jsonschema import Draft202012Validator

# <root>/contracts/schema, рядом с src/
SCHEMA_DIR: Path = Path(__file__).resolve().parents[3] / "contracts" / "schema"

POOL_STATE = "pool_state"
POLICY = "policy"
POOL_EVENT = "pool_event"

CONTRACTS: Tuple[str, ...] = (POOL_STATE, POLICY, POOL_EVENT)


@lru_cache(maxsize=None)
def contract_validator(name: str) -> Draft202012Validator:
    """
    Валидатор контракта по имени схемы (кэшируется на процесс).

    Raises:
        FileNotFoundError: Если схемы нет в SCHEMA_DIR
        jsonschema.SchemaError: Если схема сама невалидна
    """
    path = SCHEMA_DIR / f"{name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Contract schema not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_pool_state(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Снапшот не соответствует pool_state.json
    """
    contract_validator(POOL_STATE).validate(data)


def validate_policy(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Полис не соответствует policy.json
    """
    contract_validator(POLICY).validate(data)


def validate_pool_event(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Событие не соответствует pool_event.json
    """
    contract_validator(POOL_EVENT).validate(data)
