"""Pool — фасад общего фонда: LP депозиты, полисы, settlement, выводы."""

from .config import PoolConfig
from .fund import ParametricPool

__all__ = [
    "ParametricPool",
    "PoolConfig",
]
