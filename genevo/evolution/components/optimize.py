"""
優化方向

定義適應度比較的方向（最大化或最小化）。
"""

from enum import Enum
from typing import Any, Iterable, List, Optional


class Optimize(Enum):
    """
    優化方向

    MAXIMUM 表示適應度越大越好，MINIMUM 表示適應度越小越好。
    """

    MAXIMUM = 'max'
    MINIMUM = 'min'

    @classmethod
    def of(cls, value) -> 'Optimize':
        """從 Optimize 或字串 ('max'/'min') 取得優化方向"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {'max': cls.MAXIMUM, 'maximum': cls.MAXIMUM,
                       'min': cls.MINIMUM, 'minimum': cls.MINIMUM}
            if key in aliases:
                return aliases[key]
        raise ValueError(f"optimize must be 'max' or 'min', got {value!r}")

    def compare(self, a: Any, b: Any) -> int:
        """
        比較兩個適應度值

        Returns:
            正數表示 a 較好，負數表示 b 較好，0 表示相同
        """
        if a == b:
            return 0
        better = a > b if self is Optimize.MAXIMUM else a < b
        return 1 if better else -1

    def best(self, a: Any, b: Any) -> Any:
        return a if self.compare(a, b) >= 0 else b

    def worst(self, a: Any, b: Any) -> Any:
        return b if self.compare(a, b) >= 0 else a

    def is_better(self, a: Any, b: Any) -> bool:
        return self.compare(a, b) > 0

    def best_individual(self, individuals: Iterable) -> Optional[Any]:
        """回傳適應度最佳的個體，忽略尚未評估的個體"""
        best = None
        for ind in individuals:
            if not ind.is_evaluated:
                continue
            if best is None or self.is_better(ind.fitness, best.fitness):
                best = ind
        return best

    def worst_individual(self, individuals: Iterable) -> Optional[Any]:
        worst = None
        for ind in individuals:
            if not ind.is_evaluated:
                continue
            if worst is None or self.is_better(worst.fitness, ind.fitness):
                worst = ind
        return worst

    def sort(self, individuals: Iterable) -> List:
        """依適應度由佳到差排序（只包含已評估的個體）"""
        evaluated = [ind for ind in individuals if ind.is_evaluated]
        return sorted(evaluated, key=lambda ind: ind.fitness,
                      reverse=self is Optimize.MAXIMUM)
