"""
演化策略基類

定義引擎所依賴的選擇器與變異器介面。具體的選擇與變異演算法由使用者提供。
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Sequence, Tuple
import logging

from ..individual import Individual
from ..optimize import Optimize

logger = logging.getLogger(__name__)


class EvolutionStrategy(ABC):
    """
    演化策略基類

    策略必須是無狀態的（或自行保證執行緒安全），因為同一個引擎的多個
    演化步驟可能同時呼叫它們。
    """

    name = "base_strategy"


class Selector(EvolutionStrategy):
    """
    選擇器介面
    """

    name = "selector"

    @abstractmethod
    def select(self, population: Sequence[Individual], count: int, optimize: Optimize) -> Sequence[Individual]:
        """
        從族群中選擇個體

        Args:
            population: 已評估的族群（唯讀）
            count: 要選擇的個體數量
            optimize: 優化方向

        Returns:
            正好 count 個個體（允許重複選擇）
        """
        pass


class AltererResult(NamedTuple):
    """變異結果：變異後的族群與被改變的個體數量"""

    population: Tuple[Individual, ...]
    alterations: int = 0


class Alterer(EvolutionStrategy):
    """
    變異器介面（交配、突變）
    """

    name = "alterer"

    @abstractmethod
    def alter(self, population: Sequence[Individual], generation: int) -> AltererResult:
        """
        變異族群

        Args:
            population: 被選中的子代族群
            generation: 當前世代

        Returns:
            AltererResult(變異後的族群, 變異數量)
        """
        pass

    def compose(self, after: 'Alterer') -> 'CompositeAlterer':
        """先執行自身，再執行 after"""
        return CompositeAlterer(self, after)


def as_alterer_result(value) -> AltererResult:
    """接受 AltererResult 或 (population, alterations) 二元組"""
    population, alterations = value
    return AltererResult(tuple(population), int(alterations))


class CompositeAlterer(Alterer):
    """
    組合變異器

    依序執行多個變異器，變異數量累加。
    """

    name = "composite"

    def __init__(self, *alterers):
        if not alterers:
            raise ValueError("at least one alterer is required")
        flattened = []
        for alterer in alterers:
            if alterer is None or not hasattr(alterer, 'alter'):
                raise TypeError(f"alterer must provide alter(): {type(alterer)}")
            if isinstance(alterer, CompositeAlterer):
                flattened.extend(alterer.alterers)
            else:
                flattened.append(alterer)
        self.alterers = tuple(flattened)

    def alter(self, population: Sequence[Individual], generation: int) -> AltererResult:
        current = tuple(population)
        total = 0
        for alterer in self.alterers:
            current, count = as_alterer_result(alterer.alter(current, generation))
            total += count
        return AltererResult(current, total)

    def __repr__(self) -> str:
        return f"CompositeAlterer({', '.join(type(a).__name__ for a in self.alterers)})"
