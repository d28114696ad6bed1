"""
適應度評估器基類

定義演化計算中適應度評估的統一接口。
"""

from typing import Sequence, Tuple
from abc import ABC, abstractmethod
import logging

from ..individual import Individual

logger = logging.getLogger(__name__)


class FitnessEvaluator(ABC):
    """
    適應度評估器基類

    所有評估器都必須繼承此類並實現 evaluate 方法。
    """

    name = "base_evaluator"

    @abstractmethod
    def evaluate(self, population: Sequence[Individual]) -> Tuple[Individual, ...]:
        """
        評估整個族群的適應度

        回傳族群的大小必須與輸入相同，且每個個體都已評估；
        已評估的個體保持原位置與原適應度。

        Args:
            population: 要評估的族群（部分個體可能已評估）

        Returns:
            已完全評估的族群
        """
        pass

    def __call__(self, population: Sequence[Individual]) -> Tuple[Individual, ...]:
        return self.evaluate(population)
