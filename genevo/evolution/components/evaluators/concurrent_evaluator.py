"""
並行適應度評估器

預設評估器把尚未評估的個體分派到執行器上並行計算；批次評估器則讓
使用者一次評估整批基因型（例如一次外部呼叫評估整個世代）。
兩者共用相同的保序回填邏輯。
"""

from concurrent.futures import Executor
from typing import Any, Callable, List, Sequence, Tuple
import logging

from .base import FitnessEvaluator
from ..individual import Individual
from ....exceptions import EvaluationMismatchError

logger = logging.getLogger(__name__)


def _unevaluated_indices(population: Sequence[Individual]) -> List[int]:
    return [i for i, ind in enumerate(population) if not ind.is_evaluated]


def _splice(population: Sequence[Individual],
            indices: List[int],
            evaluated: Sequence[Individual]) -> Tuple[Individual, ...]:
    """把評估後的個體放回原本的位置"""
    result = list(population)
    for index, individual in zip(indices, evaluated):
        result[index] = individual
    return tuple(result)


class ConcurrentEvaluator(FitnessEvaluator):
    """
    並行評估器

    每個尚未評估的個體都是一個獨立的工作單元，提交到執行器後等待全部完成。
    """

    name = "concurrent"

    def __init__(self, executor: Executor):
        """
        Args:
            executor: 用來執行適應度函數的執行器
        """
        if executor is None:
            raise ValueError("executor must not be None")
        self.executor = executor

    def evaluate(self, population: Sequence[Individual]) -> Tuple[Individual, ...]:
        indices = _unevaluated_indices(population)
        if not indices:
            return tuple(population)

        futures = [self.executor.submit(population[i].evaluate) for i in indices]
        evaluated = [future.result() for future in futures]
        logger.debug(f"評估了 {len(evaluated)} 個個體 (族群大小 {len(population)})")
        return _splice(population, indices, evaluated)


class GenotypeBatchEvaluator(FitnessEvaluator):
    """
    批次評估器

    把所有尚未評估的基因型一次交給使用者的批次函數。
    批次函數簽名: function(genotypes, fitness_function) -> 原始適應度列表
    """

    name = "batch"

    def __init__(self, function: Callable[[Sequence[Any], Callable[[Any], Any]], Sequence[Any]]):
        if not callable(function):
            raise TypeError(f"batch evaluation function must be callable: {type(function)}")
        self.function = function

    def evaluate(self, population: Sequence[Individual]) -> Tuple[Individual, ...]:
        indices = _unevaluated_indices(population)
        if not indices:
            return tuple(population)

        genotypes = [population[i].genotype for i in indices]
        results = list(self.function(genotypes, population[indices[0]].fitness_function))
        if len(results) != len(genotypes):
            raise EvaluationMismatchError(len(genotypes), len(results))

        evaluated = [population[i].with_fitness(value) for i, value in zip(indices, results)]
        logger.debug(f"批次評估了 {len(evaluated)} 個個體")
        return _splice(population, indices, evaluated)
