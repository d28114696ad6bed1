"""
族群過濾器

把無效或超齡的個體替換成新產生的個體，並統計替換原因。
"""

from typing import Callable, Sequence
import logging

from .factory import IndividualFactory
from .individual import Individual
from .result import FilterResult

logger = logging.getLogger(__name__)


class PopulationFilter:
    """
    族群過濾器

    對每個位置：
    1. 無效個體 → 替換（invalid_count +1）
    2. 否則年齡超過 maximal_phenotype_age → 替換（kill_count +1）
    3. 否則保留原個體

    每個替換個體都是獨立產生的新實例。
    """

    def __init__(self,
                 validator: Callable[[Individual], bool],
                 maximal_phenotype_age: int,
                 factory: IndividualFactory):
        if maximal_phenotype_age < 0:
            raise ValueError(f"Phenotype age must not be negative, but was {maximal_phenotype_age}.")
        self.validator = validator
        self.maximal_phenotype_age = maximal_phenotype_age
        self.factory = factory

    def filter(self, population: Sequence[Individual], generation: int) -> FilterResult:
        """
        過濾族群（不修改輸入）

        Args:
            population: 要過濾的族群
            generation: 當前世代

        Returns:
            FilterResult(過濾後的族群, 超齡數, 無效數)
        """
        filtered = list(population)
        kill_count = 0
        invalid_count = 0

        for i, individual in enumerate(filtered):
            if not self.validator(individual):
                filtered[i] = self.factory.new_individual(generation)
                invalid_count += 1
            elif individual.age(generation) > self.maximal_phenotype_age:
                filtered[i] = self.factory.new_individual(generation)
                kill_count += 1

        if kill_count or invalid_count:
            logger.debug(f"   過濾: 淘汰 {kill_count} 個超齡個體, 替換 {invalid_count} 個無效個體")
        return FilterResult(tuple(filtered), kill_count, invalid_count)
