"""
個體工廠

從基因型工廠產生新的個體，並在有效性判斷失敗時有限次數地重試。
"""

from typing import Any, Callable
import logging

from .individual import Individual, identity

logger = logging.getLogger(__name__)


class IndividualFactory:
    """
    個體工廠

    重試次數用完時回傳最後一次產生的個體（可能無效），而不是拋出例外。
    無效個體會在下一次族群過濾時被計入 invalid_count。
    """

    def __init__(self,
                 genotype_factory: Callable[[], Any],
                 fitness_function: Callable[[Any], Any],
                 fitness_scaler: Callable[[Any], Any] = identity,
                 validator: Callable[[Individual], bool] = Individual.is_valid,
                 retries: int = 10):
        """
        Args:
            genotype_factory: 產生新基因型的函數
            fitness_function: 適應度函數
            fitness_scaler: 適應度縮放函數
            validator: 個體有效性判斷
            retries: 最多嘗試次數（至少會產生一次）
        """
        if retries < 0:
            raise ValueError(f"Retry count must not be negative: {retries}")
        self.genotype_factory = genotype_factory
        self.fitness_function = fitness_function
        self.fitness_scaler = fitness_scaler
        self.validator = validator
        self.retries = retries

    def new_individual(self, generation: int) -> Individual:
        """
        產生新的未評估個體

        Args:
            generation: 新個體的創建世代

        Returns:
            新個體
        """
        count = 0
        valid = False
        while not valid and (count == 0 or count < self.retries):
            individual = Individual.of(
                self.genotype_factory(),
                generation,
                self.fitness_function,
                self.fitness_scaler
            )
            count += 1
            valid = self.validator(individual)

        if not valid:
            logger.debug(f"第 {generation} 世代: {count} 次嘗試後仍無法產生有效個體")
        return individual

    def __call__(self, generation: int) -> Individual:
        return self.new_individual(generation)
