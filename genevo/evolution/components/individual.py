"""
演化個體類

個體（phenotype）是不可變的值：基因型、創建世代、可選的適應度，
以及計算適應度所使用的適應度函數與縮放函數。
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional


def identity(value: Any) -> Any:
    """預設的適應度縮放函數"""
    return value


@dataclass(frozen=True)
class Individual:
    """
    演化個體

    不變式：fitness 要嘛不存在，要嘛正好由記錄的 fitness_function 與
    fitness_scaler 計算而來。所有修改操作都回傳新的實例。

    Attributes:
        genotype: 基因型（由使用者定義的編碼）
        generation: 創建時的世代
        fitness_function: 計算原始適應度的函數
        fitness_scaler: 縮放原始適應度的函數
        raw_fitness: 未縮放的適應度（未評估時為 None）
        fitness: 縮放後的適應度（未評估時為 None）
    """

    genotype: Any
    generation: int
    fitness_function: Callable[[Any], Any] = field(compare=False, repr=False)
    fitness_scaler: Callable[[Any], Any] = field(default=identity, compare=False, repr=False)
    raw_fitness: Optional[Any] = None
    fitness: Optional[Any] = None

    def __post_init__(self):
        if self.generation < 0:
            raise ValueError(f"generation must be >= 0, got {self.generation}")
        if not callable(self.fitness_function):
            raise TypeError("fitness_function must be callable")
        if not callable(self.fitness_scaler):
            raise TypeError("fitness_scaler must be callable")

    @classmethod
    def of(cls,
           genotype: Any,
           generation: int,
           fitness_function: Callable[[Any], Any],
           fitness_scaler: Callable[[Any], Any] = identity) -> 'Individual':
        """創建尚未評估的個體"""
        return cls(genotype, generation, fitness_function, fitness_scaler)

    @property
    def is_evaluated(self) -> bool:
        return self.fitness is not None

    def age(self, current_generation: int) -> int:
        """個體在指定世代的年齡"""
        return current_generation - self.generation

    def evaluate(self) -> 'Individual':
        """
        計算適應度

        Returns:
            已評估的新個體；若已評估則回傳自身
        """
        if self.is_evaluated:
            return self
        return self.with_fitness(self.fitness_function(self.genotype))

    def with_fitness(self, raw_fitness: Any) -> 'Individual':
        """回傳帶有指定原始適應度的新個體"""
        return replace(self, raw_fitness=raw_fitness,
                       fitness=self.fitness_scaler(raw_fitness))

    def new_instance(self,
                     generation: int,
                     fitness_function: Callable[[Any], Any],
                     fitness_scaler: Callable[[Any], Any] = identity) -> 'Individual':
        """以新的適應度函數重新綁定基因型，適應度會被清除"""
        return Individual.of(self.genotype, generation, fitness_function, fitness_scaler)

    def is_comparable_with(self, other: 'Individual') -> bool:
        return (self.fitness_function is other.fitness_function and
                self.fitness_scaler is other.fitness_scaler)

    def is_valid(self) -> bool:
        """預設的有效性判斷：委派給基因型的 is_valid()（如果有的話）"""
        check = getattr(self.genotype, 'is_valid', None)
        if callable(check):
            return bool(check())
        return True
