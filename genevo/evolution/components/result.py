"""
演化結果類

封裝單一世代演化步驟的輸入與輸出：起始族群、各階段耗時、
以及替換與變異的統計數量。
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from .individual import Individual
from .optimize import Optimize


@dataclass(frozen=True)
class EvolutionStart:
    """演化步驟的輸入：族群與世代計數（世代 >= 1）"""

    population: Tuple[Individual, ...]
    generation: int

    def __post_init__(self):
        if self.population is None:
            raise ValueError("population must not be None")
        if self.generation < 1:
            raise ValueError(f"generation must be >= 1, got {self.generation}")
        object.__setattr__(self, 'population', tuple(self.population))

    @classmethod
    def of(cls, population: Sequence[Individual], generation: int) -> 'EvolutionStart':
        return cls(population, generation)


@dataclass(frozen=True)
class FilterResult:
    """族群過濾的結果"""

    population: Tuple[Individual, ...]
    kill_count: int
    invalid_count: int


@dataclass(frozen=True)
class EvolutionDurations:
    """
    單一演化步驟各階段的耗時（秒）

    evaluation 為兩次適應度評估的總和，evolve 為整個步驟的時間。
    """

    offspring_selection: float = 0.0
    survivor_selection: float = 0.0
    offspring_alter: float = 0.0
    offspring_filter: float = 0.0
    survivor_filter: float = 0.0
    evaluation: float = 0.0
    evolve: float = 0.0

    def __add__(self, other: 'EvolutionDurations') -> 'EvolutionDurations':
        if not isinstance(other, EvolutionDurations):
            return NotImplemented
        return EvolutionDurations(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        })

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


EvolutionDurations.ZERO = EvolutionDurations()


@dataclass(frozen=True)
class EvolutionResult:
    """
    演化步驟結果

    包含優化方向、已評估的族群、世代、各階段耗時，以及
    被淘汰（超齡）、無效與被變異的個體數量。
    """

    optimize: Optimize
    population: Tuple[Individual, ...]
    generation: int
    durations: EvolutionDurations
    kill_count: int
    invalid_count: int
    alter_count: int
    total_generations: int = 1

    @property
    def best_individual(self) -> Optional[Individual]:
        return self.optimize.best_individual(self.population)

    @property
    def worst_individual(self) -> Optional[Individual]:
        return self.optimize.worst_individual(self.population)

    @property
    def best_fitness(self) -> Optional[Any]:
        best = self.best_individual
        return best.fitness if best is not None else None

    @property
    def worst_fitness(self) -> Optional[Any]:
        worst = self.worst_individual
        return worst.fitness if worst is not None else None

    def next(self) -> EvolutionStart:
        """下一個演化步驟的輸入"""
        return EvolutionStart.of(self.population, self.generation + 1)

    def with_total_generations(self, total_generations: int) -> 'EvolutionResult':
        return replace(self, total_generations=total_generations)

    def to_dict(self) -> Dict[str, Any]:
        """轉換為字典格式（不包含族群本身）"""
        return {
            'optimize': self.optimize.value,
            'generation': self.generation,
            'total_generations': self.total_generations,
            'population_size': len(self.population),
            'best_fitness': self.best_fitness,
            'worst_fitness': self.worst_fitness,
            'kill_count': self.kill_count,
            'invalid_count': self.invalid_count,
            'alter_count': self.alter_count,
            'durations': self.durations.to_dict(),
        }
