"""
演化終止條件

每個終止條件都是可呼叫物件 limit(result) -> bool，回傳 True 表示繼續演化。
有狀態的條件提供 fresh()，讓 EvolutionStream 在每次迭代開始時取得新的狀態。
"""

from typing import Any, Callable, Dict, Optional
import time

from .components.optimize import Optimize
from .components.result import EvolutionResult


class FixedGenerationLimit:
    """固定世代數：恰好產生 generations 個世代結果"""

    def __init__(self, generations: int):
        if generations < 1:
            raise ValueError(f"generations must be >= 1, got {generations}")
        self.generations = generations

    def fresh(self) -> 'FixedGenerationLimit':
        return self

    def __call__(self, result: EvolutionResult) -> bool:
        return result.total_generations < self.generations

    def __repr__(self) -> str:
        return f"FixedGenerationLimit(generations={self.generations})"


class SteadyFitnessLimit:
    """
    穩定適應度終止條件

    當連續 generations 個世代的最佳適應度沒有改進時，終止演化。

    Example:
        >>> limit = SteadyFitnessLimit(generations=10)
        >>> for result in engine.stream().limit(limit):
        ...     pass
    """

    def __init__(self, generations: int, min_delta: float = 0.0):
        """
        Args:
            generations: 連續無進步的世代數量，達到此數量時停止
            min_delta: 最小改進閾值（僅用於數值適應度）

        Raises:
            ValueError: 如果 generations < 1
        """
        if generations < 1:
            raise ValueError(f"generations must be >= 1, got {generations}")

        self.generations = generations
        self.min_delta = min_delta

        # 內部狀態
        self.counter = 0
        self.best_fitness: Optional[Any] = None
        self.should_stop = False

    def fresh(self) -> 'SteadyFitnessLimit':
        return SteadyFitnessLimit(self.generations, self.min_delta)

    def step(self, current_fitness: Any, optimize: Optimize) -> bool:
        """
        記錄當前世代的最佳適應度

        Returns:
            bool: True 表示應該停止
        """
        if self.best_fitness is None:
            self.best_fitness = current_fitness
            return False

        if self._improved(current_fitness, optimize):
            self.best_fitness = current_fitness
            self.counter = 0
        else:
            self.counter += 1

        if self.counter >= self.generations:
            self.should_stop = True
        return self.should_stop

    def _improved(self, current_fitness: Any, optimize: Optimize) -> bool:
        if self.min_delta and isinstance(current_fitness, (int, float)):
            if optimize is Optimize.MAXIMUM:
                improvement = current_fitness - self.best_fitness
            else:
                improvement = self.best_fitness - current_fitness
            return improvement > self.min_delta
        return optimize.is_better(current_fitness, self.best_fitness)

    def __call__(self, result: EvolutionResult) -> bool:
        best = result.best_fitness
        if best is None:
            return True
        return not self.step(best, result.optimize)

    def get_status(self) -> Dict[str, Any]:
        return {
            'counter': self.counter,
            'best_fitness': self.best_fitness,
            'should_stop': self.should_stop,
            'generations': self.generations,
            'min_delta': self.min_delta,
        }

    def __repr__(self) -> str:
        return (f"SteadyFitnessLimit(generations={self.generations}, min_delta={self.min_delta}, "
                f"counter={self.counter})")


class FitnessThresholdLimit:
    """最佳適應度達到（或超過）門檻時停止"""

    def __init__(self, threshold: Any):
        self.threshold = threshold

    def fresh(self) -> 'FitnessThresholdLimit':
        return self

    def __call__(self, result: EvolutionResult) -> bool:
        best = result.best_fitness
        if best is None:
            return True
        return result.optimize.compare(best, self.threshold) < 0

    def __repr__(self) -> str:
        return f"FitnessThresholdLimit(threshold={self.threshold!r})"


class ExecutionTimeLimit:
    """從第一個世代結果開始計時，超過 seconds 秒後停止"""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        if seconds < 0:
            raise ValueError(f"seconds must not be negative, got {seconds}")
        self.seconds = seconds
        self.clock = clock
        self._start: Optional[float] = None

    def fresh(self) -> 'ExecutionTimeLimit':
        return ExecutionTimeLimit(self.seconds, self.clock)

    def __call__(self, result: EvolutionResult) -> bool:
        now = self.clock()
        if self._start is None:
            self._start = now
        return now - self._start <= self.seconds

    def __repr__(self) -> str:
        return f"ExecutionTimeLimit(seconds={self.seconds})"


def by_fixed_generation(generations: int) -> FixedGenerationLimit:
    return FixedGenerationLimit(generations)


def by_steady_fitness(generations: int, min_delta: float = 0.0) -> SteadyFitnessLimit:
    return SteadyFitnessLimit(generations, min_delta)


def by_fitness_threshold(threshold: Any) -> FitnessThresholdLimit:
    return FitnessThresholdLimit(threshold)


def by_execution_time(seconds: float, clock: Callable[[], float] = time.monotonic) -> ExecutionTimeLimit:
    return ExecutionTimeLimit(seconds, clock)
