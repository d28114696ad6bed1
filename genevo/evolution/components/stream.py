"""
演化流

把引擎的單步演化串成惰性、可重複迭代的世代序列，並在迭代過程中
通知事件處理器。
"""

from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

from .individual import Individual
from .result import EvolutionResult, EvolutionStart

logger = logging.getLogger(__name__)

Limit = Callable[[EvolutionResult], bool]


class EvolutionStream:
    """
    演化流

    每次迭代都從同一個起點重新開始；limit() 會回傳新的演化流，
    不改變原本的演化流。

    Example:
        >>> best = to_best_individual(
        ...     engine.stream().limit(by_fixed_generation(100))
        ... )
    """

    def __init__(self,
                 engine,
                 start: Callable[[], EvolutionStart],
                 limits: Sequence[Callable[[], Limit]] = (),
                 handlers: Sequence[Any] = ()):
        self.engine = engine
        self._start = start
        self._limits: Tuple[Callable[[], Limit], ...] = tuple(limits)
        self.handlers: List[Any] = list(handlers)

    @classmethod
    def of(cls, engine, population: Optional[Iterable[Any]] = None, generation: int = 1) -> 'EvolutionStream':
        """
        從引擎創建演化流

        Args:
            engine: EvolutionEngine
            population: 初始個體或基因型（可選）
            generation: 起始世代（>= 1）
        """
        if generation < 1:
            raise ValueError(f"Generation must be greater than zero, but was {generation}.")
        initial = tuple(population) if population is not None else ()

        def start() -> EvolutionStart:
            return EvolutionStart.of(_initial_population(engine, initial, generation), generation)

        return cls(engine, start)

    def limit(self, predicate) -> 'EvolutionStream':
        """
        加上終止條件

        predicate 可以是 limit 工廠（每次迭代產生新的狀態）或一般的判斷函數。
        判斷函數回傳 False 時，該世代結果仍會被輸出，之後停止迭代。
        """
        if not callable(predicate):
            raise TypeError(f"limit must be callable, got {type(predicate)}")
        factory = predicate.fresh if hasattr(predicate, 'fresh') else (lambda: predicate)
        return EvolutionStream(self.engine, self._start, self._limits + (factory,), self.handlers)

    def add_handler(self, handler) -> 'EvolutionStream':
        """添加事件處理器"""
        self.handlers.append(handler)
        return self

    def _fire_event(self, event_name: str, **kwargs):
        for handler in self.handlers:
            try:
                dispatch = getattr(handler, 'handle_event', None)
                if callable(dispatch):
                    dispatch(event_name, **kwargs)
                elif hasattr(handler, f'on_{event_name}'):
                    getattr(handler, f'on_{event_name}')(**kwargs)
            except Exception as e:
                logger.error(f"事件處理器 {handler.__class__.__name__} 處理 {event_name} 事件時出錯: {e}")

    def __iter__(self) -> Iterator[EvolutionResult]:
        limits = [factory() for factory in self._limits]
        start = self._start()
        self._fire_event('evolution_start', stream=self, start=start)

        result: Optional[EvolutionResult] = None
        total = 0
        try:
            while True:
                total += 1
                result = self.engine.apply(start).with_total_generations(total)
                self._fire_event('generation_complete', result=result)
                yield result

                if not all(limit(result) for limit in limits):
                    break
                start = result.next()
        finally:
            if result is not None:
                self._fire_event('evolution_complete', result=result)

    def __repr__(self) -> str:
        return f"EvolutionStream(limits={len(self._limits)}, handlers={len(self.handlers)})"


def _initial_population(engine, elements: Sequence[Any], generation: int) -> Tuple[Individual, ...]:
    size = engine.population_size
    population = []
    for element in elements[:size]:
        if isinstance(element, Individual):
            population.append(engine.to_fixed_individual(element))
        else:
            population.append(Individual.of(element, generation, engine.fitness_function, engine.fitness_scaler))

    while len(population) < size:
        population.append(engine.new_individual(generation))
    return tuple(population)


# ----------------------------------------------------------------------
# 收集函數
# ----------------------------------------------------------------------

def to_best_result(results: Iterable[EvolutionResult]) -> Optional[EvolutionResult]:
    """回傳最佳個體最好的世代結果；同分時保留較早的結果"""
    best: Optional[EvolutionResult] = None
    for result in results:
        if best is None:
            best = result
            continue
        candidate = result.best_individual
        if candidate is not None and (best.best_individual is None or
                                      result.optimize.is_better(candidate.fitness, best.best_fitness)):
            best = result
    return best


def to_best_individual(results: Iterable[EvolutionResult]) -> Optional[Individual]:
    best = to_best_result(results)
    return best.best_individual if best is not None else None


def to_best_genotype(results: Iterable[EvolutionResult]) -> Optional[Any]:
    individual = to_best_individual(results)
    return individual.genotype if individual is not None else None
