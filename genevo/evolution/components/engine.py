"""
演化引擎核心類

這個模組實現單一世代的演化步驟：評估、並行選擇子代與存活者、
變異子代、過濾兩個族群、合併後再評估，並彙整各階段耗時與統計。

引擎本身是不可變的配置值，不保留任何每次呼叫的狀態，因此同一個
引擎可以同時被多個呼叫者使用。
"""

from concurrent.futures import Executor
from typing import Any, Callable, Optional, Sequence, Tuple
import logging

from .evaluators.base import FitnessEvaluator
from .factory import IndividualFactory
from .filter import PopulationFilter
from .individual import Individual
from .optimize import Optimize
from .result import EvolutionDurations, EvolutionResult, EvolutionStart, FilterResult
from .strategies.base import Alterer, AltererResult, Selector, as_alterer_result
from ...exceptions import PopulationSizeError
from ...parallel.executor import Clock, TimedExecutor, TimedResult, Timer

logger = logging.getLogger(__name__)


class EvolutionEngine:
    """
    演化引擎

    負責協調單一世代的並行演化管線：

        evaluate → {select offspring, select survivors}
                 → {alter offspring → filter offspring}, {filter survivors}
                 → combine → evaluate

    通常透過 EngineBuilder 建立，不直接呼叫建構子。
    """

    def __init__(self,
                 fitness_function: Callable[[Any], Any],
                 genotype_factory: Callable[[], Any],
                 fitness_scaler: Callable[[Any], Any],
                 survivors_selector: Selector,
                 offspring_selector: Selector,
                 alterer: Alterer,
                 validator: Callable[[Individual], bool],
                 optimize: Optimize,
                 offspring_count: int,
                 survivors_count: int,
                 maximal_phenotype_age: int,
                 executor: Executor,
                 evaluator: FitnessEvaluator,
                 clock: Clock,
                 individual_creation_retries: int,
                 mapping: Callable[[EvolutionResult], EvolutionResult]):
        required = {
            'fitness_function': fitness_function,
            'genotype_factory': genotype_factory,
            'fitness_scaler': fitness_scaler,
            'survivors_selector': survivors_selector,
            'offspring_selector': offspring_selector,
            'alterer': alterer,
            'validator': validator,
            'optimize': optimize,
            'executor': executor,
            'evaluator': evaluator,
            'clock': clock,
            'mapping': mapping,
        }
        for name, value in required.items():
            if value is None:
                raise ValueError(f"缺少必要的引擎組件: {name}")

        if offspring_count < 0:
            raise ValueError(f"Offspring count must not be negative: {offspring_count}")
        if survivors_count < 0:
            raise ValueError(f"Survivors count must not be negative: {survivors_count}")
        if offspring_count + survivors_count < 1:
            raise ValueError("Population size must be greater than zero.")
        if maximal_phenotype_age < 0:
            raise ValueError(f"Phenotype age must not be negative: {maximal_phenotype_age}")
        if individual_creation_retries < 0:
            raise ValueError(f"Retry count must not be negative: {individual_creation_retries}")

        self._fitness_function = fitness_function
        self._genotype_factory = genotype_factory
        self._fitness_scaler = fitness_scaler
        self._survivors_selector = survivors_selector
        self._offspring_selector = offspring_selector
        self._alterer = alterer
        self._validator = validator
        self._optimize = Optimize.of(optimize)
        self._offspring_count = offspring_count
        self._survivors_count = survivors_count
        self._maximal_phenotype_age = maximal_phenotype_age
        self._executor = TimedExecutor(executor)
        self._evaluator = evaluator
        self._clock = clock
        self._individual_creation_retries = individual_creation_retries
        self._mapping = mapping

        self._factory = IndividualFactory(
            genotype_factory,
            fitness_function,
            fitness_scaler,
            validator,
            individual_creation_retries
        )
        self._filter = PopulationFilter(validator, maximal_phenotype_age, self._factory)

        logger.info(
            f"演化引擎已創建: 族群={self.population_size} "
            f"(子代={offspring_count}, 存活者={survivors_count}), "
            f"最大年齡={maximal_phenotype_age}, 優化={self._optimize.value}"
        )

    # ------------------------------------------------------------------
    # 演化步驟
    # ------------------------------------------------------------------

    def evolve(self, population: Sequence[Individual], generation: int) -> EvolutionResult:
        """
        執行一個世代的演化

        Args:
            population: 當前族群（不會被修改）
            generation: 當前世代（>= 1）

        Returns:
            演化結果
        """
        return self.apply(EvolutionStart.of(population, generation))

    def apply(self, start: EvolutionStart) -> EvolutionResult:
        """
        執行一個世代的演化

        Args:
            start: 演化步驟的輸入

        Returns:
            演化結果（已套用 mapping）

        Raises:
            ValueError: 族群大小與引擎配置不符
            PopulationSizeError: 評估器或其他階段改變了族群大小
        """
        if len(start.population) != self.population_size:
            raise ValueError(
                f"Expected a population of {self.population_size} individuals, "
                f"but got {len(start.population)}."
            )

        clock = self._clock
        generation = start.generation
        timer = Timer.of(clock).start()

        # 1. 評估初始族群
        evaluate_timer = Timer.of(clock).start()
        evaluated = self._evaluate(start.population)
        evaluate_timer.stop()

        # 2. 並行選擇子代與存活者
        offspring = self._executor.submit(lambda: self._select_offspring(evaluated), clock)
        survivors = self._executor.submit(lambda: self._select_survivors(evaluated), clock)

        # 3. 變異子代
        altered_offspring = self._executor.then_apply(
            offspring,
            lambda timed: self._alter(timed.result, generation),
            clock
        )

        # 4. 過濾存活者（與變異並行）
        filtered_survivors = self._executor.then_apply(
            survivors,
            lambda timed: self._filter.filter(timed.result, generation),
            clock
        )

        # 5. 過濾變異後的子代
        filtered_offspring = self._executor.then_apply(
            altered_offspring,
            lambda timed: self._filter.filter(timed.result.population, generation),
            clock
        )

        # 6. 合併存活者與子代
        combined = self._executor.combine(
            filtered_survivors,
            filtered_offspring,
            lambda s, o: s.result.population + o.result.population
        )
        next_population = combined.result()
        if len(next_population) != self.population_size:
            raise PopulationSizeError(self.population_size, len(next_population), stage="selector or alterer")

        # 7. 評估新族群
        evaluation: TimedResult[Tuple[Individual, ...]] = TimedResult.of(
            lambda: self._evaluate(next_population), clock
        )()

        survivor_filter: FilterResult = filtered_survivors.result().result
        offspring_filter: FilterResult = filtered_offspring.result().result
        alter_result: AltererResult = altered_offspring.result().result

        # 8. 彙整耗時
        durations = EvolutionDurations(
            offspring_selection=offspring.result().duration,
            survivor_selection=survivors.result().duration,
            offspring_alter=altered_offspring.result().duration,
            offspring_filter=filtered_offspring.result().duration,
            survivor_filter=filtered_survivors.result().duration,
            evaluation=evaluation.duration + evaluate_timer.time,
            evolve=timer.stop().time
        )

        # 9. 統計替換數量
        kill_count = offspring_filter.kill_count + survivor_filter.kill_count
        invalid_count = offspring_filter.invalid_count + survivor_filter.invalid_count

        result = EvolutionResult(
            optimize=self._optimize,
            population=evaluation.result,
            generation=generation,
            durations=durations,
            kill_count=kill_count,
            invalid_count=invalid_count,
            alter_count=alter_result.alterations
        )

        logger.debug(
            f"第 {generation} 世代完成: 淘汰={kill_count}, 無效={invalid_count}, "
            f"變異={alter_result.alterations}, 耗時={durations.evolve:.4f}s"
        )

        # 10. 套用結果映射
        return self._mapping(result)

    def __call__(self, start: EvolutionStart) -> EvolutionResult:
        return self.apply(start)

    def _evaluate(self, population: Tuple[Individual, ...]) -> Tuple[Individual, ...]:
        evaluated = tuple(self._evaluator.evaluate(population))
        if len(evaluated) != len(population):
            raise PopulationSizeError(len(population), len(evaluated))
        return evaluated

    def _select_offspring(self, population: Tuple[Individual, ...]) -> Tuple[Individual, ...]:
        if self._offspring_count <= 0:
            return ()
        return tuple(self._offspring_selector.select(population, self._offspring_count, self._optimize))

    def _select_survivors(self, population: Tuple[Individual, ...]) -> Tuple[Individual, ...]:
        if self._survivors_count <= 0:
            return ()
        return tuple(self._survivors_selector.select(population, self._survivors_count, self._optimize))

    def _alter(self, population: Tuple[Individual, ...], generation: int) -> AltererResult:
        return as_alterer_result(self._alterer.alter(population, generation))

    # ------------------------------------------------------------------
    # 演化流
    # ------------------------------------------------------------------

    def new_individual(self, generation: int) -> Individual:
        """以引擎的基因型工廠產生新個體（有限次數重試）"""
        return self._factory.new_individual(generation)

    def to_fixed_individual(self, individual: Individual) -> Individual:
        """確保個體綁定到引擎的適應度函數與縮放函數"""
        if (individual.fitness_function is self._fitness_function and
                individual.fitness_scaler is self._fitness_scaler):
            return individual
        return individual.new_instance(individual.generation, self._fitness_function, self._fitness_scaler)

    def stream(self, population: Optional[Sequence[Any]] = None, generation: int = 1):
        """
        創建惰性演化流

        Args:
            population: 初始個體或基因型（可選，不足的部分由工廠補齊）
            generation: 起始世代

        Returns:
            EvolutionStream
        """
        from .stream import EvolutionStream
        return EvolutionStream.of(self, population, generation)

    def builder(self):
        """回傳帶有此引擎配置的 EngineBuilder"""
        from .builder import EngineBuilder
        return EngineBuilder.from_engine(self)

    # ------------------------------------------------------------------
    # 唯讀配置
    # ------------------------------------------------------------------

    @property
    def fitness_function(self) -> Callable[[Any], Any]:
        return self._fitness_function

    @property
    def fitness_scaler(self) -> Callable[[Any], Any]:
        return self._fitness_scaler

    @property
    def genotype_factory(self) -> Callable[[], Any]:
        return self._genotype_factory

    @property
    def survivors_selector(self) -> Selector:
        return self._survivors_selector

    @property
    def offspring_selector(self) -> Selector:
        return self._offspring_selector

    @property
    def alterer(self) -> Alterer:
        return self._alterer

    @property
    def validator(self) -> Callable[[Individual], bool]:
        return self._validator

    @property
    def optimize(self) -> Optimize:
        return self._optimize

    @property
    def offspring_count(self) -> int:
        return self._offspring_count

    @property
    def survivors_count(self) -> int:
        return self._survivors_count

    @property
    def population_size(self) -> int:
        return self._offspring_count + self._survivors_count

    @property
    def maximal_phenotype_age(self) -> int:
        return self._maximal_phenotype_age

    @property
    def executor(self) -> Executor:
        return self._executor.executor

    @property
    def evaluator(self) -> FitnessEvaluator:
        return self._evaluator

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def individual_creation_retries(self) -> int:
        return self._individual_creation_retries

    @property
    def mapping(self) -> Callable[[EvolutionResult], EvolutionResult]:
        return self._mapping

    def __repr__(self) -> str:
        return (f"EvolutionEngine(population_size={self.population_size}, "
                f"offspring_count={self._offspring_count}, "
                f"survivors_count={self._survivors_count}, "
                f"maximal_phenotype_age={self._maximal_phenotype_age}, "
                f"optimize={self._optimize.value})")
