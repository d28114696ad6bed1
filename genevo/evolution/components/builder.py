"""
引擎建構器

可變的配置結構，提供流式設定方法；build() 驗證配置並產生不可變的
EvolutionEngine。所有設定方法在參數無效時立即拋出 ValueError/TypeError。
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional
import logging
import math
import time

from .engine import EvolutionEngine
from .evaluators.base import FitnessEvaluator
from .evaluators.concurrent_evaluator import ConcurrentEvaluator, GenotypeBatchEvaluator
from .individual import Individual, identity
from .optimize import Optimize
from .result import EvolutionResult
from .strategies.base import Alterer, CompositeAlterer, Selector
from ...parallel.executor import Clock, SerialExecutor, default_executor

logger = logging.getLogger(__name__)


def _require_callable(value, name: str):
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {type(value)}")
    return value


def _probability(value: float, name: str) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
    return float(value)


class EngineBuilder:
    """
    演化引擎建構器

    Example:
        >>> engine = (EngineBuilder(fitness, genotype_factory)
        ...           .selector(my_selector)
        ...           .alterers(my_crossover, my_mutator)
        ...           .population_size(100)
        ...           .minimizing()
        ...           .build())
    """

    EVOLUTION_KEYS = {
        'population_size', 'offspring_fraction', 'maximal_phenotype_age',
        'optimize', 'individual_creation_retries', 'max_workers', 'evaluator'
    }

    def __init__(self,
                 fitness_function: Callable[[Any], Any],
                 genotype_factory: Callable[[], Any]):
        """
        Args:
            fitness_function: 適應度函數 genotype -> 可比較的值
            genotype_factory: 產生新基因型的無參數函數
        """
        self._fitness_function = _require_callable(fitness_function, 'fitness_function')
        self._genotype_factory = _require_callable(genotype_factory, 'genotype_factory')

        self._fitness_scaler: Callable[[Any], Any] = identity
        self._survivors_selector: Optional[Selector] = None
        self._offspring_selector: Optional[Selector] = None
        self._alterer: Optional[Alterer] = None
        self._validator: Callable[[Individual], bool] = Individual.is_valid
        self._optimize = Optimize.MAXIMUM
        self._offspring_fraction = 0.6
        self._population_size = 50
        self._maximal_phenotype_age = 70

        self._executor: Optional[Executor] = None
        self._clock: Clock = time.perf_counter
        self._evaluator: Optional[FitnessEvaluator] = None

        self._individual_creation_retries = 10
        self._mapping: Callable[[EvolutionResult], EvolutionResult] = identity

    # ------------------------------------------------------------------
    # 問題定義
    # ------------------------------------------------------------------

    def fitness_function(self, function: Callable[[Any], Any]) -> 'EngineBuilder':
        self._fitness_function = _require_callable(function, 'fitness_function')
        return self

    def genotype_factory(self, factory: Callable[[], Any]) -> 'EngineBuilder':
        self._genotype_factory = _require_callable(factory, 'genotype_factory')
        return self

    def fitness_scaler(self, scaler: Callable[[Any], Any]) -> 'EngineBuilder':
        self._fitness_scaler = _require_callable(scaler, 'fitness_scaler')
        return self

    # ------------------------------------------------------------------
    # 演化參數
    # ------------------------------------------------------------------

    def offspring_selector(self, selector: Selector) -> 'EngineBuilder':
        self._offspring_selector = self._check_selector(selector)
        return self

    def survivors_selector(self, selector: Selector) -> 'EngineBuilder':
        self._survivors_selector = self._check_selector(selector)
        return self

    def selector(self, selector: Selector) -> 'EngineBuilder':
        """同時設定子代與存活者選擇器"""
        self._offspring_selector = self._check_selector(selector)
        self._survivors_selector = selector
        return self

    def alterers(self, first: Alterer, *rest: Alterer) -> 'EngineBuilder':
        """設定變異器；多個變異器依序組合"""
        self._alterer = first if not rest else CompositeAlterer(first, *rest)
        if not hasattr(self._alterer, 'alter'):
            raise TypeError(f"alterer must provide alter(): {type(first)}")
        return self

    def phenotype_validator(self, validator: Callable[[Individual], bool]) -> 'EngineBuilder':
        self._validator = _require_callable(validator, 'phenotype_validator')
        return self

    def genotype_validator(self, validator: Callable[[Any], bool]) -> 'EngineBuilder':
        _require_callable(validator, 'genotype_validator')
        self._validator = lambda individual: validator(individual.genotype)
        return self

    def optimize(self, optimize) -> 'EngineBuilder':
        self._optimize = Optimize.of(optimize)
        return self

    def maximizing(self) -> 'EngineBuilder':
        return self.optimize(Optimize.MAXIMUM)

    def minimizing(self) -> 'EngineBuilder':
        return self.optimize(Optimize.MINIMUM)

    def offspring_fraction(self, fraction: float) -> 'EngineBuilder':
        self._offspring_fraction = _probability(fraction, 'offspring_fraction')
        return self

    def survivors_fraction(self, fraction: float) -> 'EngineBuilder':
        self._offspring_fraction = 1.0 - _probability(fraction, 'survivors_fraction')
        return self

    def offspring_size(self, size: int) -> 'EngineBuilder':
        if size < 0:
            raise ValueError(f"Offspring size must be greater or equal zero, but was {size}.")
        return self.offspring_fraction(size / self._population_size)

    def survivors_size(self, size: int) -> 'EngineBuilder':
        if size < 0:
            raise ValueError(f"Survivors must be greater or equal zero, but was {size}.")
        return self.survivors_fraction(size / self._population_size)

    def population_size(self, size: int) -> 'EngineBuilder':
        if size < 1:
            raise ValueError(f"Population size must be greater than zero, but was {size}.")
        self._population_size = int(size)
        return self

    def maximal_phenotype_age(self, age: int) -> 'EngineBuilder':
        if age < 0:
            raise ValueError(f"Phenotype age must not be negative, but was {age}.")
        self._maximal_phenotype_age = int(age)
        return self

    # ------------------------------------------------------------------
    # 執行環境
    # ------------------------------------------------------------------

    def executor(self, executor: Executor) -> 'EngineBuilder':
        if not isinstance(executor, Executor):
            raise TypeError(f"executor must be a concurrent.futures.Executor, got {type(executor)}")
        self._executor = executor
        return self

    def clock(self, clock: Clock) -> 'EngineBuilder':
        self._clock = _require_callable(clock, 'clock')
        return self

    def evaluator(self, evaluator: FitnessEvaluator) -> 'EngineBuilder':
        if not hasattr(evaluator, 'evaluate'):
            raise TypeError(f"evaluator must provide evaluate(): {type(evaluator)}")
        self._evaluator = evaluator
        return self

    def batch_evaluator(self, function: Callable) -> 'EngineBuilder':
        """以批次評估函數 function(genotypes, fitness_function) 作為評估器"""
        return self.evaluator(GenotypeBatchEvaluator(function))

    def individual_creation_retries(self, retries: int) -> 'EngineBuilder':
        if retries < 0:
            raise ValueError(f"Retry count must not be negative: {retries}")
        self._individual_creation_retries = int(retries)
        return self

    def mapping(self, mapper: Callable[[EvolutionResult], EvolutionResult]) -> 'EngineBuilder':
        self._mapping = _require_callable(mapper, 'mapping')
        return self

    # ------------------------------------------------------------------
    # 建構
    # ------------------------------------------------------------------

    @property
    def offspring_count(self) -> int:
        # round half up
        return int(math.floor(self._offspring_fraction * self._population_size + 0.5))

    @property
    def survivors_count(self) -> int:
        return self._population_size - self.offspring_count

    def build(self) -> EvolutionEngine:
        """
        驗證配置並創建引擎

        Raises:
            ValueError: 缺少選擇器或變異器
        """
        if self._offspring_selector is None or self._survivors_selector is None:
            raise ValueError("缺少必要的選擇器: 請設定 selector() 或 offspring_selector()/survivors_selector()")
        if self._alterer is None:
            raise ValueError("缺少必要的變異器: 請設定 alterers()")

        executor = self._executor if self._executor is not None else default_executor()
        evaluator = self._evaluator if self._evaluator is not None else ConcurrentEvaluator(executor)

        return EvolutionEngine(
            fitness_function=self._fitness_function,
            genotype_factory=self._genotype_factory,
            fitness_scaler=self._fitness_scaler,
            survivors_selector=self._survivors_selector,
            offspring_selector=self._offspring_selector,
            alterer=self._alterer,
            validator=self._validator,
            optimize=self._optimize,
            offspring_count=self.offspring_count,
            survivors_count=self.survivors_count,
            maximal_phenotype_age=self._maximal_phenotype_age,
            executor=executor,
            evaluator=evaluator,
            clock=self._clock,
            individual_creation_retries=self._individual_creation_retries,
            mapping=self._mapping
        )

    def copy(self) -> 'EngineBuilder':
        other = EngineBuilder(self._fitness_function, self._genotype_factory)
        other.__dict__.update(self.__dict__)
        return other

    @classmethod
    def from_engine(cls, engine: EvolutionEngine) -> 'EngineBuilder':
        """從既有引擎還原建構器"""
        builder = (cls(engine.fitness_function, engine.genotype_factory)
                   .fitness_scaler(engine.fitness_scaler)
                   .offspring_selector(engine.offspring_selector)
                   .survivors_selector(engine.survivors_selector)
                   .alterers(engine.alterer)
                   .phenotype_validator(engine.validator)
                   .optimize(engine.optimize)
                   .population_size(engine.population_size)
                   .offspring_fraction(engine.offspring_count / engine.population_size)
                   .maximal_phenotype_age(engine.maximal_phenotype_age)
                   .executor(engine.executor)
                   .evaluator(engine.evaluator)
                   .clock(engine.clock)
                   .individual_creation_retries(engine.individual_creation_retries)
                   .mapping(engine.mapping))
        return builder

    def apply_config(self, evolution: Dict[str, Any]) -> 'EngineBuilder':
        """
        套用配置文件中的 evolution 區段

        Args:
            evolution: 例如 {'population_size': 100, 'offspring_fraction': 0.6,
                       'optimize': 'min', 'max_workers': 4, 'evaluator': 'concurrent'}

        max_workers 會建立新的 ThreadPoolExecutor，由呼叫者擁有；
        不再使用時請呼叫 engine.executor.shutdown()。

        Raises:
            ValueError: 包含未知的鍵或無效的值
        """
        unknown = set(evolution) - self.EVOLUTION_KEYS
        if unknown:
            raise ValueError(f"evolution 區段包含未知的鍵: {sorted(unknown)}")

        if 'population_size' in evolution:
            self.population_size(evolution['population_size'])
        if 'offspring_fraction' in evolution:
            self.offspring_fraction(evolution['offspring_fraction'])
        if 'maximal_phenotype_age' in evolution:
            self.maximal_phenotype_age(evolution['maximal_phenotype_age'])
        if 'optimize' in evolution:
            self.optimize(evolution['optimize'])
        if 'individual_creation_retries' in evolution:
            self.individual_creation_retries(evolution['individual_creation_retries'])

        evaluator = evolution.get('evaluator', 'concurrent')
        if evaluator not in ('concurrent', 'serial'):
            raise ValueError(f"evaluator must be 'concurrent' or 'serial', got {evaluator!r}")

        if evaluator == 'serial':
            if 'max_workers' in evolution:
                raise ValueError("max_workers cannot be combined with the serial evaluator")
            self.executor(SerialExecutor())
        elif 'max_workers' in evolution:
            max_workers = evolution['max_workers']
            if max_workers < 1:
                raise ValueError(f"max_workers must be >= 1, got {max_workers}")
            self.executor(ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='genevo'))
        return self

    @classmethod
    def from_config(cls,
                    config: Dict[str, Any],
                    fitness_function: Callable[[Any], Any],
                    genotype_factory: Callable[[], Any]) -> 'EngineBuilder':
        """根據配置字典創建建構器（需要 evolution 區段）"""
        if 'evolution' not in config:
            raise ValueError("配置文件缺少必要部分: evolution")
        return cls(fitness_function, genotype_factory).apply_config(config['evolution'])

    @staticmethod
    def _check_selector(selector: Selector) -> Selector:
        if selector is None or not hasattr(selector, 'select'):
            raise TypeError(f"selector must provide select(): {type(selector)}")
        return selector

    def __repr__(self) -> str:
        return (f"EngineBuilder(population_size={self._population_size}, "
                f"offspring_fraction={self._offspring_fraction}, "
                f"maximal_phenotype_age={self._maximal_phenotype_age}, "
                f"optimize={self._optimize.value})")
