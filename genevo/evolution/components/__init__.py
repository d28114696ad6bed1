"""
組件化演化計算框架

把單一世代的演化步驟拆成可插拔的組件（選擇、變異、評估、過濾），
由 EvolutionEngine 並行協調，並以 EvolutionStream 串成多個世代。
"""

from typing import Any, Callable, Dict, Iterable, Optional
import logging

from .builder import EngineBuilder
from .engine import EvolutionEngine
from .evaluators import ConcurrentEvaluator, FitnessEvaluator, GenotypeBatchEvaluator
from .factory import IndividualFactory
from .filter import PopulationFilter
from .handlers import EventHandler, EvolutionStatistics, LoggingHandler
from .individual import Individual
from .optimize import Optimize
from .result import EvolutionDurations, EvolutionResult, EvolutionStart, FilterResult
from .strategies import Alterer, AltererResult, CompositeAlterer, Selector
from .stream import EvolutionStream, to_best_genotype, to_best_individual, to_best_result

logger = logging.getLogger(__name__)


def create_evolution_engine(config: Dict[str, Any],
                            fitness_function: Callable[[Any], Any],
                            genotype_factory: Callable[[], Any],
                            selector: Selector,
                            alterer: Alterer,
                            offspring_selector: Optional[Selector] = None,
                            extra_alterers: Iterable[Alterer] = (),
                            evaluator: Optional[FitnessEvaluator] = None) -> EvolutionEngine:
    """
    工廠函數：根據配置創建演化引擎

    Args:
        config: 配置字典（需要 evolution 區段）
        fitness_function: 適應度函數
        genotype_factory: 基因型工廠
        selector: 存活者選擇器（未指定 offspring_selector 時也用於子代）
        alterer: 變異器
        offspring_selector: 子代選擇器（可選）
        extra_alterers: 接在 alterer 之後依序套用的變異器
        evaluator: 自訂評估器（可選）

    Returns:
        配置好的演化引擎

    Raises:
        ValueError: 如果配置參數無效
    """
    builder = (EngineBuilder.from_config(config, fitness_function, genotype_factory)
               .selector(selector)
               .alterers(alterer, *extra_alterers))
    if offspring_selector is not None:
        builder.offspring_selector(offspring_selector)
    if evaluator is not None:
        builder.evaluator(evaluator)

    engine = builder.build()
    logger.info(f"✅ 演化引擎創建完成: {engine}")
    return engine


__all__ = [
    'EngineBuilder',
    'EvolutionEngine',
    'EvolutionStream',
    'Individual',
    'IndividualFactory',
    'PopulationFilter',
    'Optimize',
    'EvolutionStart',
    'EvolutionResult',
    'EvolutionDurations',
    'FilterResult',
    'Selector',
    'Alterer',
    'AltererResult',
    'CompositeAlterer',
    'FitnessEvaluator',
    'ConcurrentEvaluator',
    'GenotypeBatchEvaluator',
    'EventHandler',
    'LoggingHandler',
    'EvolutionStatistics',
    'to_best_result',
    'to_best_individual',
    'to_best_genotype',
    'create_evolution_engine'
]
