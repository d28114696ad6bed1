"""
genevo

Concurrent generation-step evolution engine.
"""

from .config import load_config
from .evolution import (
    EngineBuilder,
    EvolutionEngine,
    EvolutionResult,
    EvolutionStream,
    Individual,
    Optimize,
    create_evolution_engine,
)
from .exceptions import EvaluationMismatchError, EvolutionError, InvariantViolationError, PopulationSizeError

__version__ = '0.1.0'

__all__ = [
    'EngineBuilder',
    'EvolutionEngine',
    'EvolutionResult',
    'EvolutionStream',
    'Individual',
    'Optimize',
    'create_evolution_engine',
    'load_config',
    'EvolutionError',
    'InvariantViolationError',
    'PopulationSizeError',
    'EvaluationMismatchError',
]
