"""
Evolution Module

Generation-step evolution engine, evolution stream and termination limits.
"""

from .components import (
    EngineBuilder,
    EvolutionEngine,
    EvolutionResult,
    EvolutionStart,
    EvolutionStream,
    Individual,
    Optimize,
    create_evolution_engine,
)
from .limits import by_execution_time, by_fitness_threshold, by_fixed_generation, by_steady_fitness

__all__ = [
    'EngineBuilder',
    'EvolutionEngine',
    'EvolutionResult',
    'EvolutionStart',
    'EvolutionStream',
    'Individual',
    'Optimize',
    'create_evolution_engine',
    'by_fixed_generation',
    'by_steady_fitness',
    'by_fitness_threshold',
    'by_execution_time',
]
