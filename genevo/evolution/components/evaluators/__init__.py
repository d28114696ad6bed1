"""
適應度評估器模組
"""

from .base import FitnessEvaluator
from .concurrent_evaluator import ConcurrentEvaluator, GenotypeBatchEvaluator

__all__ = [
    'FitnessEvaluator',
    'ConcurrentEvaluator',
    'GenotypeBatchEvaluator',
]
