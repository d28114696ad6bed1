"""
事件處理器模組
"""

from .base import EventHandler
from .logging_handler import LoggingHandler
from .statistics import EvolutionStatistics

__all__ = [
    'EventHandler',
    'LoggingHandler',
    'EvolutionStatistics'
]
