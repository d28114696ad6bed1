"""
Parallel Execution Module

This module provides the timed task runner used by the evolution engine to
run the stages of a generation step concurrently.
"""

from .executor import Timer, TimedResult, TimedExecutor, SerialExecutor, default_executor

__all__ = [
    'Timer',
    'TimedResult',
    'TimedExecutor',
    'SerialExecutor',
    'default_executor',
]
