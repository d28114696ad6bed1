"""
演化策略模組

包含引擎所使用的協作者介面：
- 選擇器
- 變異器
"""

from .base import EvolutionStrategy, Selector, Alterer, AltererResult, CompositeAlterer, as_alterer_result

__all__ = [
    'EvolutionStrategy',
    'Selector',
    'Alterer', 'AltererResult', 'CompositeAlterer', 'as_alterer_result',
]
