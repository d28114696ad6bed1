"""
Utility Functions
"""
from .summary import DoubleSummary

__all__ = [
    'DoubleSummary'
]
