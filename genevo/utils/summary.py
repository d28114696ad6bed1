"""
Summary Statistics

Numeric summaries (count, min, max, sum, mean, variance, std) used by the
evolution statistics handler.
"""
from dataclasses import dataclass
from typing import Dict, Iterable
import math

import numpy as np


@dataclass(frozen=True)
class DoubleSummary:
    """
    Summary statistics of a sequence of numbers.

    The variance is the sample variance (ddof=1); it is 0.0 when fewer than
    two values were seen. An empty summary reports NaN for every statistic.
    """
    count: int
    min: float
    max: float
    sum: float
    mean: float
    variance: float

    @property
    def std(self) -> float:
        return math.sqrt(self.variance) if not math.isnan(self.variance) else math.nan

    @classmethod
    def of(cls, values: Iterable[float]) -> 'DoubleSummary':
        data = np.asarray(list(values), dtype=float)
        if data.size == 0:
            return cls(0, math.nan, math.nan, math.nan, math.nan, math.nan)

        variance = float(np.var(data, ddof=1)) if data.size > 1 else 0.0
        return cls(
            count=int(data.size),
            min=float(np.min(data)),
            max=float(np.max(data)),
            sum=float(np.sum(data)),
            mean=float(np.mean(data)),
            variance=variance
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'count': self.count,
            'min': self.min,
            'max': self.max,
            'sum': self.sum,
            'mean': self.mean,
            'variance': self.variance,
            'std': self.std,
        }

    def __str__(self) -> str:
        if self.count == 0:
            return "n/a"
        return f"{self.mean:.4f} ± {self.std:.4f} [{self.min:.4f}, {self.max:.4f}]"
