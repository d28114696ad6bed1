"""
演化統計處理器

累積每個世代的耗時、替換數量、個體年齡與適應度的統計摘要，
並以 DEAP Logbook 記錄每個世代的一列資料。
"""

from numbers import Real
from typing import Dict, List

from deap import tools
import numpy as np

from .base import EventHandler
from ....utils.summary import DoubleSummary

DURATION_FIELDS = (
    'offspring_selection', 'survivor_selection', 'offspring_alter',
    'offspring_filter', 'survivor_filter', 'evaluation', 'evolve'
)


def _is_numeric(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class EvolutionStatistics(EventHandler):
    """
    演化統計

    Example:
        >>> statistics = EvolutionStatistics()
        >>> best = to_best_individual(
        ...     engine.stream().limit(by_fixed_generation(50)).add_handler(statistics)
        ... )
        >>> print(statistics)
    """

    name = "statistics_handler"

    def __init__(self):
        self.stats = tools.Statistics(lambda ind: ind.fitness)
        self.stats.register("avg", np.mean)
        self.stats.register("std", np.std)
        self.stats.register("min", np.min)
        self.stats.register("max", np.max)
        self.reset()

    def reset(self):
        """清除所有累積的統計"""
        self.durations: Dict[str, List[float]] = {name: [] for name in DURATION_FIELDS}
        self.altered: List[int] = []
        self.killed: List[int] = []
        self.invalids: List[int] = []
        self.ages: List[int] = []
        self.fitness: List[float] = []

        self.logbook = tools.Logbook()
        self.logbook.header = ['gen', 'killed', 'invalid', 'altered'] + self.stats.fields

    def on_evolution_start(self, **kwargs):
        self.reset()

    def on_generation_complete(self, result=None, **kwargs):
        if result is None:
            return

        for name in DURATION_FIELDS:
            self.durations[name].append(getattr(result.durations, name))
        self.altered.append(result.alter_count)
        self.killed.append(result.kill_count)
        self.invalids.append(result.invalid_count)
        self.ages.extend(ind.age(result.generation) for ind in result.population)

        evaluated = [ind for ind in result.population if ind.is_evaluated and _is_numeric(ind.fitness)]
        self.fitness.extend(float(ind.fitness) for ind in evaluated)

        record = self.stats.compile(evaluated) if evaluated else {}
        self.logbook.record(
            gen=result.generation,
            killed=result.kill_count,
            invalid=result.invalid_count,
            altered=result.alter_count,
            **record
        )

    # ------------------------------------------------------------------
    # 摘要
    # ------------------------------------------------------------------

    def duration_summary(self, name: str) -> DoubleSummary:
        return DoubleSummary.of(self.durations[name])

    @property
    def altered_summary(self) -> DoubleSummary:
        return DoubleSummary.of(self.altered)

    @property
    def killed_summary(self) -> DoubleSummary:
        return DoubleSummary.of(self.killed)

    @property
    def invalids_summary(self) -> DoubleSummary:
        return DoubleSummary.of(self.invalids)

    @property
    def age_summary(self) -> DoubleSummary:
        return DoubleSummary.of(self.ages)

    @property
    def fitness_summary(self) -> DoubleSummary:
        return DoubleSummary.of(self.fitness)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        summary = {f'duration.{name}': self.duration_summary(name).to_dict() for name in DURATION_FIELDS}
        summary['altered'] = self.altered_summary.to_dict()
        summary['killed'] = self.killed_summary.to_dict()
        summary['invalids'] = self.invalids_summary.to_dict()
        summary['age'] = self.age_summary.to_dict()
        summary['fitness'] = self.fitness_summary.to_dict()
        return summary

    def __str__(self) -> str:
        rows = [('Time statistics', None)]
        rows += [(f'  {name}', self.duration_summary(name)) for name in DURATION_FIELDS]
        rows += [
            ('Evolution statistics', None),
            ('  Generations', len(self.altered)),
            ('  Altered', self.altered_summary),
            ('  Killed', self.killed_summary),
            ('  Invalids', self.invalids_summary),
            ('Population statistics', None),
            ('  Age', self.age_summary),
            ('  Fitness', self.fitness_summary),
        ]

        width = max(len(label) for label, _ in rows) + 2
        lines = ['=' * 72]
        for label, value in rows:
            lines.append(label if value is None else f"{label:<{width}}{value}")
        lines.append('=' * 72)
        return '\n'.join(lines)
