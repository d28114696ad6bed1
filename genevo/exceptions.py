"""
Exception hierarchy for genevo.

Configuration problems are reported with the built-in ``ValueError`` and
``TypeError`` at build time. The classes below are reserved for fatal
conditions detected while a generation step is running.
"""


class EvolutionError(Exception):
    """Base for all genevo exceptions."""

    pass


class InvariantViolationError(EvolutionError, RuntimeError):
    """A collaborator broke a contract the engine relies on."""

    pass


class PopulationSizeError(InvariantViolationError):
    """A stage returned a population of the wrong size."""

    def __init__(self, expected: int, actual: int, stage: str = "evaluator"):
        self.expected = expected
        self.actual = actual
        self.stage = stage
        super().__init__(
            f"Expected {expected} individuals, but got {actual}. "
            f"Check your {stage} function."
        )


class EvaluationMismatchError(InvariantViolationError):
    """A batch evaluator returned a different number of fitness values."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} results, but got {actual}. "
            f"Check your evaluator function."
        )
