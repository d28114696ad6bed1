"""
Shared test doubles for the evolution engine tests.

All collaborators here are deterministic so that the outcome of a
generation step can be asserted exactly.
"""

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from genevo.evolution.components import EngineBuilder, Individual
from genevo.evolution.components.strategies import Alterer, AltererResult, Selector
from genevo.parallel import SerialExecutor


def value_fitness(genotype):
    """Fitness of an integer genotype is the integer itself."""
    return int(genotype)


class CountingGenotypeFactory:
    """Produces 1000, 1001, 1002, ... in call order."""

    def __init__(self, start: int = 1000):
        self._next = start
        self._lock = threading.Lock()
        self.calls = 0

    def __call__(self):
        with self._lock:
            value = self._next
            self._next += 1
            self.calls += 1
            return value


class FirstSelector(Selector):
    name = "first"

    def select(self, population, count, optimize):
        return tuple(population[:count])


class LastSelector(Selector):
    name = "last"

    def select(self, population, count, optimize):
        return tuple(population[len(population) - count:])


class TruncationSelector(Selector):
    """Best `count` individuals, repeating the ranking when needed."""

    name = "truncation"

    def select(self, population, count, optimize):
        ranked = optimize.sort(population)
        return tuple(ranked[i % len(ranked)] for i in range(count))


class NoOpAlterer(Alterer):
    name = "noop"

    def alter(self, population, generation):
        return AltererResult(tuple(population), 0)


class IncrementAlterer(Alterer):
    """Replaces every individual by one whose genotype is larger by one."""

    name = "increment"

    def alter(self, population, generation):
        altered = tuple(
            Individual.of(ind.genotype + 1, generation, ind.fitness_function, ind.fitness_scaler)
            for ind in population
        )
        return altered, len(altered)


@pytest.fixture
def fitness_function():
    return value_fitness


@pytest.fixture
def genotype_factory():
    return CountingGenotypeFactory()


@pytest.fixture
def first_selector():
    return FirstSelector()


@pytest.fixture
def last_selector():
    return LastSelector()


@pytest.fixture
def truncation_selector():
    return TruncationSelector()


@pytest.fixture
def noop_alterer():
    return NoOpAlterer()


@pytest.fixture
def increment_alterer():
    return IncrementAlterer()


@pytest.fixture
def serial_executor():
    return SerialExecutor()


@pytest.fixture
def thread_pool():
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix='genevo-test')
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def make_population(fitness_function):
    """Builds individuals for the given genotypes, evaluated by default."""

    def make(genotypes, generation=0, evaluated=True):
        population = []
        for genotype in genotypes:
            individual = Individual.of(genotype, generation, fitness_function)
            population.append(individual.evaluate() if evaluated else individual)
        return tuple(population)

    return make


@pytest.fixture
def builder(fitness_function, genotype_factory, last_selector, first_selector, noop_alterer, serial_executor):
    """Population 10 (offspring 6, survivors 4) on a serial executor."""
    return (EngineBuilder(fitness_function, genotype_factory)
            .offspring_selector(last_selector)
            .survivors_selector(first_selector)
            .alterers(noop_alterer)
            .population_size(10)
            .offspring_fraction(0.6)
            .maximal_phenotype_age(100)
            .executor(serial_executor))
