"""
Sample script to demonstrate a full evolutionary run on the OneMax problem.

This script performs the following actions:
1. Loads the engine parameters from configs/onemax_config.json.
2. Wraps DEAP's tournament selection, two-point crossover and bit-flip
   mutation as engine collaborators.
3. Streams generations until the fitness is steady or the optimum is found.
4. Prints the best genotype and the collected evolution statistics.
"""
import logging
import os
import random
import sys

# Add project root to Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, project_root)

from deap import tools

from genevo import create_evolution_engine, load_config
from genevo.evolution.components import (
    Alterer,
    AltererResult,
    EvolutionStatistics,
    Individual,
    LoggingHandler,
    Selector,
    to_best_result,
)
from genevo.evolution.limits import by_fitness_threshold, by_fixed_generation, by_steady_fitness

LENGTH = 64


class BitString(list):
    """Mutable list of bits, copied before every alteration."""

    def is_valid(self):
        return len(self) == LENGTH


def random_bits():
    return BitString(random.randint(0, 1) for _ in range(LENGTH))


def count_ones(genotype):
    return sum(genotype)


class TournamentSelector(Selector):
    name = "tournament"

    def __init__(self, tournsize=3):
        self.tournsize = tournsize

    def select(self, population, count, optimize):
        return tuple(tools.selTournament(list(population), count, self.tournsize))


class CrossoverAlterer(Alterer):
    name = "two_point"

    def __init__(self, probability=0.6):
        self.probability = probability

    def alter(self, population, generation):
        altered = list(population)
        count = 0
        for i in range(1, len(altered), 2):
            if random.random() < self.probability:
                a, b = BitString(altered[i - 1].genotype), BitString(altered[i].genotype)
                tools.cxTwoPoint(a, b)
                altered[i - 1] = Individual.of(a, generation, count_ones)
                altered[i] = Individual.of(b, generation, count_ones)
                count += 2
        return AltererResult(tuple(altered), count)


class BitFlipAlterer(Alterer):
    name = "bit_flip"

    def __init__(self, probability=0.2, indpb=0.05):
        self.probability = probability
        self.indpb = indpb

    def alter(self, population, generation):
        altered = list(population)
        count = 0
        for i, ind in enumerate(altered):
            if random.random() < self.probability:
                bits, = tools.mutFlipBit(BitString(ind.genotype), self.indpb)
                altered[i] = Individual.of(bits, generation, count_ones)
                count += 1
        return AltererResult(tuple(altered), count)


def main():
    """Main function to run the sample evolution."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    random.seed(42)

    config = load_config(os.path.join(project_root, 'configs', 'onemax_config.json'))
    engine = create_evolution_engine(
        config,
        fitness_function=count_ones,
        genotype_factory=random_bits,
        selector=TournamentSelector(tournsize=3),
        alterer=CrossoverAlterer(probability=0.6),
        extra_alterers=[BitFlipAlterer(probability=0.2)]
    )

    statistics = EvolutionStatistics()
    stream = (engine.stream()
              .limit(by_fixed_generation(200))
              .limit(by_steady_fitness(25))
              .limit(by_fitness_threshold(LENGTH))
              .add_handler(LoggingHandler(log_interval=10))
              .add_handler(statistics))

    best = to_best_result(stream)

    print("\n--- Evolution Finished ---")
    print(f"Best generation: {best.generation}")
    print(f"Best fitness: {best.best_fitness} / {LENGTH}")
    print(f"Best genotype: {''.join(str(bit) for bit in best.best_individual.genotype)}")
    print(statistics)
    print(statistics.logbook)

    engine.executor.shutdown()


if __name__ == "__main__":
    main()
