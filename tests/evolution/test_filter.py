"""
Unit tests for PopulationFilter and IndividualFactory
"""

import pytest

from genevo.evolution.components import Individual, IndividualFactory, PopulationFilter


class Flag:
    """Genotype carrying its own validity."""

    def __init__(self, value, valid=True):
        self.value = value
        self.valid = valid

    def is_valid(self):
        return self.valid


class TestIndividualFactory:
    """Test cases for creating individuals with bounded retries"""

    def test_creates_unevaluated_individual(self, genotype_factory, fitness_function):
        """測試產生未評估的新個體"""
        factory = IndividualFactory(genotype_factory, fitness_function)

        ind = factory.new_individual(4)

        assert ind.genotype == 1000
        assert ind.generation == 4
        assert not ind.is_evaluated
        assert factory(4).genotype == 1001

    def test_retries_until_valid(self, genotype_factory, fitness_function):
        """測試重試直到產生有效個體"""
        factory = IndividualFactory(
            genotype_factory, fitness_function,
            validator=lambda ind: ind.genotype >= 1003,
            retries=10
        )

        ind = factory.new_individual(1)

        assert ind.genotype == 1003
        assert genotype_factory.calls == 4

    def test_exhausted_retries_return_last_attempt(self, genotype_factory, fitness_function):
        """測試重試次數用完時回傳最後一次產生的個體"""
        factory = IndividualFactory(
            genotype_factory, fitness_function,
            validator=lambda ind: False,
            retries=3
        )

        ind = factory.new_individual(1)

        assert ind.genotype == 1002
        assert genotype_factory.calls == 3

    def test_zero_retries_create_once(self, genotype_factory, fitness_function):
        """測試重試次數為 0 時仍產生一次"""
        factory = IndividualFactory(
            genotype_factory, fitness_function,
            validator=lambda ind: False,
            retries=0
        )

        ind = factory.new_individual(1)

        assert ind.genotype == 1000
        assert genotype_factory.calls == 1

    def test_negative_retries(self, genotype_factory, fitness_function):
        """測試無效的重試次數"""
        with pytest.raises(ValueError, match="Retry count must not be negative"):
            IndividualFactory(genotype_factory, fitness_function, retries=-1)


class TestPopulationFilter:
    """Test cases for replacing invalid and old individuals"""

    @pytest.fixture
    def factory(self, genotype_factory, fitness_function):
        return IndividualFactory(genotype_factory, fitness_function)

    def test_keeps_valid_young_individuals(self, factory, make_population):
        """測試有效且年輕的個體保持不變"""
        population = make_population(range(5), generation=3)
        result = PopulationFilter(Individual.is_valid, 2, factory).filter(population, 4)

        assert result.population == population
        assert result.kill_count == 0
        assert result.invalid_count == 0

    def test_replaces_old_individuals(self, factory, make_population):
        """測試超齡個體被替換"""
        population = make_population(range(3), generation=0) + make_population(range(3, 5), generation=3)
        result = PopulationFilter(Individual.is_valid, 2, factory).filter(population, 4)

        assert result.kill_count == 3
        assert result.invalid_count == 0
        assert [ind.genotype for ind in result.population] == [1000, 1001, 1002, 3, 4]
        assert all(ind.generation == 4 for ind in result.population[:3])
        assert result.population[3:] == population[3:]

    def test_age_equal_to_maximum_is_kept(self, factory, make_population):
        """測試年齡等於上限時保留"""
        population = make_population(range(3), generation=2)
        result = PopulationFilter(Individual.is_valid, 2, factory).filter(population, 4)

        assert result.kill_count == 0

    def test_invalid_takes_precedence_over_age(self, factory, fitness_function):
        """測試同時無效且超齡時只計入無效"""
        population = (
            Individual.of(Flag(1, valid=False), 0, fitness_function),
            Individual.of(Flag(2, valid=True), 0, fitness_function),
            Individual.of(Flag(3, valid=False), 9, fitness_function),
        )
        result = PopulationFilter(Individual.is_valid, 3, factory).filter(population, 10)

        assert result.invalid_count == 2
        assert result.kill_count == 1
        assert len(result.population) == 3

    def test_replacements_are_distinct(self, factory, make_population):
        """測試每個替換個體都是獨立的實例"""
        population = make_population(range(4), generation=0)
        result = PopulationFilter(Individual.is_valid, 0, factory).filter(population, 1)

        assert len({id(ind) for ind in result.population}) == 4
        assert len({ind.genotype for ind in result.population}) == 4

    def test_input_is_not_modified(self, factory, make_population):
        """測試輸入族群不被修改"""
        population = list(make_population(range(3), generation=0))
        snapshot = list(population)

        PopulationFilter(Individual.is_valid, 0, factory).filter(population, 5)

        assert population == snapshot

    def test_negative_age(self, factory):
        """測試無效的最大年齡"""
        with pytest.raises(ValueError, match="Phenotype age must not be negative"):
            PopulationFilter(Individual.is_valid, -1, factory)
