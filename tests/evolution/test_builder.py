"""
Unit tests for EngineBuilder and file-based configuration
"""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from genevo.config import load_config
from genevo.evolution.components import (
    CompositeAlterer,
    ConcurrentEvaluator,
    EngineBuilder,
    GenotypeBatchEvaluator,
    Individual,
    Optimize,
    create_evolution_engine,
)
from genevo.parallel import SerialExecutor, default_executor


class TestEngineBuilder:
    """Test cases for the fluent builder"""

    def test_defaults(self, fitness_function, genotype_factory, first_selector, noop_alterer):
        """測試預設配置"""
        engine = (EngineBuilder(fitness_function, genotype_factory)
                  .selector(first_selector)
                  .alterers(noop_alterer)
                  .build())

        assert engine.population_size == 50
        assert engine.offspring_count == 30
        assert engine.survivors_count == 20
        assert engine.maximal_phenotype_age == 70
        assert engine.individual_creation_retries == 10
        assert engine.optimize is Optimize.MAXIMUM
        assert engine.executor is default_executor()
        assert isinstance(engine.evaluator, ConcurrentEvaluator)
        assert engine.offspring_selector is first_selector
        assert engine.survivors_selector is first_selector
        assert engine.validator is Individual.is_valid

    def test_offspring_count_rounds_half_up(self, builder):
        """測試子代數量四捨五入"""
        assert builder.offspring_fraction(0.25).offspring_count == 3
        assert builder.offspring_fraction(0.75).offspring_count == 8
        assert builder.survivors_count == 2

    def test_sizes(self, builder):
        """測試以數量設定子代與存活者"""
        builder.population_size(20).offspring_size(5)
        assert builder.offspring_count == 5
        assert builder.survivors_count == 15

        builder.survivors_size(12)
        assert builder.survivors_count == 12
        assert builder.offspring_count == 8

    def test_survivors_fraction(self, builder):
        """測試存活者比例"""
        builder.survivors_fraction(0.3)
        engine = builder.build()

        assert engine.survivors_count == 3
        assert engine.offspring_count == 7

    def test_optimize(self, builder):
        """測試優化方向設定"""
        assert builder.minimizing().build().optimize is Optimize.MINIMUM
        assert builder.maximizing().build().optimize is Optimize.MAXIMUM
        assert builder.optimize('min').build().optimize is Optimize.MINIMUM

        with pytest.raises(ValueError, match="optimize must be 'max' or 'min'"):
            builder.optimize('sideways')

    def test_multiple_alterers_are_composed(self, builder, noop_alterer, increment_alterer):
        """測試多個變異器依序組合"""
        engine = builder.alterers(increment_alterer, noop_alterer).build()

        assert isinstance(engine.alterer, CompositeAlterer)
        assert engine.alterer.alterers == (increment_alterer, noop_alterer)

    def test_genotype_validator(self, builder):
        """測試基因型驗證函數"""
        engine = builder.genotype_validator(lambda genotype: genotype % 2 == 0).build()

        assert engine.validator(Individual.of(4, 0, int))
        assert not engine.validator(Individual.of(5, 0, int))

    def test_batch_evaluator(self, builder):
        """測試批次評估器設定"""
        engine = builder.batch_evaluator(lambda genotypes, fitness: [fitness(g) for g in genotypes]).build()

        assert isinstance(engine.evaluator, GenotypeBatchEvaluator)

    @pytest.mark.parametrize("setter, value, error", [
        ('population_size', 0, ValueError),
        ('offspring_fraction', 1.5, ValueError),
        ('offspring_fraction', -0.1, ValueError),
        ('survivors_fraction', 2.0, ValueError),
        ('offspring_size', -1, ValueError),
        ('survivors_size', -1, ValueError),
        ('maximal_phenotype_age', -1, ValueError),
        ('individual_creation_retries', -1, ValueError),
        ('executor', object(), TypeError),
        ('clock', 42, TypeError),
        ('fitness_scaler', None, TypeError),
        ('mapping', 'identity', TypeError),
        ('evaluator', object(), TypeError),
        ('selector', object(), TypeError),
    ])
    def test_invalid_settings(self, builder, setter, value, error):
        """測試無效設定立即拋出例外"""
        with pytest.raises(error):
            getattr(builder, setter)(value)

    def test_required_callables(self, genotype_factory):
        """測試建構子參數必須可呼叫"""
        with pytest.raises(TypeError, match="fitness_function must be callable"):
            EngineBuilder(None, genotype_factory)
        with pytest.raises(TypeError, match="genotype_factory must be callable"):
            EngineBuilder(int, 'not a factory')

    def test_missing_selector(self, fitness_function, genotype_factory, noop_alterer):
        """測試缺少選擇器"""
        builder = EngineBuilder(fitness_function, genotype_factory).alterers(noop_alterer)

        with pytest.raises(ValueError, match="缺少必要的選擇器"):
            builder.build()

    def test_missing_alterer(self, fitness_function, genotype_factory, first_selector):
        """測試缺少變異器"""
        builder = EngineBuilder(fitness_function, genotype_factory).selector(first_selector)

        with pytest.raises(ValueError, match="缺少必要的變異器"):
            builder.build()

    def test_copy_is_independent(self, builder):
        """測試複製的建構器互不影響"""
        other = builder.copy().population_size(30)

        assert builder.build().population_size == 10
        assert other.build().population_size == 30

    def test_engine_round_trip(self, builder):
        """測試從引擎還原建構器"""
        engine = builder.maximal_phenotype_age(5).minimizing().build()

        rebuilt = engine.builder().build()

        assert rebuilt.population_size == engine.population_size
        assert rebuilt.offspring_count == engine.offspring_count
        assert rebuilt.survivors_count == engine.survivors_count
        assert rebuilt.maximal_phenotype_age == 5
        assert rebuilt.optimize is Optimize.MINIMUM
        assert rebuilt.offspring_selector is engine.offspring_selector
        assert rebuilt.survivors_selector is engine.survivors_selector
        assert rebuilt.executor is engine.executor
        assert rebuilt.evaluator is engine.evaluator


class TestConfiguration:
    """Test cases for JSON configuration"""

    def test_from_config(self, fitness_function, genotype_factory):
        """測試從配置創建建構器"""
        config = {
            'evolution': {
                'population_size': 20,
                'offspring_fraction': 0.5,
                'maximal_phenotype_age': 7,
                'optimize': 'min',
                'individual_creation_retries': 3,
                'evaluator': 'serial'
            }
        }

        builder = EngineBuilder.from_config(config, fitness_function, genotype_factory)

        assert builder.offspring_count == 10
        assert builder.survivors_count == 10
        assert isinstance(builder._executor, SerialExecutor)
        assert builder._maximal_phenotype_age == 7
        assert builder._optimize is Optimize.MINIMUM
        assert builder._individual_creation_retries == 3

    def test_max_workers(self, fitness_function, genotype_factory):
        """測試配置執行緒池大小"""
        builder = EngineBuilder.from_config(
            {'evolution': {'max_workers': 2}}, fitness_function, genotype_factory
        )
        try:
            assert isinstance(builder._executor, ThreadPoolExecutor)
            assert builder._executor._max_workers == 2
        finally:
            builder._executor.shutdown()

    def test_unknown_key(self, fitness_function, genotype_factory):
        """測試未知的配置鍵"""
        with pytest.raises(ValueError, match="未知的鍵"):
            EngineBuilder.from_config({'evolution': {'generations': 10}}, fitness_function, genotype_factory)

    def test_invalid_evaluator(self, fitness_function, genotype_factory):
        """測試無效的評估器類型"""
        with pytest.raises(ValueError, match="evaluator must be 'concurrent' or 'serial'"):
            EngineBuilder.from_config({'evolution': {'evaluator': 'gpu'}}, fitness_function, genotype_factory)

    def test_max_workers_with_serial_evaluator(self, fitness_function, genotype_factory):
        """測試序列評估器不接受 max_workers"""
        with pytest.raises(ValueError, match="max_workers cannot be combined"):
            EngineBuilder.from_config(
                {'evolution': {'evaluator': 'serial', 'max_workers': 2}},
                fitness_function, genotype_factory
            )

    def test_missing_evolution_section(self, fitness_function, genotype_factory):
        """測試缺少 evolution 區段"""
        with pytest.raises(ValueError, match="evolution"):
            EngineBuilder.from_config({}, fitness_function, genotype_factory)

    def test_load_config(self, tmp_path):
        """測試載入配置文件"""
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({
            'experiment': {'name': 'onemax'},
            'evolution': {'population_size': 12}
        }), encoding='utf-8')

        config = load_config(path)

        assert config['evolution']['population_size'] == 12

    def test_load_missing_config(self, tmp_path):
        """測試配置文件不存在"""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.json')

    def test_load_config_without_evolution(self, tmp_path):
        """測試配置文件缺少 evolution 區段"""
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'experiment': {'name': 'empty'}}), encoding='utf-8')

        with pytest.raises(ValueError, match="evolution"):
            load_config(path)

    def test_create_evolution_engine(self, fitness_function, genotype_factory, first_selector,
                                     last_selector, noop_alterer, increment_alterer):
        """測試工廠函數創建引擎"""
        config = {'evolution': {'population_size': 8, 'offspring_fraction': 0.5, 'evaluator': 'serial'}}

        engine = create_evolution_engine(
            config, fitness_function, genotype_factory,
            selector=first_selector,
            alterer=increment_alterer,
            offspring_selector=last_selector,
            extra_alterers=[noop_alterer]
        )

        assert engine.population_size == 8
        assert engine.survivors_selector is first_selector
        assert engine.offspring_selector is last_selector
        assert isinstance(engine.alterer, CompositeAlterer)
        assert isinstance(engine.executor, SerialExecutor)
