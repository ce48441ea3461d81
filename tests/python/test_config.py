import pytest

from speed_comparison.config import (
    ALL_STRATEGIES,
    POSTGRES_URL,
    SQLITE_URL,
    BenchmarkConfig,
    IdMode,
    SchemaPolicy,
    Strategy,
)
from speed_comparison.errors import ConfigurationError


def test_defaults():
    config = BenchmarkConfig()
    assert config.url == SQLITE_URL
    assert config.num_rows == 100_000
    assert config.id_mode is IdMode.EXPLICIT
    assert config.schema_policy is SchemaPolicy.RECREATE
    assert config.strategies == ALL_STRATEGIES
    assert config.tables == ("sample_data", "sample_data_batch", "sample_data_prepared")


def test_lite_preset():
    config = BenchmarkConfig.preset("lite")
    assert config.url == "sqlite:///speed.db"
    assert config.num_rows == 10_000_000
    assert config.id_mode is IdMode.AUTO
    assert config.schema_policy is SchemaPolicy.CREATE_IF_ABSENT


def test_postgres_presets():
    assert BenchmarkConfig.preset("postgres").url == POSTGRES_URL
    assert BenchmarkConfig.preset("postgres").strategies == ALL_STRATEGIES
    assert BenchmarkConfig.preset("postgres-batch").strategies == (Strategy.SEQUENTIAL, Strategy.BATCH)


def test_unknown_preset():
    with pytest.raises(ConfigurationError):
        BenchmarkConfig.preset("oracle")


def test_overrides_skip_none():
    config = BenchmarkConfig.preset("postgres").with_overrides(url=None, num_rows=10, binary=None)
    assert config.url == POSTGRES_URL
    assert config.num_rows == 10
    assert config.binary is False


@pytest.mark.parametrize("rows", [0, -5])
def test_row_count_must_be_positive(rows):
    with pytest.raises(ConfigurationError):
        BenchmarkConfig(num_rows=rows)


def test_strategies_required():
    with pytest.raises(ConfigurationError):
        BenchmarkConfig(strategies=())


def test_strategy_tables_and_labels():
    assert Strategy.SEQUENTIAL.table == "sample_data"
    assert Strategy.BATCH.table == "sample_data_batch"
    assert Strategy.PREPARED.table == "sample_data_prepared"
    assert Strategy.PREPARED.label == "prepared batch"
    assert Strategy.BATCH.label == "batch"
