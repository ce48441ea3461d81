"""Insertion strategy speed comparison for SQLite and PostgreSQL."""

from .config import BenchmarkConfig, IdMode, SchemaPolicy, Strategy
from .errors import (
    BatchError,
    ConfigurationError,
    DatabaseConnectionError,
    SchemaSetupError,
    SpeedComparisonError,
    StatementError,
)
from .harness import BenchmarkResult, run_benchmark
from .session import Session

__version__ = "0.1.0"

__all__ = [
    "BatchError",
    "BenchmarkConfig",
    "BenchmarkResult",
    "ConfigurationError",
    "DatabaseConnectionError",
    "IdMode",
    "SchemaPolicy",
    "SchemaSetupError",
    "Session",
    "SpeedComparisonError",
    "StatementError",
    "Strategy",
    "run_benchmark",
]
