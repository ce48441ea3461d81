"""Exceptions raised by the speed comparison programs."""


class SpeedComparisonError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SpeedComparisonError):
    """Invalid database URL, driver or benchmark option."""


class DatabaseConnectionError(SpeedComparisonError):
    """The database could not be reached. Fatal for a benchmark run."""


class SchemaSetupError(SpeedComparisonError):
    """Creating or dropping the benchmark tables failed. Fatal."""


class StatementError(SpeedComparisonError):
    """A single statement failed. The current strategy is abandoned."""


class BatchError(StatementError):
    """Submitting a batch of statements failed."""
