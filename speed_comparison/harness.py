"""
Insertion benchmark harness.

Compares three ways of inserting the same rows:

- sequential: one literal INSERT statement executed per row
- batch: the same literal statements queued client side and submitted once
- prepared batch: one parameterized statement prepared once, bound per row

Each strategy writes to its own table and runs inside a single transaction
that is committed once at the end.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Dict, List

from colorama import Fore, Style
from tabulate import tabulate

from .config import BenchmarkConfig, IdMode, SchemaPolicy, Strategy
from .errors import SchemaSetupError, StatementError
from .session import Session

logger = logging.getLogger(__name__)

VALUE_RANGE = 1000.0


@dataclass
class BenchmarkResult:
    strategy: Strategy
    elapsed_ms: float
    row_count: int

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000.0


def random_value(rng: random.Random) -> float:
    """Uniform value in [0, 1000)"""
    return rng.random() * VALUE_RANGE


def sql_literal(value) -> str:
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, float):
        # repr round-trips exactly, unlike fixed precision formatting
        return repr(value)
    return str(value)


def literal_insert(table: str, row_id: int, value: float, id_mode: IdMode) -> str:
    """Build an INSERT with the row's values embedded in the SQL text."""
    name = sql_literal(f"Name_{row_id}")
    if id_mode is IdMode.EXPLICIT:
        return f"INSERT INTO {table} (id, name, value) VALUES ({row_id}, {name}, {sql_literal(value)})"
    return f"INSERT INTO {table} (name, value) VALUES ({name}, {sql_literal(value)})"


def prepared_insert(table: str, id_mode: IdMode) -> str:
    if id_mode is IdMode.EXPLICIT:
        return f"INSERT INTO {table} (id, name, value) VALUES (?, ?, ?)"
    return f"INSERT INTO {table} (name, value) VALUES (?, ?)"


def setup_schema(session: Session, config: BenchmarkConfig):
    """Create one table per configured strategy.

    With ``SchemaPolicy.RECREATE`` existing tables are dropped first so every
    strategy starts from an empty table. ``CREATE_IF_ABSENT`` keeps whatever
    rows are already there.
    """
    try:
        if config.schema_policy is SchemaPolicy.RECREATE:
            for table in config.tables:
                session.execute(f"DROP TABLE IF EXISTS {table}")

        for table in config.tables:
            session.execute(
                f"CREATE TABLE IF NOT EXISTS {table} ("
                f"id {session.dialect.id_column}, "
                "name TEXT NOT NULL, "
                "value REAL NOT NULL)"
            )
            print(f"Table '{table}' created.")
    except StatementError as exc:
        raise SchemaSetupError(f"Could not create benchmark tables: {exc}") from exc


def insert_rows(session: Session, config: BenchmarkConfig, rng: random.Random = None):
    """
    We execute the configured amount of rows by constructing a new SQL
    statement for each row and sending it to the database.
    """
    rng = rng or random.Random()
    table = Strategy.SEQUENTIAL.table

    try:
        with session.transaction():
            for i in range(1, config.num_rows + 1):
                session.execute(literal_insert(table, i, random_value(rng), config.id_mode))
    except StatementError as exc:
        logger.error("Error during insertion: %s", exc)


def insert_rows_batches(session: Session, config: BenchmarkConfig, rng: random.Random = None):
    """
    We construct a new SQL statement for each row, queue them in a batch and
    send the batch to the database in one go.
    """
    rng = rng or random.Random()
    table = Strategy.BATCH.table

    try:
        with session.transaction():
            batch = []
            for i in range(1, config.num_rows + 1):
                batch.append(literal_insert(table, i, random_value(rng), config.id_mode))
            inserted = session.execute_batch(batch)
            logger.debug("Inserted %d row(s) with batch.", inserted)
    except StatementError as exc:
        logger.error("Error during insertion: %s", exc)


def insert_rows_prepared(session: Session, config: BenchmarkConfig, rng: random.Random = None):
    """
    We prepare a single parameterized insert statement and attach every row
    to it as a new batch entry.
    """
    rng = rng or random.Random()
    template = prepared_insert(Strategy.PREPARED.table, config.id_mode)

    try:
        with session.transaction():
            rows = []
            for i in range(1, config.num_rows + 1):
                if config.id_mode is IdMode.EXPLICIT:
                    rows.append((i, f"Name_{i}", random_value(rng)))
                else:
                    rows.append((f"Name_{i}", random_value(rng)))
            inserted = session.execute_prepared_batch(template, rows)
            logger.debug("Inserted %d row(s) with prepared batch.", inserted)
    except StatementError as exc:
        logger.error("Error during batch insert: %s", exc)


STRATEGIES: Dict[Strategy, Callable] = {
    Strategy.SEQUENTIAL: insert_rows,
    Strategy.BATCH: insert_rows_batches,
    Strategy.PREPARED: insert_rows_prepared,
}


def time_method(session: Session, method: Callable, config: BenchmarkConfig) -> float:
    """Run ``method`` once and return its wall-clock duration in milliseconds."""
    start = time.perf_counter()
    method(session, config)
    end = time.perf_counter()
    return (end - start) * 1000


def run_unbatched(session: Session, config: BenchmarkConfig) -> float:
    return time_method(session, insert_rows, config)


def run_client_batched(session: Session, config: BenchmarkConfig) -> float:
    return time_method(session, insert_rows_batches, config)


def run_prepared_batched(session: Session, config: BenchmarkConfig) -> float:
    return time_method(session, insert_rows_prepared, config)


def run_benchmark(session: Session, config: BenchmarkConfig) -> List[BenchmarkResult]:
    """Set up the tables and time every configured strategy once."""
    setup_schema(session, config)

    results = []
    for strategy in config.strategies:
        print(f"{Fore.CYAN}Running {strategy.label} insertion of {config.num_rows} rows...{Style.RESET_ALL}")
        elapsed = time_method(session, STRATEGIES[strategy], config)
        results.append(BenchmarkResult(strategy, elapsed, config.num_rows))
    return results


def print_results(results: List[BenchmarkResult]):
    print()
    for result in results:
        print(f"Total insertion time {result.strategy.label}: {result.elapsed_seconds:.3f} seconds")

    rows = [
        [result.strategy.label, result.row_count, f"{result.elapsed_ms:.1f}", f"{result.elapsed_seconds:.3f}"]
        for result in results
    ]
    print()
    print(tabulate(rows, headers=["Strategy", "Rows", "Time (ms)", "Time (s)"], tablefmt="grid"))


def print_row_counts(session: Session, config: BenchmarkConfig):
    """Print how many rows each benchmark table holds"""
    for strategy in config.strategies:
        count = session.count_rows(strategy.table)
        color = Fore.GREEN if count == config.num_rows else Fore.YELLOW
        print(f"{color}{strategy.table}: {count} row(s){Style.RESET_ALL}")
