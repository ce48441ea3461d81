"""Thin session wrapper over the DB-API drivers used by the benchmarks.

Supports sqlite3, psycopg2 and psycopg 3. Statements are written with ``?``
placeholders and rewritten for drivers that expect ``%s``.
"""

import importlib
import itertools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .errors import BatchError, ConfigurationError, DatabaseConnectionError, StatementError

logger = logging.getLogger(__name__)

_prepared_names = itertools.count(1)


@dataclass(frozen=True)
class Dialect:
    driver: str
    module: str
    placeholder: str
    id_column: str

    def load(self):
        """Import the driver module"""
        try:
            return importlib.import_module(self.module)
        except ImportError as exc:
            raise ConfigurationError(f"Driver {self.driver} is not installed: {exc}") from exc


SQLITE = Dialect("sqlite3", "sqlite3", "?", "INTEGER PRIMARY KEY")
PSYCOPG2 = Dialect("psycopg2", "psycopg2", "%s", "SERIAL PRIMARY KEY")
PSYCOPG3 = Dialect("psycopg", "psycopg", "%s", "SERIAL PRIMARY KEY")

# (backend, driver) as written in the URL, e.g. postgresql+psycopg
DIALECTS: Dict[Tuple[str, str], Dialect] = {
    ("sqlite", ""): SQLITE,
    ("sqlite", "pysqlite"): SQLITE,
    ("postgresql", ""): PSYCOPG2,
    ("postgresql", "psycopg2"): PSYCOPG2,
    ("postgresql", "psycopg"): PSYCOPG3,
}


def connect_arguments(url: str) -> Tuple[Dialect, Dict[str, Any]]:
    """Resolve a database URL into a dialect and driver ``connect()`` kwargs."""
    try:
        parsed = make_url(url)
    except ArgumentError as exc:
        raise ConfigurationError(f"Invalid database URL {url!r}: {exc}") from exc

    backend, _, driver = parsed.drivername.partition("+")
    if backend == "postgres":
        backend = "postgresql"
    dialect = DIALECTS.get((backend, driver))
    if dialect is None:
        raise ConfigurationError(f"Unsupported database URL: {parsed.drivername}")

    if dialect is SQLITE:
        return dialect, {"database": parsed.database or ":memory:"}

    kwargs = parsed.translate_connect_args(username="user", database="dbname")
    kwargs.update(parsed.query)
    return dialect, kwargs


def describe_url(url: str) -> str:
    """Render a URL for display with the password masked"""
    return make_url(url).render_as_string(hide_password=True)


class Session:
    """One open connection plus the cursor every statement goes through.

    Sessions start with auto-commit enabled; ``transaction()`` turns it off
    for the duration of a block and always turns it back on.
    """

    def __init__(self, connection, dialect: Dialect, errors, binary: bool = False, target: str = ""):
        self.connection = connection
        self.dialect = dialect
        self.errors = errors
        self.binary = binary
        self.target = target
        if dialect is PSYCOPG3 and binary:
            self.cursor = connection.cursor(binary=True)
        else:
            self.cursor = connection.cursor()
        self.set_autocommit(True)

    @classmethod
    def open(cls, url: str, binary: bool = False) -> "Session":
        dialect, kwargs = connect_arguments(url)
        module = dialect.load()
        target = describe_url(url)
        logger.debug("Connecting to %s with %s", target, dialect.driver)
        try:
            connection = module.connect(**kwargs)
        except module.Error as exc:
            raise DatabaseConnectionError(str(exc).strip()) from exc
        return cls(connection, dialect, module.Error, binary=binary, target=target)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def autocommit(self) -> bool:
        if self.dialect is SQLITE:
            return self.connection.isolation_level is None
        return bool(self.connection.autocommit)

    def set_autocommit(self, enabled: bool):
        if self.dialect is SQLITE:
            # None puts sqlite3 in autocommit mode, otherwise it opens a
            # transaction implicitly before the first DML statement
            self.connection.isolation_level = None if enabled else "DEFERRED"
        else:
            self.connection.autocommit = enabled

    def commit(self):
        try:
            self.connection.commit()
        except self.errors as exc:
            raise StatementError(f"Commit failed: {exc}") from exc

    def rollback(self):
        try:
            self.connection.rollback()
        except self.errors as exc:
            raise StatementError(f"Rollback failed: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator["Session"]:
        """Run a block as one transaction, committed once at the end.

        On error the transaction is rolled back before the exception
        propagates. Auto-commit is re-enabled in every case.
        """
        self.set_autocommit(False)
        try:
            yield self
            self.commit()
        except BaseException:
            self.rollback()
            raise
        finally:
            self.set_autocommit(True)

    def sql(self, statement: str) -> str:
        """Rewrite ``?`` placeholders for the connected driver"""
        if self.dialect.placeholder == "?":
            return statement
        return statement.replace("?", self.dialect.placeholder)

    def execute(self, statement: str, params: Sequence[Any] = None) -> int:
        """Execute one statement and return the number of affected rows."""
        try:
            if params is None:
                self.cursor.execute(statement)
            else:
                self.cursor.execute(self.sql(statement), params)
        except self.errors as exc:
            raise StatementError(str(exc).strip()) from exc
        return self.cursor.rowcount

    def query(self, statement: str, params: Sequence[Any] = None) -> List[tuple]:
        self.execute(statement, params)
        return self.cursor.fetchall()

    def count_rows(self, table: str) -> int:
        return self.query(f"SELECT COUNT(*) FROM {table}")[0][0]

    def execute_batch(self, statements: Sequence[str]) -> int:
        """Submit a client-side batch of literal statements in one call.

        PostgreSQL drivers send the whole batch as a single multi-statement
        query. sqlite3 only accepts one statement per ``execute``, so the
        queued statements run back to back. Returns the number of statements
        in the batch.
        """
        if not statements:
            return 0
        try:
            if self.dialect is SQLITE:
                for statement in statements:
                    self.cursor.execute(statement)
            elif self.binary:
                # binary cursors force the extended protocol, which rejects
                # multi-statement strings
                with self.connection.cursor() as cursor:
                    cursor.execute(";\n".join(statements))
            else:
                self.cursor.execute(";\n".join(statements))
        except self.errors as exc:
            raise BatchError(str(exc).strip()) from exc
        return len(statements)

    def execute_prepared_batch(self, template: str, rows: Sequence[Sequence[Any]]) -> int:
        """Prepare ``template`` once and execute it for every parameter row.

        Returns the number of parameter rows in the batch.
        """
        if not rows:
            return 0
        try:
            if self.dialect is PSYCOPG2:
                self._execute_prepared_psycopg2(template, rows)
            else:
                # sqlite3 compiles the statement once and psycopg 3 prepares
                # it server side and pipelines the executions
                self.cursor.executemany(self.sql(template), rows)
        except self.errors as exc:
            raise BatchError(str(exc).strip()) from exc
        return len(rows)

    def _execute_prepared_psycopg2(self, template: str, rows: Sequence[Sequence[Any]]):
        from psycopg2.extras import execute_batch

        name = f"speed_comparison_{next(_prepared_names)}"
        numbered = template
        count = template.count("?")
        for index in range(1, count + 1):
            numbered = numbered.replace("?", f"${index}", 1)

        self.cursor.execute(f"PREPARE {name} AS {numbered}")
        execute_batch(self.cursor, f"EXECUTE {name} ({', '.join(['%s'] * count)})", rows)
        self.cursor.execute(f"DEALLOCATE {name}")

    def close(self):
        try:
            self.cursor.close()
        finally:
            self.connection.close()
