import pytest

from speed_comparison.config import BenchmarkConfig
from speed_comparison.session import Session


@pytest.fixture
def session():
    with Session.open("sqlite://") as session:
        yield session


@pytest.fixture
def config():
    return BenchmarkConfig(url="sqlite://", num_rows=100)


@pytest.fixture
def reject_row_50():
    """Install a trigger that aborts the insert of the row with id 50."""

    def install(session, table):
        session.execute(
            f"CREATE TRIGGER reject_{table} BEFORE INSERT ON {table} "
            "WHEN NEW.id = 50 "
            "BEGIN SELECT RAISE(ABORT, 'row 50 rejected'); END"
        )

    return install
