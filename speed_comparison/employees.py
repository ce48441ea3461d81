#!/usr/bin/env python3
"""
Walk through the basic ways of writing to SQLite: a literal statement, a
parameterized batch and a single parameterized statement, then print the
table contents.
"""

import argparse
import logging
import sys
from typing import List, Tuple

from colorama import Fore, Style, init

from .errors import SpeedComparisonError
from .session import Session

logger = logging.getLogger(__name__)

DB_URL = "sqlite:///sample.db"

INSERT_EMPLOYEE = "INSERT INTO employees (name, position, salary) VALUES (?, ?, ?)"


def create_table(session: Session):
    session.execute("""
        CREATE TABLE IF NOT EXISTS employees (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            position TEXT NOT NULL,
            salary REAL
        )
    """)
    print("Table 'employees' created.")


def insert_with_statement(session: Session) -> int:
    inserted = session.execute(
        "INSERT INTO employees (name, position, salary) VALUES ('Alice', 'Manager', 75000)"
    )
    print(f"Inserted {inserted} row(s) with Statement.")
    return inserted


def insert_with_batch(session: Session) -> int:
    rows = [
        ("Bob", "Developer", 60000.0),
        ("Charlie", "Analyst", 55000.0),
    ]
    inserted = session.execute_prepared_batch(INSERT_EMPLOYEE, rows)
    print(f"Inserted {inserted} row(s) with Batch.")
    return inserted


def insert_with_prepared_statement(session: Session) -> int:
    inserted = session.execute(INSERT_EMPLOYEE, ("David", "Designer", 50000.0))
    print(f"Inserted {inserted} row(s) with PreparedStatement.")
    return inserted


def query_data(session: Session) -> List[Tuple]:
    rows = session.query("SELECT id, name, position, salary FROM employees")
    print("Employees data:")
    for employee_id, name, position, salary in rows:
        print("ID: %d | Name: %s | Position: %s | Salary: %.2f" % (employee_id, name, position, salary))
    return rows


def run(session: Session):
    create_table(session)
    insert_with_statement(session)
    insert_with_batch(session)
    insert_with_prepared_statement(session)
    query_data(session)


def main(argv=None) -> int:
    init(autoreset=True)
    parser = argparse.ArgumentParser(description="Basic SQLite insert and query walk-through")
    parser.add_argument("--url", type=str, default=DB_URL, help=f"Database URL (default: {DB_URL})")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        with Session.open(args.url) as session:
            print(f"{Fore.GREEN}Connected to {session.target}.{Style.RESET_ALL}")
            run(session)
    except SpeedComparisonError:
        logger.exception("SQLite example failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
