#!/usr/bin/env python3
"""
Compare insertion speed of sequential, batched and prepared batched inserts.
Supports SQLite (sqlite3) and PostgreSQL (psycopg2, psycopg3) targets.
"""

import argparse
import logging
import sys

from colorama import Fore, Style, init

from .config import PRESETS, BenchmarkConfig, IdMode, SchemaPolicy, Strategy
from .errors import ConfigurationError, DatabaseConnectionError, SchemaSetupError
from .harness import print_results, print_row_counts, run_benchmark
from .session import Session


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare the speed of different row insertion strategies")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="lite",
                        help="Base configuration to start from (default: lite)")
    parser.add_argument("--url", type=str,
                        help="Database URL, e.g. sqlite:///speed.db or postgresql+psycopg://user:pw@host/db")
    parser.add_argument("--rows", type=int, help="Number of rows each strategy inserts")
    parser.add_argument("--id-mode", choices=[mode.value for mode in IdMode],
                        help="Insert explicit ids or let the database assign them")
    parser.add_argument("--schema-policy", choices=[policy.value for policy in SchemaPolicy],
                        help="Drop and recreate the tables or keep existing ones")
    parser.add_argument("--strategies", nargs="+", choices=[strategy.value for strategy in Strategy],
                        help="Strategies to run, in order")
    parser.add_argument("--binary", action="store_true", help="Use the binary protocol (psycopg3 only)")
    parser.add_argument("--verify", action="store_true", help="Print the row count of each table afterwards")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    config = BenchmarkConfig.preset(args.preset)
    return config.with_overrides(
        url=args.url,
        num_rows=args.rows,
        id_mode=IdMode(args.id_mode) if args.id_mode else None,
        schema_policy=SchemaPolicy(args.schema_policy) if args.schema_policy else None,
        strategies=tuple(Strategy(name) for name in args.strategies) if args.strategies else None,
        binary=args.binary or None,
    )


def main(argv=None) -> int:
    init(autoreset=True)
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        session = Session.open(config.url, binary=config.binary)
    except ConfigurationError as e:
        print(f"{Fore.RED}Invalid configuration: {e}{Style.RESET_ALL}")
        return 1
    except DatabaseConnectionError as e:
        print(f"{Fore.RED}Error connecting to the database: {e}{Style.RESET_ALL}")
        return 1

    with session:
        print(f"{Fore.GREEN}Connected to {session.target}.{Style.RESET_ALL}")
        print(f"Rows per strategy: {config.num_rows}")
        print(f"Id mode: {config.id_mode.value}")
        print(f"Schema policy: {config.schema_policy.value}")
        print()

        try:
            results = run_benchmark(session, config)
        except SchemaSetupError as e:
            print(f"{Fore.RED}{e}{Style.RESET_ALL}")
            return 1

        print_results(results)
        if args.verify:
            print()
            print_row_counts(session, config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
