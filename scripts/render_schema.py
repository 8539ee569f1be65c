#!/usr/bin/env python3
"""Emit the job tracker DDL for applying the schema out of band."""

from __future__ import annotations

import argparse

from jobtracker.services.schema import render_schema_sql


def main() -> None:
    parser = argparse.ArgumentParser(description="Emit SQL that creates the job tracker schema.")
    parser.add_argument(
        "--transaction",
        action="store_true",
        help="Wrap the statements in begin/commit",
    )
    args = parser.parse_args()

    sql = "-- Job tracker schema\n-- Every statement is idempotent.\n\n" + render_schema_sql()
    if args.transaction:
        sql = f"begin;\n\n{sql}\ncommit;\n"
    print(sql)


if __name__ == "__main__":
    main()
