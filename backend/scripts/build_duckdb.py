#!/usr/bin/env python3
"""Build the Match Fit DuckDB database from CSV data files.

Creates the events, profiles and lineups tables and loads events.csv and
profiles.csv from data_path when present. Existing lineups are kept unless
--reset is given.

Usage:
    uv run python scripts/build_duckdb.py [data_path] [--reset]

Default data_path: data/csv (relative to repo root)
"""
import sys
from pathlib import Path

import duckdb

from match_fit.repositories.schema import ensure_schema

# Collaborator tables reloaded from CSV on every build
CSV_TABLES = ("events", "profiles")


def build_duckdb(data_path: Path, output_path: Path | None = None, reset: bool = False) -> Path:
    """Build DuckDB database from CSV files in data_path.

    Args:
        data_path: Directory containing events.csv / profiles.csv
        output_path: Where to write the .duckdb file (default: data_path/match_fit.duckdb)
        reset: Remove an existing database file first, lineups included

    Returns:
        Path to the database file
    """
    if output_path is None:
        output_path = data_path / "match_fit.duckdb"

    if reset and output_path.exists():
        output_path.unlink()
        print(f"Removed existing {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with duckdb.connect(str(output_path)) as conn:
        ensure_schema(conn)

        for table_name in CSV_TABLES:
            csv_file = data_path / f"{table_name}.csv"
            if not csv_file.exists():
                print(f"  - {table_name}: no {csv_file.name}, table left as is")
                continue
            try:
                conn.execute(f"DELETE FROM {table_name}")
                # all_varchar keeps ids and jersey numbers as strings
                conn.execute(
                    f"""
                    INSERT INTO {table_name} BY NAME
                    SELECT * FROM read_csv('{csv_file}', header=true, all_varchar=true)
                    """
                )
                row_count = conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
                print(f"  ✓ {table_name}: {row_count:,} rows")
            except duckdb.Error as e:
                print(f"  ✗ {table_name}: {e}")

        tables = conn.execute("SHOW TABLES").fetchall()
    print(f"\n{len(tables)} tables in {output_path}")
    return output_path


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    reset = "--reset" in sys.argv[1:]

    if args:
        data_path = Path(args[0])
    else:
        # backend/scripts -> backend -> repo root
        repo_root = Path(__file__).parent.parent.parent
        data_path = repo_root / "data" / "csv"

    if not data_path.exists():
        print(f"Error: Data path not found: {data_path}")
        sys.exit(1)

    build_duckdb(data_path, data_path.parent / "match_fit.duckdb", reset=reset)


if __name__ == "__main__":
    main()
