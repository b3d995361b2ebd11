"""Shared DuckDB access for repositories."""

from pathlib import Path

import duckdb
import pandas as pd


class DuckDBRepository:
    """Connection-per-call access to a DuckDB database file."""

    def __init__(self, database_path: str | Path):
        self._db_path = Path(database_path) if isinstance(database_path, str) else database_path

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> duckdb.DuckDBPyConnection:
        # Every repository opens the file with the same (read-write) config;
        # DuckDB refuses mixed configurations within one process.
        return duckdb.connect(str(self._db_path))

    def _query(self, sql: str, params: list | None = None) -> list[dict]:
        """Execute query and return list of dicts with JSON-friendly values."""
        with self._connect() as conn:
            df = conn.execute(sql, params or []).df()

        for col in df.columns:
            if pd.api.types.is_datetime64_any_dtype(df[col]):
                df[col] = df[col].dt.strftime("%Y-%m-%dT%H:%M:%S.%f")

        # Native Python scalars, None for nulls
        df = df.astype(object).where(df.notna(), None)
        return df.to_dict(orient="records")
