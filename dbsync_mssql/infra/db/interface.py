"""
Provider-neutral description of a database connection.

``Database`` is the capability every connection type exposes: build its
connection string, probe connectivity and run a query.  ``Connection``
in ``dbsync_mssql.infra.db.mssql`` is the SQL Server implementation.
"""

from __future__ import annotations

import enum
from typing import Protocol, runtime_checkable

from .result import TabularResult


class DatabaseProvider(enum.Enum):
    """Database engines a connection can target."""

    MSSQL = "mssql"


@runtime_checkable
class Database(Protocol):
    """A database connection provider exposing test/execute operations."""

    @property
    def provider(self) -> DatabaseProvider: ...

    def build_connection_string(self) -> str: ...

    def test_connection(self) -> bool: ...

    def execute_query(self, query: str, result_label: str) -> TabularResult: ...
