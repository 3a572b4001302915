"""
Database abstractions for SQL Server connections.

This subpackage wraps either the ``pymssql`` or ``pyodbc`` libraries
behind a single ``Connection`` type exposing ``build_connection_string``,
``test_connection`` and ``execute_query``.
"""

from .interface import Database, DatabaseProvider  # noqa: F401
from .mssql import Connection  # noqa: F401
from .result import TabularResult  # noqa: F401
