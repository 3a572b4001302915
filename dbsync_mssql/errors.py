"""
Error taxonomy for the SQL Server helper.

Every failure surfaces to the caller as one of three kinds:

* ``ConfigurationError`` – a required field is missing before a
  connection string can be built (or the selected driver is unusable).
* ``ConnectionError`` – the server could not be reached or rejected the
  login while opening a connection.
* ``QueryExecutionError`` – opening, executing or reading the result of
  a query failed.

``ConnectionError`` also derives from the builtin of the same name so
callers that already catch ``builtins.ConnectionError`` keep working.
"""

from __future__ import annotations

import builtins


class MssqlError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(MssqlError, ValueError):
    """Raised when the connection parameters are incomplete."""


class ConnectionError(MssqlError, builtins.ConnectionError):  # noqa: A001
    """Raised when a connection to the server cannot be opened."""


class QueryExecutionError(MssqlError):
    """Raised when a query fails to open, execute or materialize."""
