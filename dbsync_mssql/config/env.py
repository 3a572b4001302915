"""
Environment configuration loader.

This module reads the SQL Server connection settings from environment
variables and exposes them via a simple ``Config`` class.  Nothing is
required at import time: missing values only fail once a connection
string is built (see ``Connection.build_connection_string``).

Supported variables:

* ``MSSQL_CONNECTION_STRING`` – a full key=value connection string; the
  individual variables below override its fields.
* ``MSSQL_SERVER`` – host or address of the server (``host,port`` allowed).
* ``MSSQL_DATABASE`` – initial catalog.
* ``MSSQL_USER`` / ``MSSQL_PASSWORD`` – SQL authentication credentials.
* ``MSSQL_INTEGRATED_SECURITY`` – ``true``/``yes``/``1`` for trusted auth.
* ``MSSQL_TRUST_SERVER_CERTIFICATE`` – ``true``/``yes``/``1`` to skip
  certificate validation (default ``false``).
* ``MSSQL_ENCRYPT`` – ``true``/``yes``/``1`` to require TLS, any other
  value to disable it; the driver default applies when unset.
* ``MSSQL_CONNECT_TIMEOUT`` – login timeout in seconds.
* ``MSSQL_DRIVER`` – client library, ``pymssql`` (default) or ``pyodbc``.
* ``MSSQL_ODBC_DRIVER`` – ODBC driver name used with ``pyodbc``.

The resulting ``config`` instance can be imported from
``dbsync_mssql.config``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
load_dotenv()

_TRUE_VALUES = ('true', 'yes', '1')


@dataclass
class Config:
    """Holds environment configuration for the application."""

    MSSQL_CONNECTION_STRING: Optional[str] = None
    MSSQL_SERVER: Optional[str] = None
    MSSQL_DATABASE: Optional[str] = None
    MSSQL_USER: Optional[str] = None
    MSSQL_PASSWORD: Optional[str] = None
    MSSQL_INTEGRATED_SECURITY: Optional[bool] = None
    MSSQL_TRUST_SERVER_CERTIFICATE: Optional[bool] = None
    MSSQL_ENCRYPT: Optional[bool] = None
    MSSQL_CONNECT_TIMEOUT: Optional[int] = None
    MSSQL_DRIVER: str = "pymssql"
    MSSQL_ODBC_DRIVER: str = "ODBC Driver 18 for SQL Server"


def _load_env() -> Config:
    """Load configuration from environment variables.

    Raises:
        ValueError: If ``MSSQL_CONNECT_TIMEOUT`` is not an integer.

    Returns:
        Config: A populated configuration dataclass.
    """

    def _optional(name: str) -> Optional[str]:
        value = os.environ.get(name)
        return value if value else None

    def _flag(name: str) -> Optional[bool]:
        value = _optional(name)
        if value is None:
            return None
        return value.strip().lower() in _TRUE_VALUES

    timeout_raw = _optional("MSSQL_CONNECT_TIMEOUT")
    connect_timeout: Optional[int] = None
    if timeout_raw is not None:
        try:
            connect_timeout = int(timeout_raw)
        except ValueError:
            raise ValueError(
                f"Environment variable MSSQL_CONNECT_TIMEOUT must be an integer, got {timeout_raw!r}"
            ) from None

    return Config(
        MSSQL_CONNECTION_STRING=_optional("MSSQL_CONNECTION_STRING"),
        MSSQL_SERVER=_optional("MSSQL_SERVER"),
        MSSQL_DATABASE=_optional("MSSQL_DATABASE"),
        MSSQL_USER=_optional("MSSQL_USER"),
        MSSQL_PASSWORD=_optional("MSSQL_PASSWORD"),
        MSSQL_INTEGRATED_SECURITY=_flag("MSSQL_INTEGRATED_SECURITY"),
        MSSQL_TRUST_SERVER_CERTIFICATE=_flag("MSSQL_TRUST_SERVER_CERTIFICATE"),
        MSSQL_ENCRYPT=_flag("MSSQL_ENCRYPT"),
        MSSQL_CONNECT_TIMEOUT=connect_timeout,
        MSSQL_DRIVER=os.environ.get("MSSQL_DRIVER", "pymssql"),
        MSSQL_ODBC_DRIVER=os.environ.get("MSSQL_ODBC_DRIVER", "ODBC Driver 18 for SQL Server"),
    )


# Create a single configuration instance when this module is imported.
config: Config = _load_env()
