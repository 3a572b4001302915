"""
Adapters for the SQL Server client libraries.

Two DB-API drivers are supported: ``pymssql`` (pure wheel, bundles
FreeTDS) and ``pyodbc`` (requires a Microsoft ODBC driver).  Both are
imported lazily so the package can be imported, configured and tested
without either library or a SQL Server install being present.

``open_connection`` takes the parameter dictionary produced by
``parse_connection_string`` and returns a live DB-API connection in
autocommit mode.  Connection pooling is delegated to the library.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Dict, Tuple

from ...errors import ConfigurationError

SUPPORTED_DRIVERS = ('pymssql', 'pyodbc')
DEFAULT_ODBC_DRIVER = 'ODBC Driver 18 for SQL Server'


def load_driver(name: str) -> ModuleType:
    """Import and return the client library called ``name``.

    Raises:
        ConfigurationError: If ``name`` is not a supported driver or the
            library is not installed.
    """
    if name not in SUPPORTED_DRIVERS:
        raise ConfigurationError(
            f"Unsupported driver: {name} (expected one of {', '.join(SUPPORTED_DRIVERS)})"
        )
    try:
        return importlib.import_module(name)
    except ImportError as exc:
        raise ConfigurationError(
            f"{name} is not installed. Install it to connect to SQL Server."
        ) from exc


def driver_errors(module: ModuleType) -> Tuple[type, ...]:
    """Exception types that signal a failure reported by ``module``."""
    return (module.Error, OSError)


def _odbc_value(value: str) -> str:
    if any(ch in value for ch in ';{}') or value != value.strip():
        return '{' + value.replace('}', '}}') + '}'
    return value


def odbc_connection_string(params: Dict[str, Any], odbc_driver: str = DEFAULT_ODBC_DRIVER) -> str:
    """Translate parsed parameters into an ODBC connection string for ``pyodbc``."""
    server = params['server']
    port = params.get('port')
    server_expr = f"{server},{port}" if port else server
    parts = [
        f"DRIVER={{{odbc_driver}}}",
        f"SERVER={_odbc_value(server_expr)}",
    ]
    if params.get('database'):
        parts.append(f"DATABASE={_odbc_value(params['database'])}")
    if params.get('integratedSecurity'):
        parts.append("Trusted_Connection=yes")
    else:
        parts.append(f"UID={_odbc_value(params['user'])}")
        parts.append(f"PWD={_odbc_value(params['password'])}")
    if params.get('encrypt') is not None:
        parts.append(f"Encrypt={'yes' if params['encrypt'] else 'no'}")
    if params.get('trustServerCertificate'):
        parts.append("TrustServerCertificate=yes")
    return ';'.join(parts) + ';'


def _open_pymssql(module: ModuleType, params: Dict[str, Any]) -> Any:
    kwargs: Dict[str, Any] = {
        'server': params['server'],
        'autocommit': True,
    }
    if params.get('port'):
        kwargs['port'] = str(params['port'])
    if params.get('database'):
        kwargs['database'] = params['database']
    # Leaving user/password unset makes FreeTDS fall back to Kerberos/trusted auth
    if not params.get('integratedSecurity'):
        kwargs['user'] = params['user']
        kwargs['password'] = params['password']
    if params.get('connectTimeout') is not None:
        kwargs['login_timeout'] = params['connectTimeout']
    return module.connect(**kwargs)


def _open_pyodbc(module: ModuleType, params: Dict[str, Any], odbc_driver: str) -> Any:
    kwargs: Dict[str, Any] = {'autocommit': True}
    if params.get('connectTimeout') is not None:
        kwargs['timeout'] = params['connectTimeout']
    return module.connect(odbc_connection_string(params, odbc_driver), **kwargs)


def open_connection(
    module: ModuleType,
    params: Dict[str, Any],
    odbc_driver: str = DEFAULT_ODBC_DRIVER,
) -> Any:
    """Open a connection with the already-loaded driver ``module``.

    Errors raised by the library propagate unchanged; callers translate
    them into the package's error taxonomy.
    """
    name = module.__name__
    if name == 'pymssql':
        return _open_pymssql(module, params)
    elif name == 'pyodbc':
        return _open_pyodbc(module, params, odbc_driver)
    else:
        raise ConfigurationError(f"Unsupported driver: {name}")
