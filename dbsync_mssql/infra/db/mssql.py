"""
SQL Server connection.

``Connection`` holds the parameters needed to reach one SQL Server
database and offers three operations:

* ``build_connection_string`` – validate the parameters and render
  them as a ``Data Source=...;Integrated Security=...`` string;
* ``test_connection`` – open a connection and close it again;
* ``execute_query`` – run one statement and return its first result set
  as a ``TabularResult``.

The object keeps no open resources between calls.  Each operation opens
its own driver connection and closes it before returning, on success
and on failure alike, so one instance can be shared between threads.

Example usage::

    from dbsync_mssql import Connection
    conn = Connection(server_address='db1', use_integrated_security=True)
    conn.test_connection()
    table = conn.execute_query('SELECT name FROM sys.databases', 'databases')
    print(table.to_dicts())
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from ...config import Config
from ...config import config as default_config
from ...errors import ConfigurationError, ConnectionError, MssqlError, QueryExecutionError
from .connection_string import build_connection_string, mask_connection_string, parse_connection_string
from .drivers import DEFAULT_ODBC_DRIVER, driver_errors, load_driver, open_connection
from .interface import DatabaseProvider
from .result import TabularResult


@dataclass(frozen=True)
class Connection:
    """Connection parameters for a Microsoft SQL Server database.

    Attributes:
        server_address: Host or address of the server, optionally
            ``host,port`` or ``host\\instance``.
        use_integrated_security: Authenticate with the caller's OS
            identity instead of ``username``/``password``.
        database_name: Initial catalog; the login's default when ``None``.
        username: SQL authentication login.
        password: SQL authentication password.
        trust_server_certificate: Accept the server certificate without
            validation.  Off unless explicitly enabled.
        encrypt: Request (``True``) or refuse (``False``) TLS encryption;
            the driver default applies when ``None``.
        connect_timeout: Login timeout in seconds.
        driver: Client library used to open connections
            (``pymssql`` or ``pyodbc``).
        odbc_driver: ODBC driver name, only used with ``pyodbc``.
    """

    server_address: Optional[str] = None
    use_integrated_security: bool = False
    database_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    trust_server_certificate: bool = False
    encrypt: Optional[bool] = None
    connect_timeout: Optional[int] = None
    driver: str = 'pymssql'
    odbc_driver: str = DEFAULT_ODBC_DRIVER

    @property
    def provider(self) -> DatabaseProvider:
        return DatabaseProvider.MSSQL

    # Alternate constructors

    @classmethod
    def from_data_source(
        cls,
        data_source: str,
        initial_catalog: Optional[str] = None,
        integrated_security: bool = False,
        user_id: Optional[str] = None,
        password: Optional[str] = None,
        **kwargs: Any,
    ) -> "Connection":
        """Build a connection using the ``Data Source``/``Initial Catalog`` naming."""
        return cls(
            server_address=data_source,
            use_integrated_security=integrated_security,
            database_name=initial_catalog,
            username=user_id,
            password=password,
            **kwargs,
        )

    @classmethod
    def from_connection_string(cls, text: str, **overrides: Any) -> "Connection":
        """Build a connection from an existing key=value connection string.

        Keyword arguments override the values found in ``text``.

        Raises:
            ConfigurationError: If ``text`` is empty or names no server.
        """
        params = parse_connection_string(text)
        conn = cls(
            server_address=params['address'],
            use_integrated_security=params['integratedSecurity'],
            database_name=params['database'],
            username=params['user'],
            password=params['password'],
            trust_server_certificate=params['trustServerCertificate'],
            encrypt=params['encrypt'],
            connect_timeout=params['connectTimeout'],
        )
        return replace(conn, **overrides) if overrides else conn

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "Connection":
        """Build a connection from the environment configuration.

        ``MSSQL_CONNECTION_STRING`` provides the base values; the
        individual ``MSSQL_*`` variables override them when set.
        """
        cfg = cfg or default_config
        base = cls.from_connection_string(cfg.MSSQL_CONNECTION_STRING) if cfg.MSSQL_CONNECTION_STRING else cls()
        values = {
            'server_address': cfg.MSSQL_SERVER,
            'database_name': cfg.MSSQL_DATABASE,
            'username': cfg.MSSQL_USER,
            'password': cfg.MSSQL_PASSWORD,
            'use_integrated_security': cfg.MSSQL_INTEGRATED_SECURITY,
            'trust_server_certificate': cfg.MSSQL_TRUST_SERVER_CERTIFICATE,
            'encrypt': cfg.MSSQL_ENCRYPT,
            'connect_timeout': cfg.MSSQL_CONNECT_TIMEOUT,
        }
        overrides = {key: value for key, value in values.items() if value is not None}
        return replace(base, driver=cfg.MSSQL_DRIVER, odbc_driver=cfg.MSSQL_ODBC_DRIVER, **overrides)

    # Operations

    def build_connection_string(self) -> str:
        """Validate the parameters and render the connection string.

        Returns:
            A connection string with ``Data Source``, optional
            ``Initial Catalog``, ``Integrated Security`` and, for SQL
            authentication, ``User ID`` and ``Password``.

        Raises:
            ConfigurationError: If the server address is missing, or SQL
                authentication is selected without a username or password.
        """
        if not self.server_address or not self.server_address.strip():
            raise ConfigurationError("server address required")
        pairs: List[Tuple[str, Any]] = [('Data Source', self.server_address.strip())]
        if self.database_name:
            pairs.append(('Initial Catalog', self.database_name))
        pairs.append(('Integrated Security', self.use_integrated_security))
        if not self.use_integrated_security:
            if not self.username:
                raise ConfigurationError("username required")
            if not self.password:
                raise ConfigurationError("password required")
            pairs.append(('User ID', self.username))
            pairs.append(('Password', self.password))
        if self.encrypt is not None:
            pairs.append(('Encrypt', self.encrypt))
        if self.trust_server_certificate:
            pairs.append(('Trust Server Certificate', True))
        if self.connect_timeout is not None:
            pairs.append(('Connect Timeout', self.connect_timeout))
        return build_connection_string(pairs)

    def test_connection(self) -> bool:
        """Open a connection to the server and close it immediately.

        Returns:
            ``True`` when the connection could be opened.

        Raises:
            ConfigurationError: If the parameters are incomplete.
            ConnectionError: If the server is unreachable or rejects the login.
        """
        logging.info("[mssql] test_connection", extra=self._log_context())
        with self._session(ConnectionError, f"Could not connect to {self.server_address}"):
            pass
        logging.info("[mssql] test_connection succeeded", extra=self._log_context())
        return True

    def execute_query(self, query: str, result_label: str) -> TabularResult:
        """Run ``query`` and return its first result set as ``result_label``.

        The statement is sent as given; it is not validated or
        parameterized.  Connections are opened in autocommit mode, so
        data modifications are applied immediately.

        Raises:
            ConfigurationError: If the parameters are incomplete.
            QueryExecutionError: If opening the connection, executing the
                statement or reading its rows fails.
        """
        context = self._log_context(label=result_label)
        logging.info("[mssql] execute_query", extra=context)
        with self._session(QueryExecutionError, "Error executing query") as (conn, errors):
            try:
                cursor = conn.cursor()
                try:
                    cursor.execute(query)
                    result = TabularResult.from_cursor(result_label, cursor)
                finally:
                    cursor.close()
            except errors as exc:
                logging.error("[mssql] execute_query failed", extra=context, exc_info=exc)
                raise QueryExecutionError(f"Error executing query: {exc}") from exc
        logging.info("[mssql] execute_query returned rows", extra={**context, 'count': len(result)})
        return result

    # Internals

    def _log_context(self, **extra: Any) -> Dict[str, Any]:
        return {'server': self.server_address, 'database': self.database_name, 'driver': self.driver, **extra}

    @contextmanager
    def _session(self, error_cls: Type[MssqlError], prefix: str) -> Iterator[Tuple[Any, Tuple[type, ...]]]:
        """Open a driver connection and guarantee it is closed on exit.

        Failures while opening or closing are raised as ``error_cls`` with
        ``prefix`` ahead of the driver message; a close failure never
        replaces an error already raised inside the block.  Yields the
        connection and the exception types the driver raises.
        """
        connection_string = self.build_connection_string()
        logging.debug(
            "[mssql] opening connection",
            extra={'connection_string': mask_connection_string(connection_string)},
        )
        params = parse_connection_string(connection_string)
        module = load_driver(self.driver)
        errors = driver_errors(module)
        try:
            conn = open_connection(module, params, self.odbc_driver)
        except errors as exc:
            logging.error("[mssql] could not open connection", extra=self._log_context(), exc_info=exc)
            raise error_cls(f"{prefix}: {exc}") from exc
        try:
            yield conn, errors
        except BaseException:
            try:
                conn.close()
            except errors as close_exc:
                # the error already raised wins over the close failure
                logging.warning("[mssql] close failed after error", extra=self._log_context(), exc_info=close_exc)
            raise
        try:
            conn.close()
        except errors as exc:
            logging.error("[mssql] could not close connection", extra=self._log_context(), exc_info=exc)
            raise error_cls(f"{prefix}: {exc}") from exc
