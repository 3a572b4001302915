"""
Data-access helper for Microsoft SQL Server.

The package builds SQL Server connection strings from explicit
parameters, probes connectivity and runs a single query into a labelled
in-memory table.  Socket I/O, authentication and pooling are left to the
underlying client library (``pymssql`` or ``pyodbc``).  See
``dbsync_mssql.infra.db.mssql`` for the ``Connection`` type.
"""

from .errors import (  # noqa: F401
    ConfigurationError,
    ConnectionError,
    MssqlError,
    QueryExecutionError,
)
from .infra.db import (  # noqa: F401
    Connection,
    Database,
    DatabaseProvider,
    TabularResult,
)
