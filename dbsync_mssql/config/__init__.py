"""
Expose the loaded configuration as ``config``.

Importing from this module will load environment variables (and a
``.env`` file, if present) and populate a singleton ``Config`` instance.
Example:

    from dbsync_mssql.config import config
    print(config.MSSQL_SERVER)
"""

from .env import config, Config  # noqa: F401
