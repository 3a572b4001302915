"""
Run a single query against the configured SQL Server database.

The result is printed as JSON or, with ``--output``, written to a JSON
file.  Connection settings come from the ``MSSQL_*`` environment
variables (see ``dbsync_mssql.config.env``).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ..config import Config
from ..infra.db import Connection
from ..infra.reporting.json_reporter import result_to_json, write_json


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Execute a SQL Server query and export the result as JSON')
    parser.add_argument('--sql', type=str, required=True, help='SQL statement to execute')
    parser.add_argument('--label', type=str, default='Table', help='Name attached to the result table')
    parser.add_argument('--output', type=str, help='Write the result to this JSON file instead of stdout')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, cfg: Optional[Config] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    logging.info('[cli/query] Parsed arguments', extra={'label': args.label, 'output': args.output})
    try:
        conn = Connection.from_config(cfg)
        result = conn.execute_query(args.sql, args.label)
        if args.output:
            write_json(args.output, result)
        else:
            print(result_to_json(result))
    except Exception as err:
        logging.error('Error executing cli/query', exc_info=err)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
