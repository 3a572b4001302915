"""
JSON reporting utilities.

Helpers for exporting a ``TabularResult`` as JSON: ensure the target
directory exists and write the file, converting values JSON cannot
represent natively (dates, decimals, GUIDs, binary columns).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..db.result import TabularResult


def _default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value)


def ensure_dir(directory: str) -> None:
    """Ensure a directory exists, creating it recursively if necessary."""
    logging.info("[jsonReporter] ensure_dir", extra={"dir": directory})
    Path(directory).mkdir(parents=True, exist_ok=True)


def result_to_json(result: TabularResult, indent: int = 2) -> str:
    """Serialize ``result`` as ``{"name", "columns", "rows"}``."""
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False, default=_default)


def write_json(file_path: str, data: Any) -> None:
    """Write an object (or a ``TabularResult``) to a JSON file, ensuring the directory exists."""
    if isinstance(data, TabularResult):
        data = data.to_dict()
    directory = os.path.dirname(file_path)
    if directory:
        ensure_dir(directory)
    logging.info("[jsonReporter] write_json", extra={"file": file_path})
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=_default)
