"""Shared fixtures: fake driver modules injected in place of pymssql/pyodbc."""

import sys
import types
from unittest.mock import MagicMock, patch

import pytest


def _fake_driver(name):
    module = types.ModuleType(name)

    class Error(Exception):
        pass

    module.Error = Error
    module.connect = MagicMock(name=f"{name}.connect")
    return module


def _cursor(description=None, rows=None):
    cursor = MagicMock(name="cursor")
    cursor.description = description
    cursor.fetchall.return_value = rows if rows is not None else []
    return cursor


@pytest.fixture
def make_cursor():
    return _cursor


@pytest.fixture
def fake_pymssql():
    module = _fake_driver("pymssql")
    module.connect.return_value.cursor.return_value = _cursor()
    with patch.dict(sys.modules, {"pymssql": module}):
        yield module


@pytest.fixture
def fake_pyodbc():
    module = _fake_driver("pyodbc")
    module.connect.return_value.cursor.return_value = _cursor()
    with patch.dict(sys.modules, {"pyodbc": module}):
        yield module
