"""
SQL Server connection string utilities.

Connection strings follow the key=value grammar shared by SQL Server
clients: pairs separated by ``;``, keys matched case-insensitively, and
values optionally wrapped in double quotes, single quotes or (ODBC
style) braces when they contain separators.

``build_connection_string`` renders an ordered list of pairs,
``parse_connection_string`` turns a string back into the parameter
dictionary the driver adapters consume and ``mask_connection_string``
hides passwords before a string is logged.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Sequence, Tuple

from ...errors import ConfigurationError

_TRUE_VALUES = ('true', 'yes', '1', 'sspi')

_VALUE_PATTERN = r"""(?:"(?:[^"]|"")*"|'(?:[^']|'')*'|\{(?:[^}]|\}\})*\}|[^;]*)"""
_PAIR_RE = re.compile(r"[\s;]*(?P<key>[^=;]+?)\s*=\s*(?P<value>" + _VALUE_PATTERN + r")\s*(?:;|$)")
_SECRET_RE = re.compile(r"(?i)(\b(?:password|pwd)\s*=\s*)(" + _VALUE_PATTERN + r")")


def quote_value(value: str) -> str:
    """Quote ``value`` so that it survives a round trip through the parser."""
    needs_quotes = (
        ';' in value
        or value != value.strip()
        or value[:1] in ('"', "'", '{')
    )
    if not needs_quotes:
        return value
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return '"' + value.replace('"', '""') + '"'


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return 'True' if value else 'False'
    return quote_value(str(value))


def build_connection_string(pairs: Sequence[Tuple[str, Any]]) -> str:
    """Render ``(key, value)`` pairs in order as ``Key=Value;Key=Value``."""
    return ';'.join(f"{key}={_format(value)}" for key, value in pairs)


def _unquote(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2:
        if value[0] == value[-1] == '"':
            return value[1:-1].replace('""', '"')
        if value[0] == value[-1] == "'":
            return value[1:-1].replace("''", "'")
        if value[0] == '{' and value[-1] == '}':
            return value[1:-1].replace('}}', '}')
    return value


def split_pairs(input_str: str) -> Dict[str, str]:
    """Split a connection string into a ``{lowercased key: value}`` mapping.

    Later duplicates win, which matches how SQL Server clients resolve
    repeated keys.  Fragments without ``=`` are ignored.
    """
    kv: Dict[str, str] = {}
    pos = 0
    while pos < len(input_str):
        m = _PAIR_RE.match(input_str, pos)
        if not m or m.end() == pos:
            nxt = input_str.find(';', pos)
            if nxt == -1:
                break
            pos = nxt + 1
            continue
        kv[m.group('key').strip().lower()] = _unquote(m.group('value'))
        pos = m.end()
    return kv


def _flag(value: Optional[str], default: Optional[bool]) -> Optional[bool]:
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def parse_connection_string(input_str: str) -> Dict[str, Any]:
    """Parse a SQL Server connection string into its components.

    The resulting dictionary contains ``address`` (the raw server value),
    ``server`` and ``port`` (split from ``host,port``), ``user``,
    ``password``, ``database``, ``integratedSecurity``,
    ``trustServerCertificate``, ``encrypt`` (``None`` when unspecified)
    and ``connectTimeout``.

    Args:
        input_str: The connection string to parse.

    Returns:
        A dictionary of connection parameters.

    Raises:
        ConfigurationError: If the string is empty, names no server or
            carries a non-numeric port or timeout.
    """
    s = (input_str or "").strip()
    if not s:
        raise ConfigurationError("Empty connection string")
    kv = split_pairs(s)
    server_raw = (
        kv.get('data source') or kv.get('server') or kv.get('address')
        or kv.get('addr') or kv.get('network address')
    )
    if not server_raw:
        raise ConfigurationError('No Server= found in connection string')
    server = server_raw
    port: Optional[int] = None
    m = re.match(r"^(.*?),\s*(\d+)$", server_raw)
    if m:
        server = m.group(1)
        port = int(m.group(2))
    timeout_raw = kv.get('connect timeout') or kv.get('connection timeout') or kv.get('timeout')
    connect_timeout: Optional[int] = None
    if timeout_raw:
        try:
            connect_timeout = int(timeout_raw)
        except ValueError:
            raise ConfigurationError(f"Invalid connect timeout: {timeout_raw!r}") from None
    integrated = _flag(kv.get('integrated security') or kv.get('trusted_connection'), False)
    return {
        'address': server_raw,
        'server': server,
        'port': port,
        'user': kv.get('user id') or kv.get('uid') or kv.get('user'),
        'password': kv.get('password') or kv.get('pwd'),
        'database': kv.get('initial catalog') or kv.get('database'),
        'integratedSecurity': integrated,
        'trustServerCertificate': _flag(
            kv.get('trust server certificate') or kv.get('trustservercertificate'), False
        ),
        'encrypt': _flag(kv.get('encrypt'), None),
        'connectTimeout': connect_timeout,
    }


def mask_connection_string(input_str: str) -> str:
    """Return ``input_str`` with every password value replaced by ``***``."""
    return _SECRET_RE.sub(lambda m: m.group(1) + '***', input_str)
