"""
In-memory tabular results.

A ``TabularResult`` is the materialized first result set of a query:
an ordered tuple of column names and an ordered tuple of rows, each row
a positional tuple of the values the driver returned.  Column names are
normalized the way a data adapter fills a table: unnamed columns are
numbered with a running counter (``Column1``, ``Column2``...) wherever
they sit, skipping names already taken, and duplicate names receive
a numeric suffix (``id``, ``id1``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple


def _normalize_columns(names: Sequence[str]) -> Tuple[str, ...]:
    result: List[str] = []
    seen = set()
    taken = {raw.lower() for raw in names if raw}
    unnamed = 0
    for raw in names:
        if raw:
            name = raw
        else:
            unnamed += 1
            while f"column{unnamed}" in seen or f"column{unnamed}" in taken:
                unnamed += 1
            name = f"Column{unnamed}"
        if name.lower() in seen:
            suffix = 1
            while f"{name}{suffix}".lower() in seen:
                suffix += 1
            name = f"{name}{suffix}"
        seen.add(name.lower())
        result.append(name)
    return tuple(result)


@dataclass(frozen=True)
class TabularResult:
    """A named table of rows returned by a query."""

    name: str
    columns: Tuple[str, ...] = ()
    rows: Tuple[Tuple[Any, ...], ...] = ()

    @classmethod
    def from_cursor(cls, name: str, cursor: Any) -> "TabularResult":
        """Fill a result from a DB-API cursor that has just executed a statement.

        Statements without a result set (``cursor.description`` is
        ``None``) produce an empty table.
        """
        if not cursor.description:
            return cls(name=name)
        columns = _normalize_columns([col[0] for col in cursor.description])
        rows = tuple(tuple(row) for row in cursor.fetchall() or [])
        return cls(name=name, columns=columns, rows=rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return iter(self.rows)

    def column(self, name: str) -> Tuple[Any, ...]:
        """Return every value of column ``name``.

        Raises:
            KeyError: If the table has no such column.
        """
        try:
            index = self.columns.index(name)
        except ValueError:
            raise KeyError(f"No column named {name!r} in {self.name}") from None
        return tuple(row[index] for row in self.rows)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'columns': list(self.columns),
            'rows': [list(row) for row in self.rows],
        }
