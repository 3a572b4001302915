"""Tests for the command line entry points."""

import json

from dbsync_mssql.cli import query, test_db
from dbsync_mssql.config import Config

CFG = Config(MSSQL_SERVER="db1", MSSQL_USER="app", MSSQL_PASSWORD="pw")


class TestTestDb:
    def test_success(self, fake_pymssql):
        assert test_db.main(cfg=CFG) == 0
        fake_pymssql.connect.return_value.close.assert_called_once_with()

    def test_failure(self, fake_pymssql):
        fake_pymssql.connect.side_effect = fake_pymssql.Error("unreachable")
        assert test_db.main(cfg=CFG) == 1

    def test_incomplete_configuration(self):
        assert test_db.main(cfg=Config()) == 1


class TestQuery:
    def test_prints_json(self, fake_pymssql, make_cursor, capsys):
        fake_pymssql.connect.return_value.cursor.return_value = make_cursor(
            description=(("ok", 3),), rows=[(1,)]
        )
        assert query.main(["--sql", "SELECT 1 AS ok", "--label", "probe"], cfg=CFG) == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"name": "probe", "columns": ["ok"], "rows": [[1]]}

    def test_writes_output_file(self, fake_pymssql, make_cursor, tmp_path):
        fake_pymssql.connect.return_value.cursor.return_value = make_cursor(
            description=(("name", 1),), rows=[("ana",)]
        )
        target = tmp_path / "out" / "result.json"
        query.main(["--sql", "SELECT name FROM p", "--output", str(target)], cfg=CFG)
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data == {"name": "Table", "columns": ["name"], "rows": [["ana"]]}

    def test_query_failure_exits_2(self, fake_pymssql, capsys):
        fake_pymssql.connect.side_effect = fake_pymssql.Error("down")
        assert query.main(["--sql", "SELECT 1"], cfg=CFG) == 2
        assert capsys.readouterr().out == ""

    def test_incomplete_configuration_exits_2(self):
        assert query.main(["--sql", "SELECT 1"], cfg=Config()) == 2
