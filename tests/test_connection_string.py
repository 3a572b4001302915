"""Unit tests for connection string building, parsing and masking."""

import pytest

from dbsync_mssql.errors import ConfigurationError
from dbsync_mssql.infra.db.connection_string import (
    build_connection_string,
    mask_connection_string,
    parse_connection_string,
    quote_value,
    split_pairs,
)
from dbsync_mssql.infra.db.drivers import odbc_connection_string


class TestBuild:
    def test_pairs_rendered_in_order(self):
        text = build_connection_string([("Data Source", "db1"), ("Integrated Security", True)])
        assert text == "Data Source=db1;Integrated Security=True"

    def test_false_flag(self):
        assert build_connection_string([("Integrated Security", False)]) == "Integrated Security=False"

    def test_semicolon_value_is_quoted(self):
        assert quote_value("pa;ss") == '"pa;ss"'

    def test_double_quote_value_uses_single_quotes(self):
        assert quote_value('"quoted') == "'\"quoted'"

    def test_both_quotes_are_escaped(self):
        assert quote_value("a;'b\"") == '"a;\'b"""'

    def test_plain_value_untouched(self):
        assert quote_value("secret") == "secret"


class TestParse:
    def test_ado_keys(self):
        params = parse_connection_string(
            "Data Source=db1,1444;Initial Catalog=sales;Integrated Security=False;"
            "User ID=app;Password=pw;Trust Server Certificate=True;Connect Timeout=15"
        )
        assert params["address"] == "db1,1444"
        assert params["server"] == "db1"
        assert params["port"] == 1444
        assert params["database"] == "sales"
        assert params["user"] == "app"
        assert params["password"] == "pw"
        assert params["integratedSecurity"] is False
        assert params["trustServerCertificate"] is True
        assert params["encrypt"] is None
        assert params["connectTimeout"] == 15

    def test_odbc_aliases(self):
        params = parse_connection_string("Server=host;Database=db;UID=u;PWD=p;Encrypt=yes")
        assert params["server"] == "host"
        assert params["port"] is None
        assert params["database"] == "db"
        assert params["user"] == "u"
        assert params["password"] == "p"
        assert params["encrypt"] is True

    def test_sspi_means_integrated(self):
        assert parse_connection_string("Server=h;Integrated Security=SSPI")["integratedSecurity"] is True

    def test_trust_certificate_defaults_to_false(self):
        assert parse_connection_string("Server=h")["trustServerCertificate"] is False

    def test_quoted_values_round_trip(self):
        text = build_connection_string([("Data Source", "h"), ("Password", 'a;b"c')])
        assert parse_connection_string(text)["password"] == 'a;b"c'

    def test_braced_value(self):
        assert split_pairs("PWD={a;b}}c};Server=h") == {"pwd": "a;b}c", "server": "h"}

    def test_keys_are_case_insensitive(self):
        assert parse_connection_string("SERVER=h;initial catalog=x")["database"] == "x"

    def test_fragments_without_equals_are_ignored(self):
        assert parse_connection_string("junk;Server=h;;")["server"] == "h"

    def test_empty_string_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_connection_string("   ")

    def test_missing_server_rejected(self):
        with pytest.raises(ConfigurationError, match="Server"):
            parse_connection_string("Database=x")

    def test_invalid_timeout_rejected(self):
        with pytest.raises(ConfigurationError, match="timeout"):
            parse_connection_string("Server=h;Connect Timeout=soon")


class TestMask:
    def test_password_hidden(self):
        masked = mask_connection_string("Data Source=h;User ID=u;Password=secret;Integrated Security=False")
        assert "secret" not in masked
        assert "Password=***" in masked
        assert "User ID=u" in masked

    def test_quoted_password_hidden(self):
        masked = mask_connection_string('Server=h;PWD="a;b"')
        assert "a;b" not in masked


class TestOdbcConnectionString:
    def test_sql_authentication(self):
        text = odbc_connection_string(
            {"server": "h", "port": 1433, "database": "db", "user": "u", "password": "p;q"},
            "ODBC Driver 17 for SQL Server",
        )
        assert text.startswith("DRIVER={ODBC Driver 17 for SQL Server};SERVER=h,1433;DATABASE=db;")
        assert "UID=u;" in text
        assert "PWD={p;q};" in text
        assert "Trusted_Connection" not in text

    def test_integrated_security(self):
        text = odbc_connection_string({"server": "h", "integratedSecurity": True, "trustServerCertificate": True})
        assert "Trusted_Connection=yes" in text
        assert "TrustServerCertificate=yes" in text
        assert "UID=" not in text
