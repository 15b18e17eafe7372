from __future__ import annotations

from pathlib import Path

from src.attended_checkin.attended_checkin.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = "-- header; not a statement\nCREATE TABLE a (x INT);\nINSERT INTO a VALUES ('1;2');\n"

    assert list(_iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES ('1;2')"]


def test_database_statements_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS checkin_db;\nUSE checkin_db;\nCREATE TABLE a (x INT);"

    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (x INT)"]


def test_schema_file_defines_store_tables():
    schema = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
    statements = list(_iter_sql_statements(_strip_create_db_and_use(schema.read_text(encoding="utf-8"))))

    created = " ".join(s for s in statements if s.upper().startswith("CREATE TABLE"))
    for table in ("reference_values", "people", "household_groups", "household_members", "checkin_relationships", "notes"):
        assert f"EXISTS {table} " in created
