from __future__ import annotations

from pathlib import Path

from src.timeclock.timeclock.database.bootstrap import _strip_create_db_and_use, iter_sql_statements


def test_split_ignores_comments_and_quoted_semicolons():
    sql = """
-- header comment
CREATE TABLE a (id INT);
INSERT INTO a VALUES ('x;y');
INSERT INTO a VALUES ('it\\'s; fine')
"""
    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (id INT)",
        "INSERT INTO a VALUES ('x;y')",
        "INSERT INTO a VALUES ('it\\'s; fine')",
    ]


def test_strip_database_statements():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE t (id INT);"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_file_parses():
    schema = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
    statements = list(iter_sql_statements(schema.read_text(encoding="utf-8")))
    tables = " ".join(statements)
    for name in ("punch_records", "justification_requests", "holidays", "system_config", "audit_logs"):
        assert name in tables
