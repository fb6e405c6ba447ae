from __future__ import annotations

import logging
from pathlib import Path

import mysql.connector

logger = logging.getLogger(__name__)

# The target database comes from DB_CONFIG, not from the schema file.
_SKIPPED_PREFIXES = ("CREATE DATABASE", "USE ")


def schema_statements(sql: str) -> list[str]:
    """Split schema.sql on ';'. The schema keeps semicolons out of literals."""

    statements = (s.strip() for s in sql.split(";"))
    return [s for s in statements if s and not s.upper().startswith(_SKIPPED_PREFIXES)]


def _server_kwargs(db_config: dict) -> dict:
    return {
        "host": db_config.get("host", "localhost"),
        "port": int(db_config.get("port", 3306)),
        "user": db_config.get("user", "root"),
        "password": db_config.get("password", ""),
    }


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed, then apply schema.sql (CREATE ... IF NOT EXISTS)."""

    database = db_config.get("database", "attendance_engine")
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = mysql.connector.connect(**_server_kwargs(db_config))
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        cur.execute(f"USE `{database}`")
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied: %s statements to %s", len(statements), database)


def list_tables(db_config: dict) -> list[str]:
    conn = mysql.connector.connect(database=db_config.get("database", "attendance_engine"), **_server_kwargs(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
