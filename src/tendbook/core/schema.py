"""SQLite schema for the instance table.

Collections are stored as JSON text next to the two scalar cache columns so
that replacing a document is one ``UPDATE`` of one row.
"""

from __future__ import annotations

from tendbook.core.protocols import Connection

INSTANCES_TABLE = "tendbook_instances"

INSTANCES_DDL = f"""
CREATE TABLE IF NOT EXISTS {INSTANCES_TABLE} (
    sync_id TEXT PRIMARY KEY,
    tenders TEXT DEFAULT '[]',
    tending_log TEXT DEFAULT '[]',
    last_tended_timestamp INTEGER,
    last_tender TEXT,
    chores TEXT DEFAULT '[]'
)
"""


def apply_schema(conn: Connection) -> list[str]:
    """Create the tables if missing (idempotent). Returns the table names."""
    conn.execute(INSTANCES_DDL)
    conn.commit()
    return [INSTANCES_TABLE]
