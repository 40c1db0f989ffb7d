"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS coaching_sessions (
  id TEXT PRIMARY KEY,
  tenant_name TEXT NOT NULL,
  welcome_message TEXT,
  completion_message TEXT,
  participant_name TEXT NOT NULL,
  interview_state TEXT NOT NULL,
  history TEXT NOT NULL DEFAULT '[]',
  results TEXT,
  reflection_state TEXT,
  reflection_messages TEXT NOT NULL DEFAULT '[]',
  reflection_status TEXT NOT NULL DEFAULT 'none',
  enhanced_results TEXT,
  version INTEGER NOT NULL DEFAULT 0,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_coaching_sessions_reflection
  ON coaching_sessions (reflection_status, updated_at);
""",
]


def migrate(db_path: str = "data/flowforge.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
