"""
Migration helper for existing SQLite agenda databases.
Run:  python migrate.py [path/to/agenda.db]

What it does (idempotent):
- Add description, category, reminder, email, reminder_sent columns to task
- Normalize empty/'none' reminder values to NULL
- Backfill reminder_sent = 0 where it is NULL
"""
import sqlite3
import sys
from pathlib import Path

DB_PATH = Path("instance") / "agenda.db"


def column_exists(cursor, table, column):
    cursor.execute(f"PRAGMA table_info({table})")
    return any(row[1] == column for row in cursor.fetchall())


def add_column(cursor, table, column, col_type):
    if column_exists(cursor, table, column):
        print(f"[skip] {column} already exists on {table}")
        return False
    cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}")
    print(f"[add] {column} added to {table}")
    return True


def add_reminder_columns(cur):
    add_column(cur, "task", "description", "TEXT")
    add_column(cur, "task", "category", "VARCHAR(20) NOT NULL DEFAULT 'work'")
    add_column(cur, "task", "reminder", "VARCHAR(10)")
    add_column(cur, "task", "email", "VARCHAR(254)")
    add_column(cur, "task", "reminder_sent", "BOOLEAN NOT NULL DEFAULT 0")


def normalize_reminders(cur):
    cur.execute("UPDATE task SET reminder = NULL WHERE reminder = '' OR lower(reminder) = 'none'")
    cur.execute("UPDATE task SET reminder_sent = 0 WHERE reminder_sent IS NULL")
    print("[update] normalized reminder values")


def main(db_path=DB_PATH):
    conn = sqlite3.connect(str(db_path))
    cur = conn.cursor()
    try:
        cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='task'")
        if cur.fetchone() is None:
            print("[skip] task table does not exist yet; run `flask init-db` instead")
            return
        add_reminder_columns(cur)
        normalize_reminders(cur)
        conn.commit()
        print("Migration complete.")
    finally:
        conn.close()


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else DB_PATH)
