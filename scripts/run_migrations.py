#!/usr/bin/env python3
"""
Apply pending Chef Roulette database migrations.

Reads database/migrations/NNN_name.sql, skips versions already recorded in
the _migrations table and applies the rest in version order, one
transaction per file. Stops at the first failure.

Usage:
    DATABASE_URL=postgresql://... python scripts/run_migrations.py [--dry-run]
"""

import argparse
import os
import re
import sys
from pathlib import Path

import psycopg2

MIGRATIONS_DIR = Path(__file__).parent.parent / "database" / "migrations"
MIGRATION_PATTERN = re.compile(r"^(\d+)_(.+)\.sql$")


def find_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[tuple[str, str, Path]]:
    """(version, name, path) for every migration file, sorted by version."""
    if not migrations_dir.exists():
        print(f"Migrations directory not found: {migrations_dir}", file=sys.stderr)
        return []

    found = []
    for path in migrations_dir.glob("*.sql"):
        match = MIGRATION_PATTERN.match(path.name)
        if match:
            found.append((match.group(1), match.group(2), path))

    return sorted(found, key=lambda migration: int(migration[0]))


def applied_versions(conn) -> set[str]:
    """Create the bookkeeping table if needed and return recorded versions."""
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS public._migrations (
                version TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                applied_at TIMESTAMPTZ DEFAULT NOW()
            );
        """)
        cur.execute("SELECT version FROM public._migrations;")
        versions = {row[0] for row in cur.fetchall()}
    conn.commit()
    return versions


def apply(conn, version: str, name: str, path: Path) -> bool:
    print(f"Applying {version}_{name}...")
    try:
        with conn.cursor() as cur:
            cur.execute(path.read_text())
            cur.execute(
                "INSERT INTO public._migrations (version, name) VALUES (%s, %s);",
                (version, name),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        print(f"  Failed {version}_{name}: {e}", file=sys.stderr)
        return False

    print(f"  Applied {version}_{name}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Apply pending SQL migrations")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations without applying them")
    args = parser.parse_args()

    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        print("Error: DATABASE_URL environment variable not set", file=sys.stderr)
        return 1

    try:
        conn = psycopg2.connect(database_url)
    except psycopg2.Error as e:
        print(f"Error connecting to database: {e}", file=sys.stderr)
        return 1

    try:
        done = applied_versions(conn)
        pending = [m for m in find_migrations() if m[0] not in done]

        if not pending:
            print("No pending migrations")
            return 0

        print(f"{len(pending)} pending migration(s)")
        if args.dry_run:
            for version, name, _ in pending:
                print(f"  {version}_{name}")
            return 0

        for version, name, path in pending:
            if not apply(conn, version, name, path):
                print("Migration failed", file=sys.stderr)
                return 1
    finally:
        conn.close()

    print(f"Applied {len(pending)} migration(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
