#!/usr/bin/env python3
"""
Apply the EcoTrack schema migration.

Runs infra/001_ecotrack_schema.sql against DATABASE_URL. The migration is
idempotent (IF NOT EXISTS everywhere), so re-running it is harmless.
"""

import asyncio
from pathlib import Path

from services.db_service import close_db_pool, execute, fetch, init_db_pool
from app.core.logging import configure_logging, get_logger

configure_logging(service_name="script")
logger = get_logger()

REPO_ROOT = Path(__file__).resolve().parents[1]
SCHEMA_FILE = REPO_ROOT / "infra" / "001_ecotrack_schema.sql"
EXPECTED_TABLES = ("users", "activities", "emission_factors", "badges")


async def apply_migration() -> bool:
    print("\n=== Applying EcoTrack Schema ===\n")

    print("1. Initializing database connection...")
    await init_db_pool()
    print("   ✓ Database connected\n")

    if not SCHEMA_FILE.exists():
        print(f"   ✗ SQL file not found: {SCHEMA_FILE}")
        return False

    print("2. Reading SQL migration file...")
    sql_content = SCHEMA_FILE.read_text(encoding="utf-8")
    print(f"   ✓ Read {len(sql_content)} bytes from {SCHEMA_FILE.name}\n")

    print("3. Applying migration...")
    try:
        await execute(sql_content)
    except Exception as e:
        print(f"   ✗ Migration failed: {e}")
        logger.exception("migration_failed", error=str(e))
        return False
    print("   ✓ Migration applied successfully\n")

    print("4. Verifying tables...")
    rows = await fetch(
        """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = 'public' AND table_name = ANY($1::text[])
        """,
        list(EXPECTED_TABLES),
    )
    found = {row["table_name"] for row in rows}
    for table in EXPECTED_TABLES:
        marker = "✓" if table in found else "⚠"
        print(f"   {marker} {table}")

    print("\n=== Migration Complete ===\n")
    return found.issuperset(EXPECTED_TABLES)


async def main() -> int:
    try:
        ok = await apply_migration()
    finally:
        await close_db_pool()
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
