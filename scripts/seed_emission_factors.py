#!/usr/bin/env python3
"""
Seed the emission_factors table from the built-in fallback factors.

Existing rows are overwritten unless --keep-existing is given. Changing a
factor only affects activities recorded afterwards; stored emission
amounts are never recomputed.
"""

import argparse
import asyncio

from app.core.emission_config import FALLBACK_EMISSION_FACTORS
from app.core.logging import configure_logging, get_logger
from services.db_service import close_db_pool, init_db_pool, run_in_transaction, execute_with_conn

configure_logging(service_name="script")
logger = get_logger()

UPSERT_SQL = """
    INSERT INTO emission_factors (type, factor)
    VALUES ($1, $2)
    ON CONFLICT (type) DO UPDATE SET factor = EXCLUDED.factor
"""

INSERT_MISSING_SQL = """
    INSERT INTO emission_factors (type, factor)
    VALUES ($1, $2)
    ON CONFLICT (type) DO NOTHING
"""


async def seed(keep_existing: bool) -> int:
    await init_db_pool()
    sql = INSERT_MISSING_SQL if keep_existing else UPSERT_SQL
    async with run_in_transaction() as conn:
        for activity_type, factor in FALLBACK_EMISSION_FACTORS.items():
            await execute_with_conn(conn, sql, activity_type, factor)
    logger.info(
        "emission_factors_seeded",
        count=len(FALLBACK_EMISSION_FACTORS),
        keep_existing=keep_existing,
    )
    return len(FALLBACK_EMISSION_FACTORS)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed emission_factors from the built-in table")
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Only insert types that have no row yet",
    )
    args = parser.parse_args()

    try:
        count = await seed(args.keep_existing)
    finally:
        await close_db_pool()
    print(f"✓ Seeded {count} emission factors")


if __name__ == "__main__":
    asyncio.run(main())
