"""Apply a SQL file from backend/migrations against the configured database.

Usage: python scripts/apply_migration.py 0001_familyhub_init.sql
"""

import asyncio
import os
import sys

BACKEND_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
MIGRATIONS_DIR = os.path.join(BACKEND_ROOT, "migrations")

if BACKEND_ROOT not in sys.path:
    sys.path.append(BACKEND_ROOT)

from familyhub.infra.postgres import close_pool, get_pool  # noqa: E402


async def apply_migration(filename: str) -> bool:
    migration_path = os.path.join(MIGRATIONS_DIR, filename)
    if not os.path.exists(migration_path):
        print(f"Migration file not found: {migration_path}")
        return False

    print(f"Applying migration: {filename}")
    with open(migration_path, "r", encoding="utf-8") as f:
        sql = f.read()

    pool = await get_pool()
    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql)
    finally:
        await close_pool()
    print("Migration applied successfully.")
    return True


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python apply_migration.py <migration_filename>")
        sys.exit(1)

    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    sys.exit(0 if asyncio.run(apply_migration(sys.argv[1])) else 1)
