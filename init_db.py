"""Initialize the database schema and seed the journal catalog.

Creates the journals table and loads the default catalog (or a JSON, CSV or
Excel file passed with --seed-file). Run this before starting the API server.
"""

import argparse
import asyncio
import sys

from recommender.config import settings
from recommender.db import AsyncSessionMaker, engine
from recommender.models import Base
from recommender.pipelines.seeding import default_seed_records, load_seed_records, seed_catalog


async def init_database(*, drop: bool = False, seed_file: str | None = None, replace: bool = False):
    """Create tables and seed journals."""
    print(f"Initializing database: {settings.db.url.split('@')[-1]}")

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
            print("✓ Dropped existing tables")

        await conn.run_sync(Base.metadata.create_all)
        print("✓ Created tables")

    records = load_seed_records(seed_file) if seed_file else default_seed_records()
    async with AsyncSessionMaker() as session:
        inserted = await seed_catalog(session, records, replace=replace)
    print(f"✓ Seeded {inserted} journals ({len(records)} in source)")

    await engine.dispose()
    print("\n✅ Database initialization complete!")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--drop", action="store_true", help="drop and recreate tables first")
    parser.add_argument("--seed-file", help="JSON, CSV or Excel journal list")
    parser.add_argument("--replace", action="store_true", help="replace existing journals")
    return parser.parse_args(argv)


async def main():
    """Main entry point."""
    args = parse_args()
    try:
        await init_database(drop=args.drop, seed_file=args.seed_file, replace=args.replace)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
