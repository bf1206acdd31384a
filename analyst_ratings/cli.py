"""Command line entry points: run the API server or a one-off sync."""

from __future__ import annotations

import argparse
import asyncio
import sys

from sqlalchemy.exc import SQLAlchemyError

from analyst_ratings.config import get_settings
from analyst_ratings.core.logging import setup_logging
from analyst_ratings.db.database import Database
from analyst_ratings.providers.feed import FeedError, RatingsFeedClient
from analyst_ratings.services.items import ItemRepository, StorageError
from analyst_ratings.services.sync import ItemSynchronizer


async def _sync() -> int:
    settings = get_settings()
    database = Database(settings.database_url)
    try:
        await database.create_all()
        async with RatingsFeedClient.from_settings(settings) as feed:
            result = await ItemSynchronizer(ItemRepository(database), feed).run()
    except (FeedError, StorageError, SQLAlchemyError, OSError) as exc:
        print(f"Sync failed: {exc}", file=sys.stderr)
        return 1
    finally:
        await database.dispose()
    print(f"Synced {result.inserted} items from {result.pages} pages ({result.skipped} skipped)")
    return 0


def _serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("analyst_ratings.main:create_app", factory=True, host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyst ratings service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8081)

    subparsers.add_parser("sync", help="Replace local items with the upstream feed")

    args = parser.parse_args(argv)
    setup_logging(get_settings().log_level)
    if args.command == "serve":
        return _serve(args.host, args.port)
    return asyncio.run(_sync())


if __name__ == "__main__":
    sys.exit(main())
