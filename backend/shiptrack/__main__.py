"""
ShipTrack Backend — Command Line Entry Point
==============================================

Usage:
    python -m shiptrack serve       # run the API with uvicorn on settings.host:settings.port
    python -m shiptrack db-check    # connect to DATABASE_URL and print the server time

db-check exits with status 1 when the database is unreachable, so it can be
used as a container readiness probe or a deploy smoke test.
"""

import argparse
import asyncio
import logging
import sys

import uvicorn
from sqlalchemy import text

from shiptrack.config import settings

logger = logging.getLogger("shiptrack.cli")


async def check_database() -> bool:
    """Open one connection, run SELECT CURRENT_TIMESTAMP, dispose the engine."""
    from shiptrack.database import dispose_engine, engine

    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT CURRENT_TIMESTAMP"))
            now = result.scalar()
        logger.info("Database connected successfully. Server time: %s", now)
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", str(e))
        return False
    finally:
        await dispose_engine()


def serve() -> None:
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        raise SystemExit(str(e))

    uvicorn.run(
        "shiptrack.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,  # RequestLoggingMiddleware writes the access log
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="shiptrack", description="ShipTrack backend")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the HTTP API")
    sub.add_parser("db-check", help="Verify database connectivity")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if args.command == "db-check":
        return 0 if asyncio.run(check_database()) else 1

    serve()
    return 0


if __name__ == "__main__":
    sys.exit(main())
