"""
Blog Backend: Author Seeding Command
=====================================

What:  Creates one Author so posts have someone to reference.
How:   python -m blog_app.seed --name "Test User" --email test@example.com
       Builds a Database from settings, inserts through PostGateway, logs the
       result and disposes the engine. Exit status 1 when the author cannot
       be created (duplicate email, database failure).
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from blog_app.config import settings
from blog_app.database import Database
from blog_app.exceptions import BlogAppError
from blog_app.models import Author
from blog_app.services.post_gateway import PostGateway

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Test User"
DEFAULT_EMAIL = "test@example.com"


async def seed_author(database: Database, name: str, email: str) -> Author:
    """Insert one author through the gateway and return it."""
    async with database.session() as session:
        return await PostGateway(session).create_author(name=name, email=email)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a blog author")
    parser.add_argument("--name", default=DEFAULT_NAME, help="Author display name")
    parser.add_argument("--email", default=DEFAULT_EMAIL, help="Author email (must be unique)")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (SQLite/dev only; use Alembic otherwise)",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, database: Database) -> int:
    try:
        if args.create_tables:
            await database.create_all()
        author = await seed_author(database, args.name, args.email)
        logger.info("Created author id=%s name=%s email=%s", author.id, author.name, author.email)
        return 0
    except BlogAppError as e:
        logger.error("Could not create author: %s", e.message)
        return 1
    finally:
        await database.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)
    return asyncio.run(run(args, Database.from_settings(settings)))


if __name__ == "__main__":
    sys.exit(main())
