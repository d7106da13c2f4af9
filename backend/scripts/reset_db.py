"""
Notes API — Database Reset Script
===================================

What:  Deletes every note from the configured database.
How:   Builds a Database handle from settings (DATABASE_URL / .env) and
       calls NoteService.delete_all.
When:  Manually, to start from an empty store:

    cd backend && python scripts/reset_db.py
"""

import asyncio
import logging
import sys

from notes_api.config import get_settings
from notes_api.database import Database
from notes_api.main import setup_logging
from notes_api.services.note_service import note_service

logger = logging.getLogger("notes_api.reset_db")


async def reset_database() -> int:
    settings = get_settings()
    database = Database.from_settings(settings)
    try:
        await database.connect(create_schema=settings.db_create_schema)
        async with database.session() as session:
            return await note_service.delete_all(session)
    finally:
        await database.dispose()


def main() -> int:
    setup_logging(get_settings().log_level)
    try:
        deleted = asyncio.run(reset_database())
    except Exception:
        logger.error("Reset failed", exc_info=True)
        return 1
    logger.info("Database reset complete! Deleted %d notes", deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
