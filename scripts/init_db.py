"""
Database initialization script

Creates collections' indexes and, optionally, promotes users to admin
(registration always creates plain users):

    python scripts/init_db.py
    python scripts/init_db.py --promote-admin jane@example.com
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from campbook.core.logging import setup_logging, get_logger
from campbook.db.indexes import create_indexes
from campbook.db.mongo import connect_to_mongo, close_mongo_connection, get_users_collection
from campbook.schemas.user import UserRole
from campbook.utils.validation_utils import normalize_email

setup_logging()
logger = get_logger("scripts.init_db")


async def promote_admin(email: str) -> bool:
    """Sets role=admin on the local user with this email."""
    users = get_users_collection()
    result = await users.update_one(
        {"email": normalize_email(email)},
        {"$set": {"role": UserRole.ADMIN.value}}
    )
    if result.matched_count == 0:
        logger.error(f"No user registered with email {email}")
        return False

    logger.info(f"{email} is now an admin")
    return True


async def main(promote: list) -> int:
    await connect_to_mongo()
    try:
        await create_indexes()

        ok = True
        for email in promote:
            ok = await promote_admin(email) and ok

        users = get_users_collection()
        logger.info(f"Users in database: {await users.count_documents({})}")
        return 0 if ok else 1
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the CampBook database")
    parser.add_argument(
        "--promote-admin",
        metavar="EMAIL",
        action="append",
        default=[],
        help="Give the user with this email the admin role (repeatable)"
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.promote_admin)))
