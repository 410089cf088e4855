"""
campbook/db/indexes.py

Purpose: Database index management

- Unique indexes back the uniqueness rules (user email/uid, campground name)
- Lookup indexes for per-user and per-campground booking queries
"""

from pymongo import ASCENDING, DESCENDING

from campbook.db.mongo import (
    get_users_collection,
    get_campgrounds_collection,
    get_bookings_collection
)
from campbook.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        campgrounds = get_campgrounds_collection()
        bookings = get_bookings_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("firebase_uid", unique=True, name="firebase_uid_unique")
        logger.debug("Created unique index on users.firebase_uid")

        await users.create_index("email", unique=True, sparse=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        # ==============================================
        # CAMPGROUNDS COLLECTION INDEXES
        # ==============================================

        await campgrounds.create_index("name", unique=True, name="name_unique")
        logger.debug("Created unique index on campgrounds.name")

        # ==============================================
        # BOOKINGS COLLECTION INDEXES
        # ==============================================

        await bookings.create_index(
            [("user", ASCENDING), ("created_at", DESCENDING)],
            name="user_bookings_idx"
        )
        logger.debug("Created compound index on bookings.user + created_at")

        await bookings.create_index("campground", name="campground_idx")
        logger.debug("Created index on bookings.campground")

        logger.info("All database indexes created successfully")

        user_indexes = await users.index_information()
        campground_indexes = await campgrounds.index_information()
        booking_indexes = await bookings.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Campgrounds={len(campground_indexes)}, "
            f"Bookings={len(booking_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
