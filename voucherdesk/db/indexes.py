"""
voucherdesk/db/indexes.py

Purpose: Database index management

- Unique voucher numbering per (email, company)
- Listing indexes for the vouchers page
- TTL index for automatic session cleanup
"""

from pymongo import ASCENDING
from voucherdesk.db.mongo import (
    get_vouchers_collection,
    get_sessions_collection,
)
from voucherdesk.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        vouchers = get_vouchers_collection()
        sessions = get_sessions_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # VOUCHERS COLLECTION INDEXES
        # ==============================================

        # One voucher number per owner and company
        await vouchers.create_index(
            [("email", ASCENDING), ("company", ASCENDING), ("voucher_no", ASCENDING)],
            unique=True,
            name="voucher_number_unique"
        )
        logger.debug("Created unique index on vouchers.email + company + voucher_no")

        # Listing filtered by date
        await vouchers.create_index(
            [("email", ASCENDING), ("date", ASCENDING)],
            name="voucher_owner_date_idx"
        )
        logger.debug("Created index on vouchers.email + date")

        # Amount sorting
        await vouchers.create_index(
            [("email", ASCENDING), ("amount_value", ASCENDING)],
            name="voucher_owner_amount_idx"
        )
        logger.debug("Created index on vouchers.email + amount_value")

        # ==============================================
        # SESSIONS COLLECTION INDEXES
        # ==============================================

        await sessions.create_index("session_id", unique=True, name="session_id_unique")
        logger.debug("Created unique index on sessions.session_id")

        await sessions.create_index("email", name="session_email_idx")
        logger.debug("Created index on sessions.email")

        # TTL index to delete sessions once expires_at is reached
        await sessions.create_index(
            "expires_at",
            expireAfterSeconds=0,
            name="session_expiry_ttl_idx"
        )
        logger.debug("Created TTL index on sessions.expires_at")

        logger.info("All database indexes created successfully")

        voucher_indexes = await vouchers.index_information()
        session_indexes = await sessions.index_information()

        logger.info(
            f"Index summary: Vouchers={len(voucher_indexes)}, "
            f"Sessions={len(session_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from voucherdesk.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
