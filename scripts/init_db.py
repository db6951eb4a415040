"""
Database initialization script

Run once to create collections and indexes:
    python scripts/init_db.py

Also reports vouchers whose number collides within (email, company), which
must be fixed before the unique index can be built on existing data.
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from voucherdesk.db.mongo import connect_to_mongo, close_mongo_connection, get_vouchers_collection
from voucherdesk.db.indexes import create_indexes

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def find_duplicate_numbers():
    """List (email, company, voucher_no) groups holding more than one voucher."""
    vouchers = get_vouchers_collection()
    pipeline = [
        {"$group": {
            "_id": {"email": "$email", "company": "$company", "voucher_no": "$voucher_no"},
            "count": {"$sum": 1},
        }},
        {"$match": {"count": {"$gt": 1}}},
    ]
    return await vouchers.aggregate(pipeline).to_list(length=None)


async def main():
    await connect_to_mongo()
    try:
        duplicates = await find_duplicate_numbers()
        if duplicates:
            for group in duplicates:
                key = group["_id"]
                logger.error(
                    f"Duplicate voucher number {key['voucher_no']} for "
                    f"{key['email']} / {key['company']} ({group['count']} records)"
                )
            logger.error("Resolve duplicates before creating the unique index")
            return

        await create_indexes()
        logger.info("Database initialized")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
