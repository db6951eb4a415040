"""
voucherdesk/services/numbering_service.py

Purpose: Sequential voucher numbers per (email, company)

- Preview of the next number for the form
- Atomic allocation for submissions

Allocation goes through a counter document: it is first raised to the
highest stored voucher number, then incremented in a single atomic update,
so concurrent submissions never receive the same number.
"""

from pymongo import ReturnDocument

from voucherdesk.db.mongo import get_counters_collection
from voucherdesk.core.logging import get_logger
from voucherdesk.services import voucher_repository

logger = get_logger(__name__)


def counter_key(email: str, company: str) -> str:
    return f"{email}:{company}"


async def next_number(email: str, company: str) -> int:
    """
    Returns the number the next submission would receive, without reserving it.
    """
    highest = await voucher_repository.get_highest_voucher_no(email, company)
    counters = get_counters_collection()
    counter = await counters.find_one({"_id": counter_key(email, company)})
    last = counter.get("seq", 0) if counter else 0
    return max(highest, last) + 1


async def allocate_number(email: str, company: str) -> int:
    """
    Reserves the next voucher number for (email, company).

    Returns:
        The allocated number (1 for the first voucher)
    """
    key = counter_key(email, company)
    counters = get_counters_collection()

    highest = await voucher_repository.get_highest_voucher_no(email, company)
    await counters.find_one_and_update(
        {"_id": key},
        {"$max": {"seq": highest}},
        upsert=True,
    )
    counter = await counters.find_one_and_update(
        {"_id": key},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

    voucher_no = int(counter["seq"])
    logger.info(f"Generated voucherNo {voucher_no} for {email} and {company}")
    return voucher_no
