"""
voucherdesk/services/voucher_repository.py

Purpose: Voucher record store

- Create, read, update and delete voucher documents
- Ownership is part of every lookup
- Listing with company/date filters and amount or number ordering
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from voucherdesk.db.mongo import get_vouchers_collection
from voucherdesk.core.logging import get_logger
from voucherdesk.utils.constants import SORT_HIGH_TO_LOW, SORT_LOW_TO_HIGH
from voucherdesk.utils.validation_utils import parse_amount

logger = get_logger(__name__)


def _object_id(record_id: str) -> Optional[ObjectId]:
    if not record_id or not ObjectId.is_valid(record_id):
        return None
    return ObjectId(record_id)


def build_voucher_document(
    email: str,
    company: str,
    voucher_no: int,
    fields: Dict[str, Any],
    pdf_link: Optional[str],
    pdf_file_id: Optional[str],
    spreadsheet_id: str,
    folder_id: str,
) -> Dict[str, Any]:
    """
    Assembles a new voucher document from the submitted fields and the
    ids of its external artifacts.
    """
    now = datetime.utcnow()
    return {
        "email": email,
        "company": company,
        "voucher_no": voucher_no,
        **fields,
        "amount_value": parse_amount(fields.get("amount")),
        "pdf_link": pdf_link,
        "pdf_file_id": pdf_file_id,
        "spreadsheet_id": spreadsheet_id,
        "folder_id": folder_id,
        "created_at": now,
        "updated_at": now,
    }


async def insert_voucher(document: Dict[str, Any]) -> str:
    vouchers = get_vouchers_collection()
    result = await vouchers.insert_one(document)
    logger.info(f"Voucher saved: {document['company']} #{document['voucher_no']} for {document['email']}")
    return str(result.inserted_id)


async def get_voucher_by_id(record_id: str, email: str) -> Optional[Dict[str, Any]]:
    """
    Retrieves a voucher owned by `email`.

    Malformed ids are treated as unknown.
    """
    oid = _object_id(record_id)
    if oid is None:
        return None

    vouchers = get_vouchers_collection()
    return await vouchers.find_one({"_id": oid, "email": email})


async def get_voucher_by_number(
    voucher_no: int,
    email: str,
    company: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    query: Dict[str, Any] = {"voucher_no": voucher_no, "email": email}
    if company:
        query["company"] = company

    vouchers = get_vouchers_collection()
    return await vouchers.find_one(query)


async def find_any_voucher(email: str, company: str) -> Optional[Dict[str, Any]]:
    """Any voucher of (email, company); used to recover workspace ids."""
    vouchers = get_vouchers_collection()
    return await vouchers.find_one(
        {"email": email, "company": company},
        projection={"spreadsheet_id": 1, "folder_id": 1},
    )


async def get_highest_voucher_no(email: str, company: str) -> int:
    """Highest stored voucher number for (email, company), 0 if none."""
    vouchers = get_vouchers_collection()
    doc = await vouchers.find_one(
        {"email": email, "company": company},
        projection={"voucher_no": 1},
        sort=[("voucher_no", DESCENDING)],
    )
    return int(doc["voucher_no"]) if doc else 0


async def update_voucher(
    record_id: str,
    email: str,
    fields: Dict[str, Any],
    pdf_link: Optional[str],
    pdf_file_id: Optional[str],
) -> bool:
    """
    Replaces the editable fields of a voucher.

    Returns:
        True if a matching voucher was found
    """
    oid = _object_id(record_id)
    if oid is None:
        return False

    vouchers = get_vouchers_collection()
    result = await vouchers.update_one(
        {"_id": oid, "email": email},
        {
            "$set": {
                **fields,
                "amount_value": parse_amount(fields.get("amount")),
                "pdf_link": pdf_link,
                "pdf_file_id": pdf_file_id,
                "updated_at": datetime.utcnow(),
            }
        }
    )
    return result.matched_count > 0


async def delete_voucher(record_id: Any, email: str) -> bool:
    oid = record_id if isinstance(record_id, ObjectId) else _object_id(record_id)
    if oid is None:
        return False

    vouchers = get_vouchers_collection()
    result = await vouchers.delete_one({"_id": oid, "email": email})
    return result.deleted_count > 0


def _sort_spec(sort: Optional[str]) -> List[tuple]:
    # Amount ordering is numeric on amount_value; ties fall back to voucher number.
    if sort == SORT_LOW_TO_HIGH:
        return [("amount_value", ASCENDING), ("voucher_no", ASCENDING)]
    if sort == SORT_HIGH_TO_LOW:
        return [("amount_value", DESCENDING), ("voucher_no", ASCENDING)]
    return [("voucher_no", ASCENDING)]


async def list_vouchers(
    email: str,
    company: Optional[str] = None,
    date: Optional[str] = None,
    sort: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Lists a user's vouchers.

    Args:
        email: Owner (mandatory filter)
        company: Optional company filter
        date: Optional exact date filter
        sort: "lowToHigh" / "highToLow" by amount, otherwise by voucher number

    Returns:
        Voucher documents in the requested order
    """
    query: Dict[str, Any] = {"email": email}
    if company:
        query["company"] = company
    if date:
        query["date"] = date

    vouchers = get_vouchers_collection()
    cursor = vouchers.find(query).sort(_sort_spec(sort))
    return await cursor.to_list(length=None)
