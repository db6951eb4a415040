"""
voucherdesk/api/vouchers.py

Purpose: Voucher endpoints

- Next voucher number preview
- Listing with filters and sorting
- Submit, edit and delete

Routes stay thin: the company is checked before any identity or Google call,
then work is delegated to voucher_service.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, Request
from pydantic import ValidationError as PydanticValidationError

from voucherdesk.api.auth import authenticate
from voucherdesk.core.exceptions import ValidationError
from voucherdesk.core.logging import get_logger
from voucherdesk.schemas.response import MessageResponse
from voucherdesk.schemas.voucher import (
    NextNumberResponse,
    VoucherInput,
    VoucherMutationResponse,
    VoucherOut,
)
from voucherdesk.services import voucher_service

logger = get_logger(__name__)
router = APIRouter()


async def read_voucher_payload(request: Request) -> Dict[str, Any]:
    """
    Reads a voucher body sent either as JSON or as a (multipart) form.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError
            raise ValidationError("Request body is not valid JSON")
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be an object")
        return payload

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def parse_voucher(payload: Dict[str, Any]) -> VoucherInput:
    voucher_service.ensure_valid_company(payload.get("filter", payload.get("company")))
    try:
        return VoucherInput.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Input validation failed",
            details=json.loads(e.json(include_url=False))
        )


@router.get("/get-voucher-no", response_model=NextNumberResponse, response_model_by_alias=True)
async def get_voucher_no(
    request: Request,
    filter: Optional[str] = Query(None, description="Company"),
):
    """
    Number the next voucher for this company will receive.
    """
    voucher_service.ensure_valid_company(filter)
    ctx = await authenticate(request)
    voucher_no = await voucher_service.get_next_number(ctx.identity.email, filter)
    return NextNumberResponse(voucher_no=voucher_no)


@router.get("/vouchers")
async def list_vouchers(
    request: Request,
    company: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="lowToHigh | highToLow; default by voucher number"),
):
    """
    Lists the caller's vouchers.
    """
    ctx = await authenticate(request)
    documents = await voucher_service.list_vouchers(ctx.identity.email, company=company, date=date, sort=sort)
    return [
        VoucherOut.from_document(doc).model_dump(mode="json", by_alias=True)
        for doc in documents
    ]


@router.post("/submit", response_model=VoucherMutationResponse, response_model_by_alias=True)
async def submit_voucher(request: Request):
    """
    Creates a voucher: PDF in Drive, row in the company sheet, record in MongoDB.
    """
    voucher = parse_voucher(await read_voucher_payload(request))
    ctx = await authenticate(request)
    result = await voucher_service.submit_voucher(ctx.identity.email, ctx.access_token, voucher)
    return VoucherMutationResponse(**result)


@router.put("/edit-voucher/{voucher_id}", response_model=VoucherMutationResponse, response_model_by_alias=True)
async def edit_voucher(voucher_id: str, request: Request):
    """
    Updates a voucher and regenerates its PDF and sheet row.
    """
    voucher = parse_voucher(await read_voucher_payload(request))
    ctx = await authenticate(request)
    result = await voucher_service.edit_voucher(voucher_id, ctx.identity.email, ctx.access_token, voucher)
    return VoucherMutationResponse(**result)


@router.delete("/vouchers/{voucher_no}", response_model=MessageResponse)
async def delete_voucher(
    voucher_no: int,
    request: Request,
    company: Optional[str] = Query(None, description="Restrict to one company"),
):
    """
    Deletes a voucher by number.
    """
    ctx = await authenticate(request)
    result = await voucher_service.delete_voucher(voucher_no, ctx.identity.email, ctx.access_token, company=company)
    return MessageResponse(**result)
