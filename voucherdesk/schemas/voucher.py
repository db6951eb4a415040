"""
voucherdesk/schemas/voucher.py

Pydantic models for voucher requests and responses.
Field aliases follow the camelCase names used by the voucher form front end.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TEXT_FIELDS = (
    "date",
    "pay_to",
    "account_head",
    "account",
    "amount",
    "amount_rs",
    "checked_by",
    "approved_by",
    "receiver_signature",
)


class VoucherInput(BaseModel):
    """Voucher fields sent on submit and edit."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: str = Field(..., alias="filter", description="Company the voucher is issued for")
    date: str = Field(default="", description="Voucher date as entered")
    pay_to: str = Field(default="", alias="payTo")
    account_head: str = Field(default="", alias="accountHead")
    account: str = Field(default="", description="Towards")
    transaction_type: Literal["UPI", "Cash", "Account"] = Field(..., alias="transactionType")
    amount: str = Field(default="")
    amount_rs: str = Field(default="", alias="amountRs", description="Amount in words")
    checked_by: str = Field(default="", alias="checkedBy")
    approved_by: str = Field(default="", alias="approvedBy")
    receiver_signature: str = Field(default="", alias="receiverSignature")

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Form posts send strings; JSON clients may send numbers or nulls."""
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("company", mode="before")
    @classmethod
    def strip_company(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_fields(self) -> Dict[str, str]:
        """Voucher fields keyed by their stored names (company excluded)."""
        return self.model_dump(exclude={"company"})


class VoucherOut(BaseModel):
    """Voucher as returned by the listing endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    company: str
    voucher_no: int = Field(..., alias="voucherNo")
    date: str = ""
    pay_to: str = Field(default="", alias="payTo")
    account_head: str = Field(default="", alias="accountHead")
    account: str = ""
    transaction_type: Optional[str] = Field(default=None, alias="transactionType")
    amount: str = ""
    amount_rs: str = Field(default="", alias="amountRs")
    checked_by: str = Field(default="", alias="checkedBy")
    approved_by: str = Field(default="", alias="approvedBy")
    receiver_signature: str = Field(default="", alias="receiverSignature")
    pdf_link: Optional[str] = Field(default=None, alias="pdfLink")
    pdf_file_id: Optional[str] = Field(default=None, alias="pdfFileId")
    spreadsheet_id: Optional[str] = Field(default=None, alias="spreadsheetId")
    folder_id: Optional[str] = Field(default=None, alias="folderId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "VoucherOut":
        data = {k: v for k, v in doc.items() if k != "_id" and v is not None}
        data["id"] = str(doc["_id"])
        return cls.model_validate(data)


class VoucherMutationResponse(BaseModel):
    """Result of a submit or edit."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    voucher_no: int = Field(..., alias="voucherNo")
    sheet_url: str = Field(..., alias="sheetURL")
    pdf_link: Optional[str] = Field(default=None, alias="pdfLink")
    pdf_file_id: Optional[str] = Field(default=None, alias="pdfFileId")


class NextNumberResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    voucher_no: int = Field(..., alias="voucherNo")

