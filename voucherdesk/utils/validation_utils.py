"""
voucherdesk/utils/validation_utils.py

Purpose: Input validation

- Company registry checks
- Amount parsing for numeric sorting
- Bearer header parsing
"""

import math
import re
from typing import Optional

from voucherdesk.utils.constants import COMPANIES

_AMOUNT_NOISE = re.compile(r"[,\s₹$]|(?i:rs\.?|inr)")


def is_valid_company(company: Optional[str]) -> bool:
    """
    Checks whether the company belongs to the fixed registry.

    Args:
        company: Company name as sent by the client

    Returns:
        True if it is one of COMPANIES
    """
    return bool(company) and company in COMPANIES


def parse_amount(amount: Optional[str]) -> Optional[float]:
    """
    Parses an amount string into a number for sorting.

    Currency markers, thousands separators and whitespace are ignored.
    Example: "Rs. 1,250.50" -> 1250.5

    Args:
        amount: Amount as entered

    Returns:
        Float value, or None if the text is not a number
    """
    if amount is None:
        return None

    cleaned = _AMOUNT_NOISE.sub("", str(amount))
    if not cleaned:
        return None

    try:
        value = float(cleaned)
    except ValueError:
        return None

    # "nan" and "inf" parse as floats but cannot be ordered
    return value if math.isfinite(value) else None


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extracts the token from an `Authorization: Bearer <token>` header.

    Returns:
        The token, or None if the header is missing or malformed
    """
    if not authorization:
        return None

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None

    token = token.strip()
    return token or None
