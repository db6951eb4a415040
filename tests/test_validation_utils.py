import pytest

from voucherdesk.utils.validation_utils import is_valid_company, parse_amount, parse_bearer_token


@pytest.mark.parametrize("company", ["Contentstack", "Surfboard", "RawEngineering"])
def test_known_companies(company):
    assert is_valid_company(company)


@pytest.mark.parametrize("company", [None, "", "contentstack", "Acme"])
def test_unknown_companies(company):
    assert not is_valid_company(company)


@pytest.mark.parametrize("text, value", [
    ("500", 500.0),
    ("1,250.50", 1250.5),
    ("Rs. 1,250.50", 1250.5),
    ("₹ 75", 75.0),
    ("INR 10", 10.0),
    ("-20", -20.0),
])
def test_parse_amount(text, value):
    assert parse_amount(text) == value


@pytest.mark.parametrize("text", [None, "", "five hundred", "Rs."])
def test_parse_amount_rejects_non_numbers(text):
    assert parse_amount(text) is None


def test_parse_bearer_token():
    assert parse_bearer_token("Bearer abc") == "abc"
    assert parse_bearer_token("bearer  abc ") == "abc"
    assert parse_bearer_token("Basic abc") is None
    assert parse_bearer_token("Bearer ") is None
    assert parse_bearer_token(None) is None


@pytest.mark.parametrize("text", ["nan", "NaN", "inf", "-inf", "Infinity"])
def test_parse_amount_rejects_non_finite(text):
    assert parse_amount(text) is None
