import asyncio

import pytest

from voucherdesk.services import voucher_repository

OWNER = "a@example.com"


def store(voucher_no, amount, company="Contentstack", owner=OWNER, date="2024-01-01"):
    document = voucher_repository.build_voucher_document(
        owner, company, voucher_no, {"amount": amount, "date": date, "pay_to": f"Payee {voucher_no}"},
        pdf_link=f"https://drive.example.com/{voucher_no}", pdf_file_id=f"file-{voucher_no}",
        spreadsheet_id="sheet-1", folder_id="folder-1",
    )
    return asyncio.run(voucher_repository.insert_voucher(document))


def listing(**kwargs):
    return asyncio.run(voucher_repository.list_vouchers(OWNER, **kwargs))


@pytest.fixture
def populated(db):
    store(1, "1,000")
    store(2, "90")
    store(3, "Rs. 250.50", date="2024-02-01")
    store(4, "n/a")
    store(1, "5", company="Surfboard")
    store(1, "999999", owner="b@example.com")
    return db


def test_amount_value_is_numeric(db):
    store(1, "Rs. 1,250.50")
    [voucher] = listing()
    assert voucher["amount"] == "Rs. 1,250.50"
    assert voucher["amount_value"] == 1250.5


def test_default_order_is_by_company_number(populated):
    assert [v["voucher_no"] for v in listing(company="Contentstack")] == [1, 2, 3, 4]


def test_low_to_high_sorts_numerically(populated):
    result = listing(company="Contentstack", sort="lowToHigh")
    # unparseable amounts sort first
    assert [v["amount"] for v in result] == ["n/a", "90", "Rs. 250.50", "1,000"]


def test_high_to_low_sorts_numerically(populated):
    result = listing(company="Contentstack", sort="highToLow")
    assert [v["amount"] for v in result] == ["1,000", "Rs. 250.50", "90", "n/a"]


def test_filters_by_company_and_date(populated):
    assert [v["company"] for v in listing(company="Surfboard")] == ["Surfboard"]
    assert [v["voucher_no"] for v in listing(date="2024-02-01")] == [3]


def test_listing_is_owner_scoped(populated):
    assert all(v["email"] == OWNER for v in listing())
    assert len(listing()) == 5


def test_lookup_by_id_requires_owner(db):
    record_id = store(1, "10")

    assert asyncio.run(voucher_repository.get_voucher_by_id(record_id, OWNER))["voucher_no"] == 1
    assert asyncio.run(voucher_repository.get_voucher_by_id(record_id, "b@example.com")) is None
    assert asyncio.run(voucher_repository.get_voucher_by_id("bogus", OWNER)) is None


def test_update_replaces_fields(db):
    record_id = store(1, "10")

    updated = asyncio.run(voucher_repository.update_voucher(
        record_id, OWNER, {"amount": "20", "pay_to": "Someone"}, pdf_link="new", pdf_file_id="file-new",
    ))

    assert updated is True
    doc = asyncio.run(voucher_repository.get_voucher_by_id(record_id, OWNER))
    assert doc["amount_value"] == 20.0
    assert doc["pay_to"] == "Someone"
    assert doc["pdf_file_id"] == "file-new"


def test_update_of_foreign_voucher_matches_nothing(db):
    record_id = store(1, "10")
    assert asyncio.run(voucher_repository.update_voucher(
        record_id, "b@example.com", {"amount": "20"}, pdf_link=None, pdf_file_id=None,
    )) is False


def test_highest_voucher_number(populated):
    assert asyncio.run(voucher_repository.get_highest_voucher_no(OWNER, "Contentstack")) == 4
    assert asyncio.run(voucher_repository.get_highest_voucher_no(OWNER, "RawEngineering")) == 0
