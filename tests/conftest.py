"""
Shared fixtures: in-memory stand-ins for MongoDB collections and the
Google Sheets/Drive clients, so flows run without external services.
"""

import copy
import itertools
import re
from pathlib import Path
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo import ReturnDocument

from voucherdesk.core.config import settings
from voucherdesk.core.exceptions import AuthenticationError
from voucherdesk.core.logging import setup_logging
from voucherdesk.db import mongo
from voucherdesk.schemas.auth import UserIdentity
from voucherdesk.services import drive_service, identity_service, sheets_service
from voucherdesk.services.drive_service import UploadedFile
from voucherdesk.services.google_client import GoogleWorkspaceError


# ============================================================
# LOGGING
# ============================================================

@pytest.fixture(autouse=True)
def app_logging():
    """Runs every test under the service's own logging configuration."""
    return setup_logging()


# ============================================================
# MONGODB
# ============================================================

def _matches(doc, query):
    for key, cond in (query or {}).items():
        value = doc.get(key)
        if isinstance(cond, dict) and any(k.startswith("$") for k in cond):
            for op, operand in cond.items():
                if op == "$gt" and not (value is not None and value > operand):
                    return False
        elif value != cond:
            return False
    return True


def _sorted(docs, spec):
    docs = list(docs)
    for key, direction in reversed(spec):
        # Mongo orders null before numbers
        docs.sort(key=lambda d: (d.get(key) is not None, d.get(key)), reverse=direction < 0)
    return docs


def _apply_update(doc, update):
    for op, changes in update.items():
        for key, value in changes.items():
            if op == "$set":
                doc[key] = value
            elif op == "$inc":
                doc[key] = doc.get(key, 0) + value
            elif op == "$max":
                doc[key] = value if key not in doc else max(doc[key], value)
            else:
                raise NotImplementedError(op)


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, spec):
        self._docs = _sorted(self._docs, spec)
        return self

    async def to_list(self, length=None):
        docs = [copy.deepcopy(d) for d in self._docs]
        return docs if length is None else docs[:length]


class FakeCollection:
    def __init__(self):
        self.docs = []

    def _find(self, query):
        return [d for d in self.docs if _matches(d, query)]

    async def find_one(self, query=None, projection=None, sort=None):
        docs = self._find(query)
        if sort:
            docs = _sorted(docs, sort)
        return copy.deepcopy(docs[0]) if docs else None

    def find(self, query=None):
        return FakeCursor(self._find(query))

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        docs = self._find(query)
        if not docs:
            return SimpleNamespace(matched_count=0, modified_count=0)
        _apply_update(docs[0], update)
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def delete_one(self, query):
        docs = self._find(query)
        if not docs:
            return SimpleNamespace(deleted_count=0)
        self.docs.remove(docs[0])
        return SimpleNamespace(deleted_count=1)

    async def find_one_and_update(self, query, update, upsert=False, return_document=ReturnDocument.BEFORE):
        docs = self._find(query)
        if docs:
            doc = docs[0]
            before = copy.deepcopy(doc)
        elif upsert:
            doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
            self.docs.append(doc)
            before = None
        else:
            return None
        _apply_update(doc, update)
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def db(monkeypatch):
    database = FakeDatabase()
    monkeypatch.setattr(mongo, "_database", database)
    return database


# ============================================================
# GOOGLE SHEETS / DRIVE
# ============================================================

_ROW_IN_RANGE = re.compile(r"!A(\d+)")


class FakeSheets:
    def __init__(self):
        self.spreadsheets = {}
        self.calls = []
        self.fail_on = set()
        self._ids = itertools.count(1)

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise GoogleWorkspaceError(f"{name} failed: backend error", status=500)

    def rows(self, spreadsheet_id):
        return self.spreadsheets[spreadsheet_id]["rows"]

    async def create_spreadsheet(self, title, sheet_title, row_count, column_count):
        self._record("create_spreadsheet", title, sheet_title)
        spreadsheet_id = f"sheet-{next(self._ids)}"
        self.spreadsheets[spreadsheet_id] = {"title": title, "sheet_title": sheet_title, "rows": []}
        return spreadsheet_id

    async def read_range(self, spreadsheet_id, a1_range):
        self._record("read_range", spreadsheet_id, a1_range)
        start = int(_ROW_IN_RANGE.search(a1_range).group(1))
        rows = [list(r) for r in self.rows(spreadsheet_id)[start - 1:]]
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def write_range(self, spreadsheet_id, a1_range, rows):
        self._record("write_range", spreadsheet_id, a1_range)
        start = int(_ROW_IN_RANGE.search(a1_range).group(1))
        sheet = self.rows(spreadsheet_id)
        for offset, row in enumerate(rows):
            index = start - 1 + offset
            while len(sheet) <= index:
                sheet.append([])
            sheet[index] = list(row)

    async def append_rows(self, spreadsheet_id, a1_range, rows):
        self._record("append_rows", spreadsheet_id, a1_range)
        self.rows(spreadsheet_id).extend(list(r) for r in rows)

    async def clear_range(self, spreadsheet_id, a1_range):
        self._record("clear_range", spreadsheet_id, a1_range)
        index = int(_ROW_IN_RANGE.search(a1_range).group(1)) - 1
        self.rows(spreadsheet_id)[index] = []


class FakeDrive:
    def __init__(self):
        self.folders = {}
        self.files = {}
        self.calls = []
        self.fail_on = set()
        self._ids = itertools.count(1)

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise GoogleWorkspaceError(f"{name} failed: backend error", status=500)

    async def create_folder(self, name):
        self._record("create_folder", name)
        folder_id = f"folder-{next(self._ids)}"
        self.folders[folder_id] = name
        return folder_id

    async def upload_pdf(self, name, parent_id, path):
        self._record("upload_pdf", name, parent_id)
        file_id = f"file-{next(self._ids)}"
        self.files[file_id] = {"name": name, "parent": parent_id, "content": Path(path).read_bytes()}
        return UploadedFile(file_id=file_id, web_view_link=f"https://drive.example.com/{file_id}/view")

    async def delete_file(self, file_id):
        self._record("delete_file", file_id)
        if file_id not in self.files:
            raise GoogleWorkspaceError("File not found", status=404)
        del self.files[file_id]


@pytest.fixture
def google(monkeypatch):
    fakes = SimpleNamespace(sheets=FakeSheets(), drive=FakeDrive(), tokens=[])

    def get_sheets_client(token):
        fakes.tokens.append(token)
        return fakes.sheets

    def get_drive_client(token):
        fakes.tokens.append(token)
        return fakes.drive

    monkeypatch.setattr(sheets_service, "get_sheets_client", get_sheets_client)
    monkeypatch.setattr(drive_service, "get_drive_client", get_drive_client)
    return fakes


# ============================================================
# RENDERING / IDENTITY
# ============================================================

@pytest.fixture
def render_dir(tmp_path, monkeypatch):
    path = tmp_path / "renders"
    monkeypatch.setattr(settings, "RENDER_DIR", str(path))
    monkeypatch.setattr(settings, "LOGO_DIR", str(tmp_path / "logos"))
    return path


KNOWN_TOKENS = {
    "token-a": UserIdentity(email="a@example.com", name="Asha", picture="https://img.example.com/a.png"),
    "token-a2": UserIdentity(email="a@example.com", name="Asha", picture="https://img.example.com/a.png"),
    "token-b": UserIdentity(email="b@example.com", name="Bo", picture=None),
}


@pytest.fixture
def userinfo(monkeypatch):
    """Replaces the Google userinfo exchange; records every token looked up."""
    calls = []

    async def fake_fetch(access_token):
        calls.append(access_token)
        if access_token not in KNOWN_TOKENS:
            raise AuthenticationError("Invalid or expired access token")
        return KNOWN_TOKENS[access_token]

    monkeypatch.setattr(identity_service, "fetch_google_userinfo", fake_fetch)
    return calls


def voucher_payload(**overrides):
    payload = {
        "filter": "Contentstack",
        "date": "2024-01-01",
        "payTo": "Ravi Traders",
        "accountHead": "Office Supplies",
        "account": "Printer paper",
        "transactionType": "Cash",
        "amount": "500",
        "amountRs": "Five hundred only",
        "checkedBy": "Meera",
        "approvedBy": "Arjun",
        "receiverSignature": "Ravi",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return voucher_payload
