"""Tests for FastTrackService against an in-memory collection."""

import asyncio
import re
from types import SimpleNamespace
from uuid import uuid4

import pytest
from pymongo.errors import DuplicateKeyError

from delpro.core.modules.fasttrack.service import FastTrackService, duplicate_key_field
from delpro.errors import DuplicateValueError, InvalidCategoryError, NotFoundError
from delpro.utils import now

UNIQUE_FIELDS = ("small_id", "docket_number")


def matches(doc, query):
    if "$or" in query:
        return any(matches(doc, sub) for sub in query["$or"])
    for field, condition in query.items():
        value = doc.get(field)
        if isinstance(condition, dict) and "$regex" in condition:
            if value is None or not re.match(condition["$regex"], value):
                return False
        elif value != condition:
            return False
    return True


class FakeCollection:
    """Just enough of AsyncCollection for the FastTrack service."""

    def __init__(self, docs=None, hide_from_reads=False, late_docs=None):
        self.docs = list(docs or [])
        # Inserted after the distinct scan: visible to find_one only
        self.late_docs = list(late_docs or [])
        # Simulates a record inserted by a concurrent request after our reads
        self.hide_from_reads = hide_from_reads

    async def distinct(self, key, filter=None):
        return sorted({doc[key] for doc in self.docs if key in doc and matches(doc, filter or {})})

    async def find_one(self, query, projection=None):
        if self.hide_from_reads:
            return None
        return next((doc for doc in [*self.docs, *self.late_docs] if matches(doc, query)), None)

    async def insert_one(self, doc):
        for field in UNIQUE_FIELDS:
            if any(existing[field] == doc[field] for existing in self.docs):
                raise DuplicateKeyError(
                    f"E11000 duplicate key error collection: test.fast_track index: {field}_1",
                    11000,
                    {"keyPattern": {field: 1}, "keyValue": {field: doc[field]}},
                )
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])


def make_service(collection):
    database = SimpleNamespace(get_collection=lambda name: collection)
    service = FastTrackService(database)
    config = SimpleNamespace(org_tag="Delpro", short_code_prefix="DPL", short_code_attempts=20)
    service.set_core(SimpleNamespace(config=config))
    return service


def record(small_id, docket_number):
    return {"_id": uuid4(), "small_id": small_id, "docket_number": docket_number, "title": "t", "created_by": uuid4()}


@pytest.fixture
def year():
    return now().year


class TestGenerateIdentifiers:
    def test_empty_collection(self, year):
        result = asyncio.run(make_service(FakeCollection()).generate_identifiers("Report"))
        assert result.small_id == "DPL001"
        assert result.docket_number == f"Delpro/Report/{year}/001"

    def test_scans_current_year_only(self, year):
        collection = FakeCollection(
            [
                record("DPL001", f"Delpro/Report/{year - 1}/009"),
                record("DPL002", f"Delpro/Report/{year}/001"),
                record("DPL003", f"Delpro/Purchase/{year}/004"),
            ]
        )
        result = asyncio.run(make_service(collection).generate_identifiers("Report"))
        assert result.small_id == "DPL004"
        assert result.docket_number == f"Delpro/Report/{year}/002"

    def test_invalid_type(self):
        with pytest.raises(InvalidCategoryError):
            asyncio.run(make_service(FakeCollection()).generate_identifiers("Invoice"))

    def test_code_taken_after_scan_is_skipped(self, year):
        """Test that each candidate is checked against the live collection, not only the scan."""
        collection = FakeCollection(
            [record("DPL001", f"Delpro/Report/{year}/001")],
            late_docs=[record("DPL002", f"Delpro/Other/{year}/001"), record("DPL003", f"Delpro/Other/{year}/002")],
        )
        result = asyncio.run(make_service(collection).generate_identifiers("Report"))
        assert result.small_id == "DPL004"
        assert result.docket_number == f"Delpro/Report/{year}/002"

    def test_overflowed_dataset_never_returns_primary_code(self, year):
        existing = [record(f"DPL{n:03d}", f"Delpro/Report/{year}/{n:03d}") for n in range(1, 999)]
        collection = FakeCollection([*existing, record("QRS001", f"Delpro/Report/{year}/999")])
        result = asyncio.run(make_service(collection).generate_identifiers("Report"))
        assert not result.small_id.startswith("DPL")
        assert result.docket_number == f"Delpro/Report/{year}/1000"


class TestCreateFastTrack:
    def test_creates_record(self, year):
        collection = FakeCollection()
        fast_track = asyncio.run(
            make_service(collection).create_fasttrack(uuid4(), " Title ", "DPL001", f"Delpro/Report/{year}/001", "Report")
        )
        assert fast_track.title == "Title"
        assert collection.docs[0]["small_id"] == "DPL001"

    def test_existing_small_id_rejected(self):
        collection = FakeCollection([record("DPL001", "Delpro/Report/2025/001")])
        with pytest.raises(DuplicateValueError, match="Small ID already exists") as exc_info:
            asyncio.run(make_service(collection).create_fasttrack(uuid4(), "T", "DPL001", "Delpro/Report/2025/002", "Report"))
        assert exc_info.value.field == "small_id"

    def test_existing_docket_rejected(self):
        collection = FakeCollection([record("DPL001", "Delpro/Report/2025/001")])
        with pytest.raises(DuplicateValueError, match="Docket number already exists") as exc_info:
            asyncio.run(make_service(collection).create_fasttrack(uuid4(), "T", "DPL002", "Delpro/Report/2025/001", "Report"))
        assert exc_info.value.field == "docket_number"

    def test_concurrent_insert_reported_as_duplicate(self):
        """Test that a unique index violation on insert becomes DuplicateValueError."""
        collection = FakeCollection([record("DPL001", "Delpro/Report/2025/001")], hide_from_reads=True)
        with pytest.raises(DuplicateValueError) as exc_info:
            asyncio.run(make_service(collection).create_fasttrack(uuid4(), "T", "DPL002", "Delpro/Report/2025/001", "Report"))
        assert exc_info.value.field == "docket_number"
        assert len(collection.docs) == 1


class TestGetFastTrack:
    def test_found_by_either_identifier(self):
        collection = FakeCollection([record("DPL001", "Delpro/Report/2025/001")])
        service = make_service(collection)
        assert asyncio.run(service.get_fasttrack("DPL001")).docket_number == "Delpro/Report/2025/001"
        assert asyncio.run(service.get_fasttrack("Delpro/Report/2025/001")).small_id == "DPL001"

    def test_missing_record(self):
        with pytest.raises(NotFoundError):
            asyncio.run(make_service(FakeCollection()).get_fasttrack("DPL404"))


class TestDuplicateKeyField:
    def test_from_key_pattern(self):
        error = DuplicateKeyError("E11000", 11000, {"keyPattern": {"docket_number": 1}})
        assert duplicate_key_field(error) == "docket_number"

    def test_from_message(self):
        error = DuplicateKeyError("E11000 duplicate key error index: small_id_1", 11000, None)
        assert duplicate_key_field(error) == "small_id"
