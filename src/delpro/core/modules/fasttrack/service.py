import re
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from delpro.core.core import Service
from delpro.core.modules.fasttrack.allocator import ShortCodeAllocator, allocate_docket_number, docket_prefix, parse_fts_type
from delpro.core.modules.fasttrack.models import FastTrack, GeneratedIdentifiers
from delpro.core.modules.fasttrack.validators import validate_docket_number, validate_small_id, validate_title
from delpro.core.pagination import PaginationResult
from delpro.errors import DuplicateValueError, ExhaustionError, NotFoundError
from delpro.utils import now

logger = structlog.get_logger(__name__)

# Messages shown when a caller-supplied identifier is already taken, keyed by stored field
DUPLICATE_MESSAGES = {
    "small_id": "Small ID already exists",
    "docket_number": "Docket number already exists",
}


def duplicate_key_field(error: DuplicateKeyError) -> str:
    """Name of the unique field that rejected an insert."""
    details = error.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue") or {}
    for field in DUPLICATE_MESSAGES:
        if field in key_pattern:
            return field
    # Older servers only report the index name in the message
    for field in DUPLICATE_MESSAGES:
        if field in str(error):
            return field
    return "small_id"


class FastTrackService(Service):
    """Manages FastTrack docket records and allocates their identifiers."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("fast_track")

    async def on_start(self) -> None:
        """Create indexes. The unique ones are what settles concurrent allocations."""
        await self._collection.create_index([("small_id", 1)], unique=True)
        await self._collection.create_index([("docket_number", 1)], unique=True)
        await self._collection.create_index([("fts_type", 1)])
        await self._collection.create_index([("created_by", 1)])
        await self._collection.create_index([("is_published", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def generate_identifiers(self, fts_type_value: str) -> GeneratedIdentifiers:
        """Propose a short code and docket number for a new record of the given type.

        Nothing is written. Two requests running at the same time can get the
        same proposal; the second insert then fails with DuplicateValueError
        and the caller should ask again.
        """
        config = self.core.config
        fts_type = parse_fts_type(fts_type_value)
        year = now().year

        existing_codes = await self._collection.distinct("small_id")
        scope = docket_prefix(fts_type, year, config.org_tag)
        existing_dockets = await self._collection.distinct(
            "docket_number", {"docket_number": {"$regex": f"^{re.escape(scope)}"}}
        )

        allocator = ShortCodeAllocator(
            existing_codes, primary_prefix=config.short_code_prefix, max_attempts=config.short_code_attempts
        )
        small_id = await self._allocate_small_id(allocator)
        docket_number = allocate_docket_number(fts_type, year, existing_dockets, org=config.org_tag)

        logger.debug(
            "fasttrack_identifiers_generated",
            small_id=small_id,
            docket_number=docket_number,
            scanned_codes=len(existing_codes),
            scanned_dockets=len(existing_dockets),
        )
        return GeneratedIdentifiers(small_id=small_id, docket_number=docket_number, fts_type=fts_type)

    async def _allocate_small_id(self, allocator: ShortCodeAllocator) -> str:
        """Take the first candidate that is also free in the live collection."""
        for code in allocator.candidates():
            allocator.claim(code)
            if not await self.has_value("small_id", code):
                return code
            logger.debug("fasttrack_short_code_taken", small_id=code)
        raise ExhaustionError

    async def list_fasttracks(self, limit: int = 50, offset: int = 0) -> PaginationResult[FastTrack]:
        """Get paginated records, newest first."""
        total = await self._collection.count_documents({})
        cursor = self._collection.find({}).sort("created_at", -1).skip(offset).limit(limit)
        items = await FastTrack.list_cursor(cursor)
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def get_fasttrack(self, identifier: str) -> FastTrack:
        """Get a record by its short code or its docket number."""
        doc = await self._collection.find_one({"$or": [{"small_id": identifier}, {"docket_number": identifier}]})
        if doc is None:
            raise NotFoundError(f"FastTrack '{identifier}' not found")
        return FastTrack.model_validate(doc)

    async def has_value(self, field: str, value: str) -> bool:
        return await self._collection.find_one({field: value}, projection={"_id": 1}) is not None

    async def create_fasttrack(
        self, user_id: UUID, title: str, small_id: str, docket_number: str, fts_type_value: str
    ) -> FastTrack:
        """Create a record with caller-supplied identifiers.

        The identifiers usually come from `generate_identifiers`, but any
        well-formed values are accepted as long as neither is taken.
        """
        fts_type = parse_fts_type(fts_type_value)
        title = validate_title(title)
        small_id = validate_small_id(small_id)
        docket_number = docket_number.strip()
        validate_docket_number(docket_number, fts_type, self.core.config.org_tag)

        if await self.has_value("small_id", small_id):
            raise DuplicateValueError("small_id", DUPLICATE_MESSAGES["small_id"])
        if await self.has_value("docket_number", docket_number):
            raise DuplicateValueError("docket_number", DUPLICATE_MESSAGES["docket_number"])

        fast_track = FastTrack(
            small_id=small_id,
            docket_number=docket_number,
            fts_type=fts_type,
            title=title,
            created_by=user_id,
        )
        try:
            await self._collection.insert_one(fast_track.to_mongo())
        except DuplicateKeyError as e:
            # Another request inserted the same identifier after the checks above
            field = duplicate_key_field(e)
            logger.info("fasttrack_duplicate_on_insert", field=field, small_id=small_id, docket_number=docket_number)
            raise DuplicateValueError(field, DUPLICATE_MESSAGES[field]) from e

        logger.info("fasttrack_created", small_id=small_id, docket_number=docket_number, fts_type=fts_type)
        return fast_track

    async def update_title(self, identifier: str, title: str) -> FastTrack:
        """Change the title. Identifiers never change after creation."""
        fast_track = await self.get_fasttrack(identifier)
        title = validate_title(title)
        await self._collection.update_one({"_id": fast_track.id}, {"$set": {"title": title, "updated_at": now()}})
        return await self.get_fasttrack(fast_track.small_id)

    async def publish(self, identifier: str) -> FastTrack:
        fast_track = await self.get_fasttrack(identifier)
        timestamp = now()
        await self._collection.update_one(
            {"_id": fast_track.id},
            {"$set": {"is_published": True, "published_at": timestamp, "updated_at": timestamp}},
        )
        logger.info("fasttrack_published", small_id=fast_track.small_id)
        return await self.get_fasttrack(fast_track.small_id)

    async def delete_fasttrack(self, identifier: str) -> None:
        """Delete a record. Gaps it leaves in the sequences are not backfilled."""
        fast_track = await self.get_fasttrack(identifier)
        await self._collection.delete_one({"_id": fast_track.id})
        logger.info("fasttrack_deleted", small_id=fast_track.small_id, docket_number=fast_track.docket_number)
