"""FastTrack docket records and the identifiers minted for them."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from delpro.core.db import MongoModel
from delpro.utils import now


class FtsType(StrEnum):
    """Fixed FastTrack categories; each one scopes its own docket sequence."""

    REPORT = "Report"
    PURCHASE = "Purchase"
    CORRESPONDENCE = "Correspondence"
    OTHER = "Other"


class FastTrack(MongoModel):
    """FastTrack docket record.

    Indexed on small_id - unique, docket_number - unique, fts_type, created_by,
    is_published, created_at.
    """

    small_id: str
    docket_number: str
    fts_type: FtsType = FtsType.REPORT  # Records created before categories existed are reports
    title: str
    created_by: UUID
    is_published: bool = False
    published_at: datetime | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class GeneratedIdentifiers(BaseModel):
    """Identifier pair proposed for a new FastTrack record (API representation)."""

    small_id: str = Field(..., description="Short code, unique across all records (e.g. DPL001)")
    docket_number: str = Field(..., description="Docket number scoped by type and year (e.g. Delpro/Report/2025/001)")
    fts_type: FtsType = Field(..., description="FastTrack type the docket number was allocated for")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FastTrackCreator(BaseModel):
    id: UUID
    name: str


class FastTrackView(BaseModel):
    """FastTrack record (API representation)."""

    small_id: str = Field(..., description="Short code")
    docket_number: str = Field(..., description="Docket number")
    fts_type: FtsType = Field(..., description="FastTrack type")
    title: str = Field(..., description="Title")
    is_published: bool = Field(..., description="Whether the record has been published")
    published_at: datetime | None = Field(None, description="When the record was published")
    created_by: FastTrackCreator | None = Field(None, description="Author, if the account still exists")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_domain(cls, fast_track: FastTrack, creator: FastTrackCreator | None) -> "FastTrackView":
        return cls(
            small_id=fast_track.small_id,
            docket_number=fast_track.docket_number,
            fts_type=fast_track.fts_type,
            title=fast_track.title,
            is_published=fast_track.is_published,
            published_at=fast_track.published_at,
            created_by=creator,
            created_at=fast_track.created_at,
            updated_at=fast_track.updated_at,
        )
