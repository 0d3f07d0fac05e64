import re

from delpro.core.modules.fasttrack.allocator import ORG_TAG, DocketNumber, parse_docket_number
from delpro.core.modules.fasttrack.models import FtsType
from delpro.errors import ValidationError

SMALL_ID_RE = re.compile(r"^[A-Z0-9]{6}$")
MAX_TITLE_LENGTH = 200


def validate_title(title: str) -> str:
    """Return the trimmed title, raising ValidationError if empty or too long."""
    title = title.strip()
    if not 1 <= len(title) <= MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be between 1 and {MAX_TITLE_LENGTH} characters")
    return title


def validate_small_id(small_id: str) -> str:
    small_id = small_id.strip()
    if not SMALL_ID_RE.match(small_id):
        raise ValidationError("Small ID must be 6 characters long and contain only uppercase letters and numbers")
    return small_id


def validate_docket_number(docket_number: str, fts_type: FtsType, org: str = ORG_TAG) -> DocketNumber:
    """Check a caller-supplied docket number and that it belongs to the record's type.

    Raises:
        ValidationError: If the format is wrong or the type segment differs from fts_type
    """
    parsed = parse_docket_number(docket_number.strip(), org)
    if parsed is None:
        raise ValidationError(f"Docket number must be in format: {org}/<type>/YYYY/NNN")
    if parsed.fts_type != fts_type:
        raise ValidationError(f"Docket number type '{parsed.fts_type}' does not match FastTrack type '{fts_type}'")
    return parsed
