"""Identifier allocation for FastTrack records.

Two identifiers are minted for every record:

- a short code, unique across the whole collection. Codes are handed out
  sequentially from the primary namespace (``DPL001`` .. ``DPL999``); once
  that is used up, codes come from randomly drawn three-letter prefixes,
  each with its own ``001`` .. ``999`` sequence.
- a docket number ``ORG/TYPE/YEAR/NNN``, sequential within each
  (type, year) scope.

Everything here is a pure function of an explicit snapshot of existing
values. Nothing is reserved: two concurrent callers can compute the same
candidate, and the unique indexes on the collection decide who wins.
"""

import random
import re
import string
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from delpro.core.modules.fasttrack.models import FtsType, GeneratedIdentifiers
from delpro.errors import ExhaustionError, InvalidCategoryError

ORG_TAG = "Delpro"
PRIMARY_PREFIX = "DPL"
MAX_SUFFIX = 999
DEFAULT_ATTEMPTS = 20

SHORT_CODE_RE = re.compile(r"^([A-Z]{3})([0-9]{3})$")
PREFIX_RE = re.compile(r"^[A-Z]{3}$")


def parse_fts_type(value: str) -> FtsType:
    """Resolve a category label, raising InvalidCategoryError for unknown labels."""
    try:
        return FtsType(value)
    except ValueError:
        raise InvalidCategoryError(str(value), [t.value for t in FtsType]) from None


def parse_short_code(code: str) -> tuple[str, int] | None:
    """Split a short code into (prefix, number), or None if it has another shape."""
    match = SHORT_CODE_RE.match(code)
    if match is None:
        return None
    return match.group(1), int(match.group(2))


def format_short_code(prefix: str, number: int) -> str:
    return f"{prefix}{number:03d}"


@dataclass(frozen=True)
class DocketNumber:
    org: str
    fts_type: FtsType
    year: int
    sequence: int

    def __str__(self) -> str:
        return format_docket_number(self.fts_type, self.year, self.sequence, org=self.org)


def docket_prefix(fts_type: FtsType, year: int, org: str = ORG_TAG) -> str:
    """Literal prefix shared by every docket number in a (type, year) scope."""
    return f"{org}/{fts_type.value}/{year:04d}/"


def format_docket_number(fts_type: FtsType, year: int, sequence: int, org: str = ORG_TAG) -> str:
    # Sequences past 999 grow wider instead of wrapping
    return f"{docket_prefix(fts_type, year, org)}{sequence:03d}"


def parse_docket_number(value: str, org: str = ORG_TAG) -> DocketNumber | None:
    """Parse ``ORG/TYPE/YYYY/NNN``. Returns None for anything else."""
    parts = value.split("/")
    if len(parts) != 4:
        return None
    tag, label, year, sequence = parts
    if tag != org or label not in {t.value for t in FtsType}:
        return None
    if len(year) != 4 or not _is_ascii_number(year):
        return None
    if len(sequence) < 3 or not _is_ascii_number(sequence):
        return None
    return DocketNumber(org=tag, fts_type=FtsType(label), year=int(year), sequence=int(sequence))


def _is_ascii_number(value: str) -> bool:
    return value.isascii() and value.isdigit()


class ShortCodeAllocator:
    """Hands out short codes that are not in the given snapshot.

    The scan happens once, in the constructor. Every code returned by
    `allocate` is added to the snapshot and bumps the matching counter, so a
    single allocator can mint a batch of distinct codes.

    The primary namespace counts as exhausted once it reached 999 or once any
    overflow code exists, so deleting ``DPL999`` later does not reopen it.

    A random prefix that equals the primary prefix is redrawn without using
    up an attempt. A prefix whose sequence already reached 999 counts as a
    failed attempt.
    """

    def __init__(
        self,
        existing_codes: Iterable[str],
        *,
        primary_prefix: str = PRIMARY_PREFIX,
        max_attempts: int = DEFAULT_ATTEMPTS,
        rng: random.Random | None = None,
    ) -> None:
        if not PREFIX_RE.match(primary_prefix):
            raise ValueError(f"Primary prefix must be three uppercase letters, got '{primary_prefix}'")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")

        self.primary_prefix = primary_prefix
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._taken: set[str] = set()
        self.max_primary = 0
        self.overflow: dict[str, int] = {}

        for code in existing_codes:
            self.claim(code)

    @property
    def primary_exhausted(self) -> bool:
        return self.max_primary >= MAX_SUFFIX or bool(self.overflow)

    def is_taken(self, code: str) -> bool:
        return code in self._taken

    def claim(self, code: str) -> str:
        """Mark a code as used and advance the sequence it belongs to."""
        self._taken.add(code)
        parsed = parse_short_code(code)
        if parsed is not None:
            prefix, number = parsed
            if prefix == self.primary_prefix:
                self.max_primary = max(self.max_primary, number)
            else:
                self.overflow[prefix] = max(self.overflow.get(prefix, 0), number)
        return code

    def candidates(self) -> Iterator[str]:
        """Yield codes that are free in the snapshot, one per attempt.

        The caller must `claim` every yielded code, whether it keeps it or
        finds it taken elsewhere; otherwise the primary sequence repeats the
        same candidate. Stops once the attempt budget is spent.
        """
        while not self.primary_exhausted:
            yield format_short_code(self.primary_prefix, self.max_primary + 1)

        for _ in range(self.max_attempts):
            prefix = self._draw_prefix()
            number = self.overflow.get(prefix, 0) + 1
            if number > MAX_SUFFIX:
                continue
            code = format_short_code(prefix, number)
            if self.is_taken(code):
                continue
            yield code

    def allocate(self) -> str:
        """Return a code absent from the snapshot, or raise ExhaustionError."""
        for code in self.candidates():
            return self.claim(code)
        raise ExhaustionError

    def _draw_prefix(self) -> str:
        while True:
            prefix = "".join(self._rng.choices(string.ascii_uppercase, k=3))
            if prefix != self.primary_prefix:
                return prefix


def allocate_short_code(
    existing_codes: Iterable[str],
    *,
    primary_prefix: str = PRIMARY_PREFIX,
    max_attempts: int = DEFAULT_ATTEMPTS,
    rng: random.Random | None = None,
) -> str:
    """Next free short code for the given snapshot of existing codes."""
    allocator = ShortCodeAllocator(existing_codes, primary_prefix=primary_prefix, max_attempts=max_attempts, rng=rng)
    return allocator.allocate()


def allocate_docket_number(
    category: str,
    year: int,
    existing_dockets: Iterable[str],
    *,
    org: str = ORG_TAG,
) -> str:
    """Next docket number in the (category, year) scope.

    Dockets outside the scope are skipped, so the input may be the whole
    collection or a pre-filtered subset. Suffixes are compared as integers.
    """
    fts_type = parse_fts_type(category)
    prefix = docket_prefix(fts_type, year, org)

    last = 0
    for docket in existing_dockets:
        if not docket.startswith(prefix):
            continue
        suffix = docket[len(prefix) :]
        if _is_ascii_number(suffix):
            last = max(last, int(suffix))

    return format_docket_number(fts_type, year, last + 1, org=org)


def generate_identifiers(
    category: str,
    year: int,
    existing_codes: Iterable[str],
    existing_dockets: Iterable[str],
    *,
    org: str = ORG_TAG,
    primary_prefix: str = PRIMARY_PREFIX,
    max_attempts: int = DEFAULT_ATTEMPTS,
    rng: random.Random | None = None,
) -> GeneratedIdentifiers:
    """Allocate a short code and a docket number together.

    The category is checked before anything else; any failure means
    neither identifier is returned.
    """
    fts_type = parse_fts_type(category)
    small_id = allocate_short_code(existing_codes, primary_prefix=primary_prefix, max_attempts=max_attempts, rng=rng)
    docket_number = allocate_docket_number(fts_type, year, existing_dockets, org=org)
    return GeneratedIdentifiers(small_id=small_id, docket_number=docket_number, fts_type=fts_type)
