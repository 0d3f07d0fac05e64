"""Shared pytest fixtures."""

import random
from uuid import UUID

import pytest

from delpro.core.modules.fasttrack.models import FastTrack, FtsType
from delpro.core.modules.user.models import User, UserRole

PRIMARY_FULL = [f"DPL{n:03d}" for n in range(1, 1000)]


@pytest.fixture
def rng():
    """Seeded random generator so overflow draws are reproducible."""
    return random.Random(1234)


@pytest.fixture
def primary_full():
    """Every code of the primary namespace, DPL001..DPL999."""
    return list(PRIMARY_FULL)


@pytest.fixture
def mock_admin():
    return User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        email="admin@delprolabs.com",
        name="Test Admin",
        role=UserRole.SUPER_ADMIN,
        password_hash="$2b$12$hashed_password_here",
    )


@pytest.fixture
def mock_fasttrack(mock_admin):
    return FastTrack(
        small_id="DPL001",
        docket_number="Delpro/Report/2025/001",
        fts_type=FtsType.REPORT,
        title="Tensile test summary",
        created_by=mock_admin.id,
    )
