"""Tests for validation of caller-supplied FastTrack data."""

import pytest

from delpro.core.modules.fasttrack.models import FtsType
from delpro.core.modules.fasttrack.validators import validate_docket_number, validate_small_id, validate_title
from delpro.errors import ValidationError


class TestValidateTitle:
    def test_title_trimmed(self):
        assert validate_title("  Tensile test  ") == "Tensile test"

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError, match="between 1 and 200"):
            validate_title("   ")

    def test_long_title_rejected(self):
        with pytest.raises(ValidationError, match="between 1 and 200"):
            validate_title("x" * 201)

    def test_max_length_accepted(self):
        assert validate_title("x" * 200) == "x" * 200


class TestValidateSmallId:
    """Caller-supplied short codes only need to be 6 uppercase letters or digits."""

    @pytest.mark.parametrize("value", ["DPL001", "QWE123", "A1B2C3", "ABCDEF"])
    def test_valid_codes_accepted(self, value):
        assert validate_small_id(value) == value

    @pytest.mark.parametrize("value", ["DPL01", "DPL0001", "dpl001", "DPL-01", ""])
    def test_invalid_codes_rejected(self, value):
        with pytest.raises(ValidationError, match="6 characters long"):
            validate_small_id(value)


class TestValidateDocketNumber:
    def test_matching_type_accepted(self):
        parsed = validate_docket_number("Delpro/Report/2025/001", FtsType.REPORT)
        assert parsed.sequence == 1
        assert parsed.year == 2025

    def test_malformed_docket_rejected(self):
        with pytest.raises(ValidationError, match="Delpro/<type>/YYYY/NNN"):
            validate_docket_number("Delpro/Report/2025", FtsType.REPORT)

    def test_mismatched_type_rejected(self):
        """Test that the docket's type segment must agree with the record type."""
        with pytest.raises(ValidationError, match="does not match FastTrack type 'Purchase'"):
            validate_docket_number("Delpro/Report/2025/001", FtsType.PURCHASE)

    def test_other_organization_rejected(self):
        with pytest.raises(ValidationError):
            validate_docket_number("Acme/Report/2025/001", FtsType.REPORT)

    def test_custom_organization(self):
        assert validate_docket_number("Acme/Other/2024/010", FtsType.OTHER, org="Acme").sequence == 10
