"""Tests for mapping domain errors to HTTP responses."""

import asyncio
import json

import pytest

from delpro.errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateValueError,
    ExhaustionError,
    InvalidCategoryError,
    NotFoundError,
    ValidationError,
)
from delpro.web.error_handlers import exhaustion_error_handler, general_exception_handler, user_error_handler


def handle(handler, exc):
    response = asyncio.run(handler(None, exc))
    return response.status_code, json.loads(response.body)


class TestUserErrorHandler:
    @pytest.mark.parametrize(
        ("exc", "status_code", "error_type"),
        [
            (AuthenticationError(), 401, "authentication_error"),
            (AccessDeniedError("Insufficient permissions"), 403, "access_denied"),
            (NotFoundError(), 404, "not_found"),
            (ValidationError("bad"), 400, "validation_error"),
            (InvalidCategoryError("Invoice", ["Report", "Other"]), 400, "invalid_category"),
        ],
    )
    def test_status_and_type(self, exc, status_code, error_type):
        status, body = handle(user_error_handler, exc)
        assert status == status_code
        assert body["type"] == error_type
        assert body["message"] == str(exc)
        assert "field" not in body

    def test_invalid_category_lists_valid_values(self):
        _, body = handle(user_error_handler, InvalidCategoryError("Invoice", ["Report", "Purchase"]))
        assert body["message"] == "Invalid FastTrack type 'Invoice'. Must be one of: Report, Purchase"

    def test_duplicate_value_names_field(self):
        status, body = handle(user_error_handler, DuplicateValueError("docket_number", "Docket number already exists"))
        assert status == 400
        assert body == {"message": "Docket number already exists", "type": "duplicate_value", "field": "docket_number"}


class TestServerErrorHandlers:
    def test_exhaustion_is_server_error(self):
        status, body = handle(exhaustion_error_handler, ExhaustionError())
        assert status == 500
        assert body == {"message": "Failed to generate unique short code", "type": "allocation_failed"}

    def test_unexpected_error_hides_details(self):
        status, body = handle(general_exception_handler, RuntimeError("connection refused"))
        assert status == 500
        assert body["type"] == "internal_server_error"
        assert "connection refused" not in body["message"]
