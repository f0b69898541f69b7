"""Unit tests: error taxonomy and response envelopes."""

import pytest

from forum.errors import (
    ConflictError,
    ErrorKind,
    ForbiddenError,
    ForumError,
    InternalError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from forum.responses import error_response
from forum.storage.s3 import StorageError


@pytest.mark.parametrize(
    ("exc_class", "kind", "status"),
    [
        (UnauthenticatedError, ErrorKind.UNAUTHENTICATED, 401),
        (ForbiddenError, ErrorKind.FORBIDDEN, 403),
        (NotFoundError, ErrorKind.NOT_FOUND, 404),
        (ConflictError, ErrorKind.CONFLICT, 409),
        (ValidationError, ErrorKind.VALIDATION, 422),
        (InternalError, ErrorKind.INTERNAL, 500),
    ],
)
def test_kind_and_status(exc_class, kind, status):
    exc = exc_class("boom")
    assert isinstance(exc, ForumError)
    assert exc.kind is kind
    assert exc.status_code == status
    assert exc.message == "boom"
    assert str(exc) == "boom"


def test_default_message():
    assert UnauthenticatedError().message == "unauthorized"


def test_storage_error_is_internal():
    exc = StorageError()
    assert exc.kind is ErrorKind.INTERNAL
    assert exc.message == "failed to generate presigned URL"


def test_error_envelope():
    assert error_response(ErrorKind.NOT_FOUND, "post not found") == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "post not found"},
    }
