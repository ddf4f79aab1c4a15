"""Map domain errors onto HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from protoforge.models.errors import (
    InvalidStateError,
    NoSuitableVersionError,
    NotFoundError,
    ProtoforgeError,
    StorageError,
    VersionConflictError,
)


def http_error(exc: ProtoforgeError) -> HTTPException:
    """Translate a domain error into an ``HTTPException``."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (InvalidStateError, NoSuitableVersionError, VersionConflictError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(status_code=503, detail="Storage unavailable, please retry")
    return HTTPException(status_code=400, detail=str(exc))
