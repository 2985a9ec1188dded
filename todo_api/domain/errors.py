"""Domain errors — each carries the HTTP shape it is rendered with."""

from __future__ import annotations

from typing import Any


class InfoServiceError(Exception):
    status_code = 500
    name = "InternalServerError"
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "statusCode": self.status_code,
            "name": self.name,
            "code": self.code,
            "message": self.message,
        }
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class InvalidFilterError(InfoServiceError):
    """A filter/where parameter is malformed or contains a forbidden key."""

    status_code = 400
    name = "BadRequestError"
    code = "INVALID_PARAMETER_VALUE"

    def __init__(self, parameter: str, reason: str, key: str | None = None):
        details: dict[str, Any] = {"syntaxError": reason}
        if key is not None:
            details["key"] = key
        super().__init__(f"The {parameter} parameter is invalid: {reason}", details)
        self.parameter = parameter
        self.key = key


class EntityNotFoundError(InfoServiceError):
    status_code = 404
    name = "NotFoundError"
    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_id: Any):
        super().__init__(f'Entity not found: Info with id "{entity_id}"')
        self.entity_id = entity_id


class DuplicateIdError(InfoServiceError):
    status_code = 409
    name = "ConflictError"
    code = "DUPLICATE_ID"

    def __init__(self, entity_id: Any):
        super().__init__(f'Duplicate entry for Info.id "{entity_id}"')
        self.entity_id = entity_id


class AddressNotFoundError(InfoServiceError):
    """The geocoder answered, but with no candidates."""

    status_code = 400
    name = "BadRequestError"
    code = "ADDRESS_NOT_FOUND"

    def __init__(self, address: str):
        super().__init__(f"Address not found: {address}")
        self.address = address


class GeocoderUnavailableError(InfoServiceError):
    """The geocoding provider could not be reached or failed (502-class)."""

    status_code = 502
    name = "BadGatewayError"
    code = "GEOCODER_UNAVAILABLE"

    def __init__(self, reason: str, upstream_status: int | None = None):
        super().__init__(f"Address lookup unavailable: {reason}")
        self.upstream_status = upstream_status
