"""Response schemas for the OpenProject users endpoints.

Each endpoint's HTTP response is decoded into one of a small set of outcome
types instead of a loose dict:

- create: ``Created`` | ``Failed``
- read:   ``Found`` | ``Absent`` | ``Failed``
- delete: ``Deleted`` | ``Failed``

The interpret functions are pure; turning ``Failed`` into an exception is the
client's job.
"""

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ResponseDecodeError
from .models import RemoteUserRecord

DELETE_SUCCESS_CODES = (httpx.codes.NO_CONTENT, httpx.codes.ACCEPTED)


class Created(BaseModel):
    """201 from ``POST /api/v3/users``."""

    model_config = ConfigDict(frozen=True)

    id: str


class Found(BaseModel):
    """200 from ``GET /api/v3/users/{id}``."""

    model_config = ConfigDict(frozen=True)

    record: RemoteUserRecord


class Absent(BaseModel):
    """404 from ``GET /api/v3/users/{id}``: the user does not exist."""

    model_config = ConfigDict(frozen=True)


class Deleted(BaseModel):
    """204 or 202 from ``DELETE /api/v3/users/{id}``."""

    model_config = ConfigDict(frozen=True)

    status_code: int


class Failed(BaseModel):
    """Any status the endpoint does not treat as success or absence."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    message: str = ""


def _decode_object(operation: str, response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body or raise ResponseDecodeError."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseDecodeError(operation, response.status_code, str(e)) from e
    if not isinstance(body, dict):
        raise ResponseDecodeError(
            operation,
            response.status_code,
            f"expected a JSON object, got {type(body).__name__}",
        )
    return body


def _error_message(response: httpx.Response) -> str:
    """Best-effort ``message`` field from an error body."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ""
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return ""


def interpret_create_response(response: httpx.Response) -> Created | Failed:
    """Interpret the response of ``POST /api/v3/users``.

    Raises:
        ResponseDecodeError: If a 201 body is not JSON or carries no usable id
    """
    if response.status_code != httpx.codes.CREATED:
        return Failed(
            status_code=response.status_code, message=_error_message(response)
        )

    body = _decode_object("create", response)
    user_id = body.get("id")
    if user_id is None or isinstance(user_id, (dict, list, bool)) or str(user_id) == "":
        raise ResponseDecodeError(
            "create", response.status_code, "response body has no user id"
        )

    return Created(id=str(user_id))


def interpret_read_response(response: httpx.Response) -> Found | Absent | Failed:
    """Interpret the response of ``GET /api/v3/users/{id}``.

    Raises:
        ResponseDecodeError: If a 200 body is not a valid user object
    """
    if response.status_code == httpx.codes.NOT_FOUND:
        return Absent()

    if response.status_code != httpx.codes.OK:
        return Failed(status_code=response.status_code, message=response.text)

    body = _decode_object("read", response)
    try:
        record = RemoteUserRecord.model_validate(body)
    except ValidationError as e:
        raise ResponseDecodeError("read", response.status_code, str(e)) from e

    return Found(record=record)


def interpret_delete_response(response: httpx.Response) -> Deleted | Failed:
    """Interpret the response of ``DELETE /api/v3/users/{id}``.

    A 404 is a failure like any other non-success status.
    """
    if response.status_code in DELETE_SUCCESS_CODES:
        return Deleted(status_code=response.status_code)

    return Failed(status_code=response.status_code, message=_error_message(response))
