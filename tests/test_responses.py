"""Tests for per-endpoint response interpretation."""

import httpx
import pytest

from openproject_provider.errors import ResponseDecodeError
from openproject_provider.responses import (
    Absent,
    Created,
    Deleted,
    Failed,
    Found,
    interpret_create_response,
    interpret_delete_response,
    interpret_read_response,
)


class TestCreateResponse:
    def test_created_with_bare_id(self):
        outcome = interpret_create_response(httpx.Response(201, json={"id": 42}))
        assert outcome == Created(id="42")

    def test_created_from_full_user_body_keeps_only_id(self, user_body):
        outcome = interpret_create_response(httpx.Response(201, json=user_body))
        assert outcome == Created(id="42")
        assert set(outcome.model_dump()) == {"id"}

    def test_failed_carries_status_and_message(self):
        outcome = interpret_create_response(
            httpx.Response(422, json={"message": "Login has already been taken."})
        )
        assert outcome == Failed(status_code=422, message="Login has already been taken.")

    def test_failed_without_json_body(self):
        outcome = interpret_create_response(httpx.Response(500, text="oops"))
        assert outcome == Failed(status_code=500, message="")

    def test_200_is_not_created(self):
        outcome = interpret_create_response(httpx.Response(200, json={"id": 1}))
        assert isinstance(outcome, Failed)
        assert outcome.status_code == 200

    def test_malformed_body(self):
        with pytest.raises(ResponseDecodeError) as exc_info:
            interpret_create_response(httpx.Response(201, text="not json"))
        assert exc_info.value.status_code == 201

    def test_missing_id(self):
        with pytest.raises(ResponseDecodeError):
            interpret_create_response(httpx.Response(201, json={"login": "jdoe"}))

    def test_non_object_body(self):
        with pytest.raises(ResponseDecodeError):
            interpret_create_response(httpx.Response(201, json=[42]))


class TestReadResponse:
    def test_found(self, user_body):
        outcome = interpret_read_response(httpx.Response(200, json=user_body))
        assert isinstance(outcome, Found)
        assert outcome.record.id == "42"

    def test_absent(self):
        assert interpret_read_response(httpx.Response(404)) == Absent()

    def test_failed_keeps_raw_body(self):
        outcome = interpret_read_response(httpx.Response(403, text='{"message":"nope"}'))
        assert outcome == Failed(status_code=403, message='{"message":"nope"}')

    def test_malformed_body(self):
        with pytest.raises(ResponseDecodeError) as exc_info:
            interpret_read_response(httpx.Response(200, text="<html>"))
        assert exc_info.value.status_code == 200
        assert exc_info.value.operation == "read"

    def test_body_without_login(self):
        with pytest.raises(ResponseDecodeError):
            interpret_read_response(httpx.Response(200, json={"id": 42}))


class TestDeleteResponse:
    @pytest.mark.parametrize("status", [202, 204])
    def test_deleted(self, status):
        assert interpret_delete_response(httpx.Response(status)) == Deleted(
            status_code=status
        )

    def test_not_found_is_failure(self):
        outcome = interpret_delete_response(
            httpx.Response(404, json={"message": "The requested resource could not be found."})
        )
        assert outcome == Failed(
            status_code=404, message="The requested resource could not be found."
        )

    def test_200_is_failure(self):
        assert isinstance(interpret_delete_response(httpx.Response(200)), Failed)
