"""HTTP client for the OpenProject users API.

One authenticated request per lifecycle intent. No retries: failures go
straight back to the caller.
"""

import logging
from typing import Any

import httpx

from .errors import (
    CreateFailedError,
    DeleteFailedError,
    ReadFailedError,
    TransportError,
)
from .models import ConnectionContext, UserSpec
from .responses import (
    Absent,
    Created,
    Deleted,
    Failed,
    Found,
    interpret_create_response,
    interpret_delete_response,
    interpret_read_response,
)

logger = logging.getLogger(__name__)

API_KEY_USER = "apikey"


class OpenProjectClient:
    """Thin synchronous client over ``httpx.Client``.

    Every request carries ``Authorization: Basic base64("apikey:<key>")`` and
    ``Content-Type: application/json``.

    Args:
        context: Connection details (base URL and API key)
        transport: Optional httpx transport, mainly for tests
        timeout: Seconds before a request is abandoned; None disables the timeout
    """

    def __init__(
        self,
        context: ConnectionContext,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.context = context
        self._http = httpx.Client(
            auth=httpx.BasicAuth(API_KEY_USER, context.api_key),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def __enter__(self) -> "OpenProjectClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = self._http.request(method, url, json=json)
        except httpx.TransportError as e:
            logger.error(f"{operation} request to {url} failed: {e}")
            raise TransportError(operation, e) from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def _log_failure(self, operation: str, outcome: Failed) -> None:
        logger.error(
            f"OpenProject rejected {operation} request with status {outcome.status_code}"
            + (f": {outcome.message}" if outcome.message else "")
        )

    def create_user(self, spec: UserSpec) -> Created:
        """Create a user.

        Args:
            spec: Desired user

        Returns:
            Created outcome carrying the remote-assigned id

        Raises:
            CreateFailedError: On any status other than 201
            TransportError: On network failure
            ResponseDecodeError: If the 201 body has no usable id
        """
        response = self._request(
            "create", "POST", self.context.users_url(), json=spec.to_create_payload()
        )
        outcome = interpret_create_response(response)
        if isinstance(outcome, Failed):
            self._log_failure("create", outcome)
            raise CreateFailedError(outcome.status_code, outcome.message)
        return outcome

    def get_user(self, user_id: str) -> Found | Absent:
        """Fetch a user; a 404 comes back as ``Absent``, not an error.

        Raises:
            ReadFailedError: On any status other than 200 or 404
            TransportError: On network failure
            ResponseDecodeError: If the 200 body is not a user object
        """
        response = self._request("read", "GET", self.context.users_url(user_id))
        outcome = interpret_read_response(response)
        if isinstance(outcome, Failed):
            self._log_failure("read", outcome)
            raise ReadFailedError(outcome.status_code, outcome.message)
        return outcome

    def delete_user(self, user_id: str) -> Deleted:
        """Delete a user. Only 204 and 202 count as success.

        Raises:
            DeleteFailedError: On any other status, 404 included
            TransportError: On network failure
        """
        response = self._request("delete", "DELETE", self.context.users_url(user_id))
        outcome = interpret_delete_response(response)
        if isinstance(outcome, Failed):
            self._log_failure("delete", outcome)
            raise DeleteFailedError(outcome.status_code, outcome.message)
        return outcome
