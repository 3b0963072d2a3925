"""
Lifecycle reconciler for OpenProject users.

Create / Read / Delete / Import entry points. Each call takes the connection
context explicitly and returns the state the host should store (or None when
the user no longer exists); nothing is persisted here.

State machine per declared user:
    Unmanaged --create--> Managed --delete--> Unmanaged
    Managed --read finds it gone--> Unmanaged   (drift)
A failed operation leaves the state where it was.
"""

import logging

import httpx

from .client import OpenProjectClient
from .errors import (
    ImportFailedError,
    MissingIdentifierError,
    ReadFailedError,
    ResponseDecodeError,
    TransportError,
)
from .models import (
    REPLACE_ON_CHANGE,
    ConnectionContext,
    RemoteUserRecord,
    UserSpec,
    UserState,
)
from .responses import Absent

logger = logging.getLogger(__name__)


class UserReconciler:
    """Drives ``OpenProjectClient`` through the user lifecycle.

    The reconciler holds no connection state; a client is opened per call
    from the context passed in.

    Args:
        transport: Optional httpx transport handed to every client
        timeout: Request timeout in seconds, None for no timeout
    """

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.transport = transport
        self.timeout = timeout

    def _client(self, context: ConnectionContext) -> OpenProjectClient:
        return OpenProjectClient(
            context, transport=self.transport, timeout=self.timeout
        )

    def create(self, context: ConnectionContext, spec: UserSpec) -> UserState:
        """Create the user and return the state to record.

        The identity comes from the 201 body and is logged as soon as it is
        seen, so it can be recovered even if the host fails afterwards.

        Raises:
            CreateFailedError, TransportError, ResponseDecodeError
        """
        logger.info(f"Creating OpenProject user '{spec.username}'")
        with self._client(context) as client:
            created = client.create_user(spec)

        logger.info(f"Created OpenProject user '{spec.username}' with id {created.id}")
        return UserState.from_spec(created.id, spec)

    def read(
        self, context: ConnectionContext, user_id: str
    ) -> RemoteUserRecord | None:
        """Observe the remote user; None means it does not exist.

        An empty identity means nothing is managed, so no request is made.

        Raises:
            ReadFailedError, TransportError, ResponseDecodeError
        """
        if not user_id:
            return None

        with self._client(context) as client:
            outcome = client.get_user(user_id)

        if isinstance(outcome, Absent):
            return None
        return outcome.record

    def refresh(
        self, context: ConnectionContext, state: UserState
    ) -> UserState | None:
        """Reconcile stored state with what OpenProject reports.

        Returns None when the user was deleted out-of-band, telling the host
        to drop the identity and attributes. The stored password is carried
        over since the API never returns it.
        """
        record = self.read(context, state.id)
        if record is None:
            logger.info(
                f"OpenProject user {state.id} ('{state.username}') no longer exists; "
                "dropping it from state"
            )
            return None

        refreshed = UserState.from_record(record, password=state.password)
        drifted = [
            field
            for field in ("username", "email", "firstname", "lastname")
            if getattr(refreshed, field) != getattr(state, field)
        ]
        if drifted:
            logger.info(
                f"OpenProject user {state.id} drifted: {', '.join(drifted)}"
            )
        return refreshed

    def delete(self, context: ConnectionContext, user_id: str) -> None:
        """Delete the user.

        A user that is already gone (404) is reported as DeleteFailedError,
        not treated as success.

        Raises:
            MissingIdentifierError: If user_id is empty
            DeleteFailedError, TransportError
        """
        if not user_id:
            raise MissingIdentifierError("cannot delete a user without an id")

        with self._client(context) as client:
            client.delete_user(user_id)

        logger.info(f"Deleted OpenProject user {user_id}")

    def import_user(self, context: ConnectionContext, user_id: str) -> UserState:
        """Adopt an existing OpenProject user by id.

        Raises:
            ImportFailedError: If the id is empty, the user does not exist,
                or reading it failed (the cause is chained)
        """
        if not user_id or not user_id.strip():
            raise ImportFailedError("missing identifier")
        user_id = user_id.strip()

        logger.info(f"Importing OpenProject user {user_id}")
        try:
            record = self.read(context, user_id)
        except (ReadFailedError, TransportError, ResponseDecodeError) as e:
            raise ImportFailedError(f"error reading user {user_id}: {e}", cause=e) from e

        if record is None:
            raise ImportFailedError(f"user {user_id} not found")

        return UserState.from_record(record)

    def diff(self, old: UserSpec | UserState, new: UserSpec) -> list[str]:
        """Names of changed fields. Every field forces a replacement.

        A stored state without a password (imported users) is not compared
        on password, since its value was never known.
        """
        changed = []
        for field in REPLACE_ON_CHANGE:
            old_value = getattr(old, field)
            if field == "password" and old_value is None:
                continue
            if old_value != getattr(new, field):
                changed.append(field)
        return changed
