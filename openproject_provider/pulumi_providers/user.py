"""Pulumi dynamic provider for OpenProject users.

Pulumi is the host engine: it stores ids and outputs, decides when to
create, refresh, replace or delete, and calls into this provider. The
provider only translates between Pulumi's property dicts and the
reconciler.
"""

from typing import Any, Optional

import pulumi
from pulumi import Output
from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
)
from pydantic import ValidationError

from openproject_provider.models import (
    REPLACE_ON_CHANGE,
    ConnectionContext,
    UserSpec,
    UserState,
)
from openproject_provider.reconciler import UserReconciler


def _spec_props(props: dict[str, Any]) -> dict[str, Any]:
    """Keep only declared user fields (drops Pulumi's __provider and friends)."""
    return {key: props[key] for key in REPLACE_ON_CHANGE if key in props}


class OpenProjectUserProvider(ResourceProvider):
    """Dynamic provider for OpenProject users.

    Args:
        context: Connection details; serialized with the provider so that
            refresh and destroy work without the original program
        timeout: Request timeout in seconds, None for no timeout
    """

    def __init__(self, context: ConnectionContext, timeout: float | None = None):
        super().__init__()
        self.context = context
        self.timeout = timeout

    def _reconciler(self) -> UserReconciler:
        return UserReconciler(timeout=self.timeout)

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        """Validate declared inputs once, at the boundary."""
        failures = []
        try:
            UserSpec.model_validate(_spec_props(news))
        except ValidationError as e:
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "inputs"
                failures.append(CheckFailure(field, error["msg"]))

        return CheckResult(inputs=news, failures=failures)

    def diff(
        self, id: str, old_props: dict[str, Any], new_props: dict[str, Any]
    ) -> DiffResult:
        """Any change replaces the user; the old one goes first since logins are unique."""
        old_state = UserState.model_validate({"id": id, **_spec_props(old_props)})
        new_spec = UserSpec.model_validate(_spec_props(new_props))
        replaces = self._reconciler().diff(old_state, new_spec)

        return DiffResult(
            changes=len(replaces) > 0,
            replaces=replaces,
            stables=[],
            delete_before_replace=True,
        )

    def create(self, props: dict[str, Any]) -> CreateResult:
        spec = UserSpec.model_validate(_spec_props(props))
        state = self._reconciler().create(self.context, spec)
        return CreateResult(id_=state.id, outs=state.to_outputs())

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        """Refresh (or import) a user.

        Returns no id when the user no longer exists, which tells
        Pulumi to drop it from state.
        """
        reconciler = self._reconciler()

        if not props.get("username"):
            # Nothing stored yet: Pulumi is importing an existing user
            state = reconciler.import_user(self.context, id)
            return ReadResult(id_=state.id, outs=state.to_outputs())

        stored = UserState.model_validate({"id": id, **_spec_props(props)})
        state = reconciler.refresh(self.context, stored)
        if state is None:
            return ReadResult(id_=None, outs={})
        return ReadResult(id_=state.id, outs=state.to_outputs())

    def delete(self, id: str, props: dict[str, Any]) -> None:
        self._reconciler().delete(self.context, id)


class OpenProjectUser(pulumi.dynamic.Resource):
    """
    A Pulumi dynamic resource for an OpenProject user.

    All inputs are creation-only; changing any of them replaces the user.
    The password is stored as a secret output.

    Args:
        name: Pulumi resource name
        spec: Validated user spec
        context: OpenProject connection details
        timeout: Request timeout in seconds, None for no timeout
        opts: Standard Pulumi resource options
    """

    username: Output[str]
    email: Output[str]
    firstname: Output[str]
    lastname: Output[str]
    password: Output[str]

    def __init__(
        self,
        name: str,
        spec: UserSpec,
        context: ConnectionContext,
        timeout: float | None = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        opts = pulumi.ResourceOptions.merge(
            opts, pulumi.ResourceOptions(additional_secret_outputs=["password"])
        )

        super().__init__(
            OpenProjectUserProvider(context, timeout=timeout),
            name,
            {
                "username": spec.username,
                "email": spec.email,
                "firstname": spec.firstname,
                "lastname": spec.lastname,
                "password": Output.secret(spec.password),
            },
            opts,
        )
