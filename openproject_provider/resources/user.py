"""OpenProject user resource."""

import pulumi
from pydantic import Field, model_validator

from openproject_provider.models import ConnectionContext, UserSpec

from .base import Resource


class OpenProjectUserResource(Resource):
    """OpenProject user - an account declared in code, created through the API.

    Every field is creation-only: changing any of them deletes the user and
    creates it again. Users are always created as active, non-admin accounts
    with English as their language.

    Attributes:
        username: Login name (required)
        email: Email address (required)
        firstname: First name (required)
        lastname: Last name (required)
        password: Initial password (required, stored as a Pulumi secret)
        import_id: Id of an existing OpenProject user to adopt instead of
            creating a new one

    Examples:
        Basic user:
        >>> OpenProjectUserResource(
        ...     username="jdoe",
        ...     email="jdoe@example.com",
        ...     firstname="John",
        ...     lastname="Doe",
        ...     password="change-me-please",
        ... )

        Adopt an existing user:
        >>> OpenProjectUserResource(
        ...     username="admin",
        ...     email="admin@example.com",
        ...     firstname="OpenProject",
        ...     lastname="Admin",
        ...     password="unused-for-import",
        ...     import_id="1",
        ... )
    """

    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    import_id: str | None = Field(
        None,
        description="Existing OpenProject user id to import",
        examples=["4", "42"],
    )

    @model_validator(mode="after")
    def default_name(self):
        """Resource name defaults to the username."""
        if not self.name:
            self.name = self.username
        return self

    def to_spec(self) -> UserSpec:
        """Validated desired state for the reconciler."""
        return UserSpec(
            username=self.username,
            email=self.email,
            firstname=self.firstname,
            lastname=self.lastname,
            password=self.password,
        )

    def to_pulumi(
        self, context: ConnectionContext, timeout: float | None = None
    ) -> pulumi.Resource:
        """Create the OpenProjectUser dynamic resource.

        Returns:
            Pulumi OpenProjectUser resource
        """
        from openproject_provider.pulumi_providers import OpenProjectUser

        opts = None
        if self.import_id:
            # The API never returns passwords, so an imported user can't match one
            opts = pulumi.ResourceOptions(
                import_=self.import_id, ignore_changes=["password"]
            )

        user = OpenProjectUser(
            self.name,
            self.to_spec(),
            context,
            timeout=timeout,
            opts=opts,
        )

        self._pulumi_resource = user

        return user
