"""Base resource class for OpenProject declarations."""

from typing import TYPE_CHECKING

import pulumi
from pydantic import BaseModel, PrivateAttr

if TYPE_CHECKING:
    from openproject_provider.models import ConnectionContext


class Resource(BaseModel):
    """Base resource class - all declared resources inherit from this.

    Resources are plain pydantic models written in a project's ``main.py``.
    They are validated when constructed and turned into Pulumi resources by
    ``to_pulumi()`` when the program runs.

    Attributes:
        name: Unique Pulumi resource name within the project
        description: Optional human-readable description
    """

    name: str | None = None
    description: str | None = None

    _pulumi_resource: pulumi.Resource | None = PrivateAttr(default=None)

    def to_pulumi(
        self, context: "ConnectionContext", timeout: float | None = None
    ) -> pulumi.Resource:
        """Create the Pulumi resource for this declaration.

        Args:
            context: OpenProject connection details, passed explicitly
            timeout: Request timeout in seconds, None for no timeout

        Returns:
            Pulumi Resource object
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement to_pulumi()"
        )
