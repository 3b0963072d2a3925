"""
Pydantic models for OpenProject user reconciliation.

- ConnectionContext: where and how to reach OpenProject
- UserSpec: desired state declared by the user
- RemoteUserRecord: observed state returned by the API
- UserState: the snapshot the host engine keeps between runs
"""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .settings import OpenProjectSettings

USERS_PATH = "/api/v3/users"


class ConnectionContext(BaseModel):
    """Immutable connection details shared by every operation in a run.

    Attributes:
        base_url: OpenProject base URL without a trailing slash
        api_key: API key sent as the password of the ``apikey`` basic-auth user
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(min_length=1)
    api_key: str = Field(min_length=1, repr=False)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must not be empty")
        return value

    def users_url(self, user_id: str | None = None) -> str:
        """Return the users collection URL, or the URL of a single user."""
        url = f"{self.base_url}{USERS_PATH}"
        if user_id is None:
            return url
        return f"{url}/{quote(user_id, safe='')}"

    @classmethod
    def from_settings(
        cls,
        settings: "OpenProjectSettings",
        app_url: str | None = None,
        apikey: str | None = None,
    ) -> "ConnectionContext":
        """Build a context from settings, letting explicit values win.

        Raises:
            ConfigurationError: If the URL or API key is missing
        """
        app_url = app_url or settings.app_url
        apikey = apikey or settings.apikey

        missing = [
            name
            for name, value in (("app_url", app_url), ("apikey", apikey))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"missing OpenProject configuration: {', '.join(missing)} "
                "(set OP_APP_URL / OP_APIKEY or pass --app-url / --apikey)"
            )

        try:
            return cls(base_url=app_url, api_key=apikey)
        except ValueError as e:
            raise ConfigurationError(f"invalid OpenProject configuration: {e}") from e


class UserSpec(BaseModel):
    """Desired state of an OpenProject user.

    Every field is creation-only: OpenProject users are never updated in
    place, a changed field means the user is deleted and created again.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)

    def to_create_payload(self) -> dict[str, Any]:
        """Build the JSON body for ``POST /api/v3/users``.

        admin, status and language are fixed; there is no knob for them.
        """
        return {
            "login": self.username,
            "password": self.password,
            "firstName": self.firstname,
            "lastName": self.lastname,
            "email": self.email,
            "admin": False,
            "status": "active",
            "language": "en",
        }


REPLACE_ON_CHANGE = ("username", "email", "firstname", "lastname", "password")


class RemoteUserRecord(BaseModel):
    """A user as reported by ``GET /api/v3/users/{id}``.

    The API never returns the password, so it is not part of the record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    login: str
    email: str = ""
    firstname: str = Field(default="", alias="firstName")
    lastname: str = Field(default="", alias="lastName")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        # OpenProject returns numeric ids
        if value is None or isinstance(value, (dict, list, bool)):
            raise ValueError("id must be a string or number")
        return str(value)


class UserState(BaseModel):
    """Snapshot of a managed user as stored by the host engine.

    ``password`` is write-only on the remote side; it is carried over from
    the declared spec and is ``None`` for imported users.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    firstname: str
    lastname: str
    password: str | None = Field(default=None, repr=False)

    @classmethod
    def from_spec(cls, user_id: str, spec: UserSpec) -> "UserState":
        return cls(
            id=user_id,
            username=spec.username,
            email=spec.email,
            firstname=spec.firstname,
            lastname=spec.lastname,
            password=spec.password,
        )

    @classmethod
    def from_record(
        cls, record: RemoteUserRecord, password: str | None = None
    ) -> "UserState":
        return cls(
            id=record.id,
            username=record.login,
            email=record.email,
            firstname=record.firstname,
            lastname=record.lastname,
            password=password,
        )

    def to_outputs(self) -> dict[str, Any]:
        """Properties handed back to the host; the id travels separately."""
        outputs = self.model_dump(exclude={"id"})
        if outputs["password"] is None:
            del outputs["password"]
        return outputs
