"""Tests for declared OpenProject resources."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from openproject_provider.resources import OpenProjectUserResource


def _user(**overrides):
    fields = {
        "username": "jdoe",
        "email": "j@x.com",
        "firstname": "J",
        "lastname": "Doe",
        "password": "pw",
    }
    fields.update(overrides)
    return OpenProjectUserResource(**fields)


def test_name_defaults_to_username():
    assert _user().name == "jdoe"
    assert _user(name="john").name == "john"


def test_empty_field_rejected():
    with pytest.raises(ValidationError):
        _user(email="")


def test_to_spec(spec):
    assert _user().to_spec() == spec


@patch("openproject_provider.pulumi_providers.OpenProjectUser")
def test_to_pulumi_creates_dynamic_resource(mock_user, context, spec):
    mock_user.return_value = MagicMock()

    result = _user().to_pulumi(context)

    assert result == mock_user.return_value
    args, kwargs = mock_user.call_args
    assert args == ("jdoe", spec, context)
    assert kwargs["opts"] is None
    assert kwargs["timeout"] is None


@patch("openproject_provider.pulumi_providers.OpenProjectUser")
def test_to_pulumi_with_import_id(mock_user, context):
    _user(import_id="42").to_pulumi(context, timeout=5.0)

    opts = mock_user.call_args.kwargs["opts"]
    assert opts.import_ == "42"
    assert opts.ignore_changes == ["password"]
    assert mock_user.call_args.kwargs["timeout"] == 5.0
