"""Tests for the provisioning pipeline."""

from unittest.mock import patch

import pytest

from openproject_provider.core import ProvisionerCore
from openproject_provider.errors import ConfigurationError

from .conftest import BASE_URL

MAIN_PY = '''
from openproject_provider.resources import OpenProjectUserResource

jdoe = OpenProjectUserResource(
    username="jdoe", email="j@x.com", firstname="J", lastname="Doe", password="pw"
)
not_a_resource = "ignored"
'''


@pytest.fixture
def core(clean_settings):
    with patch("openproject_provider.core.PulumiCompiler"):
        core = ProvisionerCore(app_url=BASE_URL, apikey="secret-key")
        yield core


@pytest.fixture
def main_file(tmp_path):
    project = tmp_path / "users"
    project.mkdir()
    main_file = project / "main.py"
    main_file.write_text(MAIN_PY)
    return main_file


def test_requires_configuration(clean_settings):
    with pytest.raises(ConfigurationError):
        ProvisionerCore()


def test_context_from_overrides(core):
    assert core.context.base_url == BASE_URL
    assert core.context.api_key == "secret-key"


def test_loads_declared_resources(core, main_file):
    resources = core._load_resources(main_file)
    assert [r.name for r in resources] == ["jdoe"]


def test_no_resources(core, tmp_path):
    main_file = tmp_path / "main.py"
    main_file.write_text("x = 1\n")
    with pytest.raises(ValueError, match="No resources"):
        core._load_resources(main_file)


def test_duplicate_names(core, tmp_path):
    main_file = tmp_path / "main.py"
    main_file.write_text(MAIN_PY + '\nagain = OpenProjectUserResource(name="jdoe", '
                         'username="other", email="o@x.com", firstname="O", '
                         'lastname="T", password="pw")\n')
    with pytest.raises(ValueError, match="Duplicate resource name"):
        core._load_resources(main_file)


def test_missing_main_file(core, tmp_path):
    with pytest.raises(FileNotFoundError):
        core._load_resources(tmp_path / "main.py")


def test_apply_uses_directory_as_project(core, main_file):
    core.apply(main_file)

    args = core.pulumi_compiler.apply.call_args.args
    assert [r.name for r in args[0]] == ["jdoe"]
    assert args[1] is core.context
    assert args[2] == "users"


def test_plan_previews(core, main_file):
    core.pulumi_compiler.preview.return_value = {"success": True}

    result = core.plan(main_file)

    assert result == {"dry_run": True, "resources": 1, "preview": {"success": True}}
    core.pulumi_compiler.apply.assert_not_called()


def test_destroy(core, main_file):
    core.destroy(main_file)
    core.pulumi_compiler.destroy.assert_called_once_with("users")
