"""Tests for the Pulumi Automation API compiler."""

from unittest.mock import MagicMock, patch

import pytest

from openproject_provider.pulumi_compiler import PulumiCompiler


@pytest.fixture
def compiler(clean_settings, tmp_path):
    return PulumiCompiler(project_dir=tmp_path)


@pytest.fixture
def mock_auto():
    with patch("openproject_provider.pulumi_compiler.auto") as auto:
        yield auto


def test_state_dir_is_relative_to_project(compiler, tmp_path):
    assert compiler.state_dir == tmp_path / ".openproject" / "state"
    assert compiler.stack_name == "dev"


def test_passphrase_exported(compiler):
    import os

    assert os.environ["PULUMI_CONFIG_PASSPHRASE"] == "openproject"


def test_program_passes_context_to_each_resource(compiler, context):
    first, second = MagicMock(), MagicMock()

    program = compiler.create_program([first, second], context)
    program()

    first.to_pulumi.assert_called_once_with(context, timeout=None)
    second.to_pulumi.assert_called_once_with(context, timeout=None)


def test_program_reraises_resource_errors(compiler, context):
    broken = MagicMock()
    broken.to_pulumi.side_effect = ValueError("bad resource")

    with pytest.raises(ValueError):
        compiler.create_program([broken], context)()


class TestApply:
    def test_refreshes_then_ups(self, compiler, context, mock_auto):
        stack = mock_auto.create_or_select_stack.return_value
        stack.up.return_value.summary.result = "succeeded"
        stack.up.return_value.summary.resource_changes = {"create": 2}
        output = MagicMock()
        output.value = "42"
        stack.up.return_value.outputs = {"jdoe_id": output}

        result = compiler.apply([MagicMock()], context, "users")

        assert result["success"] is True
        assert result["summary"] == {
            "result": "succeeded",
            "resource_changes": {"create": 2},
        }
        assert result["outputs"] == {"jdoe_id": "42"}
        stack.refresh.assert_called_once()
        stack.up.assert_called_once()
        assert mock_auto.create_or_select_stack.call_args.kwargs["project_name"] == "users"
        assert compiler.state_dir.exists()

    def test_failure_is_reported(self, compiler, context, mock_auto):
        stack = mock_auto.create_or_select_stack.return_value
        stack.up.side_effect = RuntimeError("update failed")

        result = compiler.apply([], context)

        assert result["success"] is False
        assert "update failed" in result["error"]


def test_preview_counts_changes(compiler, context, mock_auto):
    stack = mock_auto.create_or_select_stack.return_value
    stack.preview.return_value.change_summary = {"create": 1, "replace": 2, "same": 3}

    result = compiler.preview([MagicMock()], context)

    assert result["success"] is True
    assert result["summary"]["total_changes"] == 3


def test_destroy_selects_existing_stack(compiler, mock_auto):
    stack = mock_auto.select_stack.return_value
    stack.destroy.return_value.summary.result = "succeeded"
    stack.destroy.return_value.summary.resource_changes = {"delete": 1}

    result = compiler.destroy("users")

    assert result == {
        "success": True,
        "summary": {"result": "succeeded", "resource_changes": {"delete": 1}},
    }
    mock_auto.create_or_select_stack.assert_not_called()
