"""
Pulumi Compiler - Deploys declared OpenProject resources using the Automation API.

Pulumi is the host engine: it keeps ids and outputs in its state backend and
calls the dynamic provider for create, refresh, replace and delete.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pulumi import automation as auto

from .models import ConnectionContext
from .settings import get_settings

logger = logging.getLogger(__name__)


class PulumiCompiler:
    """Compiles resources into a Pulumi program and runs it with the Automation API."""

    def __init__(self, project_dir: Path | None = None):
        """
        Initialize the Pulumi compiler.

        Args:
            project_dir: Base directory for the project (defaults to current directory)
        """
        settings = get_settings()
        self.project_dir = project_dir or Path.cwd()
        self.stack_name = settings.stack_name
        self.request_timeout = settings.request_timeout
        self.state_dir = Path(settings.pulumi_state_dir)
        if not self.state_dir.is_absolute():
            self.state_dir = self.project_dir / self.state_dir

        # Set Pulumi passphrase from settings if not already set in environment
        if "PULUMI_CONFIG_PASSPHRASE" not in os.environ:
            os.environ["PULUMI_CONFIG_PASSPHRASE"] = settings.pulumi_config_passphrase
            logger.debug("Set PULUMI_CONFIG_PASSPHRASE from settings")

        logger.info(f"Initialized Pulumi compiler with state dir: {self.state_dir}")

    def create_program(
        self, resources: list[Any], context: ConnectionContext
    ) -> Callable:
        """
        Create a Pulumi program function from resources.

        Args:
            resources: Resource objects with to_pulumi() methods
            context: OpenProject connection details handed to every resource

        Returns:
            Pulumi program function that can be passed to Automation API
        """

        def pulumi_program():
            """Generated Pulumi program that declares OpenProject resources."""
            logger.info(f"Executing Pulumi program with {len(resources)} resources")

            for resource in resources:
                try:
                    resource.to_pulumi(context, timeout=self.request_timeout)
                    logger.debug(f"Created Pulumi resource: {resource.name}")
                except Exception as e:
                    logger.error(
                        f"Failed to create Pulumi resource {resource.name}: {e}"
                    )
                    raise

        return pulumi_program

    def _workspace_options(self, project_name: str) -> auto.LocalWorkspaceOptions:
        """Local file backend rooted at the state directory."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        return auto.LocalWorkspaceOptions(
            work_dir=str(self.project_dir),
            project_settings=auto.ProjectSettings(
                name=project_name,
                runtime="python",
                backend=auto.ProjectBackend(url=self.state_dir.resolve().as_uri()),
            ),
        )

    def _stack(self, project_name: str, program: Callable) -> auto.Stack:
        stack = auto.create_or_select_stack(
            stack_name=self.stack_name,
            project_name=project_name,
            program=program,
            opts=self._workspace_options(project_name),
        )
        logger.info(f"Using stack: {self.stack_name}")
        return stack

    def apply(
        self,
        resources: list[Any],
        context: ConnectionContext,
        project_name: str = "openproject",
    ) -> dict[str, Any]:
        """
        Apply infrastructure changes using Pulumi.

        Refreshes first so users deleted out-of-band are dropped from state
        and recreated, then runs ``pulumi up``.

        Args:
            resources: Resource objects to deploy
            context: OpenProject connection details
            project_name: Name of the Pulumi project

        Returns:
            Dictionary with success status, summary, and outputs
        """
        logger.info(
            f"Applying {len(resources)} resources with Pulumi (project: {project_name})"
        )

        try:
            stack = self._stack(project_name, self.create_program(resources, context))

            logger.info("Running Pulumi refresh...")
            stack.refresh(on_output=lambda msg: logger.debug(msg))

            logger.info("Running Pulumi up...")
            up_result = stack.up(on_output=lambda msg: logger.debug(msg))

            summary = up_result.summary
            changes = summary.resource_changes or {}

            logger.info(
                f"Pulumi up completed: {summary.result} "
                f"(resources: +{changes.get('create', 0)} "
                f"~{changes.get('replace', 0)} "
                f"-{changes.get('delete', 0)})"
            )

            return {
                "success": True,
                "summary": {
                    "result": summary.result,
                    "resource_changes": changes,
                },
                "outputs": {k: v.value for k, v in up_result.outputs.items()},
            }

        except Exception as e:
            logger.error(f"Pulumi apply failed: {e}")
            return {
                "success": False,
                "error": str(e),
                "summary": None,
                "outputs": {},
            }

    def preview(
        self,
        resources: list[Any],
        context: ConnectionContext,
        project_name: str = "openproject",
    ) -> dict[str, Any]:
        """
        Preview infrastructure changes using Pulumi.

        Args:
            resources: Resource objects to preview
            context: OpenProject connection details
            project_name: Name of the Pulumi project

        Returns:
            Dictionary with success status and change summary
        """
        logger.info(
            f"Previewing {len(resources)} resources with Pulumi (project: {project_name})"
        )

        try:
            stack = self._stack(project_name, self.create_program(resources, context))

            logger.info("Running Pulumi preview...")
            preview_result = stack.preview(on_output=lambda msg: logger.debug(msg))

            change_summary = preview_result.change_summary
            total_changes = sum(
                change_summary.get(op, 0)
                for op in ["create", "update", "delete", "replace"]
            )

            logger.info(
                f"Pulumi preview completed: "
                f"{total_changes} total changes "
                f"(+{change_summary.get('create', 0)} "
                f"~{change_summary.get('replace', 0)} "
                f"-{change_summary.get('delete', 0)})"
            )

            return {
                "success": True,
                "summary": {
                    "change_summary": change_summary,
                    "total_changes": total_changes,
                },
            }

        except Exception as e:
            logger.error(f"Pulumi preview failed: {e}")
            return {
                "success": False,
                "error": str(e),
                "summary": None,
            }

    def destroy(self, project_name: str = "openproject") -> dict[str, Any]:
        """
        Destroy infrastructure using Pulumi.

        The dynamic provider is stored with each resource, so an empty
        program is enough to delete everything in the stack.

        Args:
            project_name: Name of the Pulumi project

        Returns:
            Dictionary with success status and summary
        """
        logger.info(f"Destroying infrastructure (project: {project_name})")

        try:

            def empty_program():
                """Empty Pulumi program for destroy operations."""
                pass

            stack = auto.select_stack(
                stack_name=self.stack_name,
                project_name=project_name,
                program=empty_program,
                opts=self._workspace_options(project_name),
            )
            logger.info(f"Selected stack: {self.stack_name}")

            logger.info("Running Pulumi destroy...")
            destroy_result = stack.destroy(on_output=lambda msg: logger.debug(msg))

            summary = destroy_result.summary
            logger.info(f"Pulumi destroy completed: {summary.result}")

            return {
                "success": True,
                "summary": {
                    "result": summary.result,
                    "resource_changes": summary.resource_changes or {},
                },
            }

        except Exception as e:
            logger.error(f"Pulumi destroy failed: {e}")
            return {
                "success": False,
                "error": str(e),
                "summary": None,
            }
