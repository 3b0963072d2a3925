"""
OpenProject Provider Core - declared users in, Pulumi deployment out.

Apply Pipeline: Load resources from main.py → Deploy with Pulumi
Plan Pipeline: Load resources from main.py → Preview with Pulumi
Destroy Pipeline: Destroy the stack using Pulumi
"""

import importlib.util
import logging
from pathlib import Path
from typing import Any

from .models import ConnectionContext
from .pulumi_compiler import PulumiCompiler
from .settings import get_settings

logger = logging.getLogger(__name__)


class ProvisionerCore:
    """Main coordinator for the provisioning pipeline."""

    def __init__(self, app_url: str | None = None, apikey: str | None = None):
        """
        Initialize ProvisionerCore.

        Args:
            app_url: OpenProject base URL (overrides settings/.env)
            apikey: OpenProject API key (overrides settings/.env)

        Raises:
            ConfigurationError: If no URL or API key can be resolved
        """
        self.context = ConnectionContext.from_settings(
            get_settings(), app_url=app_url, apikey=apikey
        )
        self.pulumi_compiler = PulumiCompiler()

        logger.info(f"ProvisionerCore initialized for {self.context.base_url}")

    def apply(self, main_file: Path, dry_run: bool = False) -> dict[str, Any]:
        """
        Full pipeline: load → deploy with Pulumi.

        Args:
            main_file: Path to main.py file with resource definitions
            dry_run: If True, only preview without executing

        Returns:
            Dict with execution results
        """
        logger.info(f"Starting pipeline for: {main_file}")

        resources = self._load_resources(main_file)
        logger.info(f"Loaded {len(resources)} resources")

        project_name = main_file.parent.name

        if dry_run:
            logger.info("Dry run - running preview only")
            result = self.pulumi_compiler.preview(resources, self.context, project_name)
            return {
                "dry_run": True,
                "resources": len(resources),
                "preview": result,
            }

        result = self.pulumi_compiler.apply(resources, self.context, project_name)
        logger.info("Pipeline complete")

        return result

    def plan(self, main_file: Path) -> dict[str, Any]:
        """
        Plan mode: preview Pulumi changes without deploying.

        Args:
            main_file: Path to main.py file

        Returns:
            Dict with planning information
        """
        return self.apply(main_file, dry_run=True)

    def destroy(self, main_file: Path) -> dict[str, Any]:
        """
        Destroy every resource in the project's stack.

        Args:
            main_file: Path to main.py (its directory names the project)

        Returns:
            Dict with destroy results
        """
        project_name = main_file.parent.name
        return self.pulumi_compiler.destroy(project_name)

    def _load_resources(self, main_file: Path) -> list[Any]:
        """
        Load resources from main.py by executing it.

        Args:
            main_file: Path to main.py

        Returns:
            List of Resource objects

        Raises:
            FileNotFoundError: If main.py does not exist
            ValueError: If no resources are declared or names collide
        """
        if not main_file.exists():
            raise FileNotFoundError(f"File not found: {main_file}")

        spec = importlib.util.spec_from_file_location("user_main", main_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Could not load {main_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        from .resources.base import Resource

        resources = []
        for name, obj in vars(module).items():
            if isinstance(obj, Resource):
                resources.append(obj)
                logger.debug(f"Found resource: {name} ({type(obj).__name__})")

        if not resources:
            raise ValueError(f"No resources found in {main_file}")

        seen: set[str] = set()
        for resource in resources:
            if resource.name in seen:
                raise ValueError(f"Duplicate resource name: {resource.name}")
            seen.add(resource.name)

        return resources
