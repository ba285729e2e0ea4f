"""Rendering of a complete provider project into an in-memory file mapping.

``ProjectRenderer.render`` is a pure function of its configuration: it
touches no files, keeps no state between calls, and always returns the same
paths in the same order with byte-identical contents.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from provider_project.config import ProjectConfig
from provider_project.utils import to_json

from .constants import GENERATED_MARKER
from .manifest_gen import ManifestGenerator
from .task_gen import TaskGenerator
from .templates import TemplateRenderer
from .workflow_gen import WorkflowGenerator

logger = logging.getLogger(__name__)


# Text artifacts rendered from Jinja2 templates: template -> output path.
_TEXT_TEMPLATES: dict[str, str] = {
    "README.md.j2": "README.md",
    "gitignore.j2": ".gitignore",
    "copywrite.hcl.j2": ".copywrite.hcl",
    "scripts/check-for-upgrades.js.j2": "scripts/check-for-upgrades.js",
}


class ProjectRenderer:
    """Renders every artifact of a provider package.

    The sub-generators are stateless, so one renderer may serve any number of
    render calls, including concurrent ones.
    """

    def __init__(self, templates: TemplateRenderer | None = None) -> None:
        self.templates = templates or TemplateRenderer()
        self.manifest_gen = ManifestGenerator()
        self.task_gen = TaskGenerator()
        self.workflow_gen = WorkflowGenerator()

    def render(self, config: ProjectConfig | Mapping[str, Any]) -> dict[str, str]:
        """Render all artifacts for *config*.

        Args:
            config: A ``ProjectConfig`` or a mapping of options (camelCase or
                snake_case), which is validated first.

        Returns:
            Mapping of repository-relative path to file content.

        Raises:
            InvalidConfig: If *config* is a mapping that does not validate.
        """
        if not isinstance(config, ProjectConfig):
            config = ProjectConfig.from_options(config)

        logger.debug("Rendering provider project for %s", config.terraform_provider)
        tasks = self.task_gen.tasks_json(config)

        files: dict[str, str] = {
            "package.json": to_json(self.manifest_gen.package_json(config, list(tasks["tasks"]))),
            "cdktf.json": to_json(self.manifest_gen.cdktf_json(config)),
            ".projen/tasks.json": to_json(tasks),
            ".projen/deps.json": to_json(self.manifest_gen.deps_json(config)),
        }

        context = self.build_context(config)
        for template_name, output_path in _TEXT_TEMPLATES.items():
            files[output_path] = self.templates.render(template_name, context)

        files.update(self.workflow_gen.generate_all(config))

        logger.debug("Rendered %d files", len(files))
        return files

    def build_context(self, config: ProjectConfig) -> dict[str, Any]:
        """Build the Jinja2 template context from the project config."""
        return {
            "provider": config.provider,
            "packages": config.packages,
            "is_deprecated": config.is_deprecated,
            "deprecation_date": config.deprecation_date or "",
            "copyright_year": config.copyright_year,
            "generated_marker": GENERATED_MARKER,
        }


def render(config: ProjectConfig | Mapping[str, Any]) -> dict[str, str]:
    """Render *config* with a default ``ProjectRenderer``."""
    return ProjectRenderer().render(config)
