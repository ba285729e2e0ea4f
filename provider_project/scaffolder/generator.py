"""Main scaffolding orchestrator.

Takes a ``ProjectConfig``, renders every artifact of the provider package
with ``ProjectRenderer`` and writes them into a project directory.
"""

from __future__ import annotations

import asyncio
import logging
import stat
from pathlib import Path

from provider_project.config import ProjectConfig
from provider_project.utils import write_text

from .renderer import ProjectRenderer

logger = logging.getLogger(__name__)

# Generated files that must be executable.
_EXECUTABLES = ("scripts/check-for-upgrades.js",)


class ProjectGenerator:
    """Writes a rendered provider project to disk.

    Rendering happens once per ``generate`` call and completes before any
    file is written, so an invalid configuration never leaves a partial tree.
    """

    def __init__(self, config: ProjectConfig, renderer: ProjectRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or ProjectRenderer()

    def render(self) -> dict[str, str]:
        """Return the rendered ``path -> content`` mapping without writing it."""
        return self.renderer.render(self.config)

    async def generate(self, output_dir: str | Path) -> Path:
        """Generate the project under ``output_dir/<config.name>``.

        Args:
            output_dir: Parent directory; a subdirectory named after the
                project is created inside it.

        Returns:
            Path to the generated project root.
        """
        files = self.render()
        project_root = Path(output_dir) / self.config.name
        await asyncio.to_thread(project_root.mkdir, parents=True, exist_ok=True)

        await asyncio.gather(
            *(write_text(project_root / rel_path, content) for rel_path, content in files.items())
        )
        for rel_path in _EXECUTABLES:
            if rel_path in files:
                await asyncio.to_thread(_make_executable, project_root / rel_path)

        logger.info("Wrote %d files to %s", len(files), project_root)
        return project_root


def _make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
