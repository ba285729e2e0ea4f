"""Jinja2 template rendering for provider project artifacts.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``provider_project/scaffolder/templates/`` directory and renders them to
strings.  Text artifacts (README, ignore files, helper scripts) live there as
``.j2`` files; structured documents are built in Python and serialised instead.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    Undefined variables raise instead of rendering as empty strings, so a
    template/context mismatch fails loudly rather than producing a subtly
    broken artifact.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["to_json"] = _to_json_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"README.md.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _to_json_filter(value: Any) -> str:
    """Render *value* as a JSON literal (strings get double quotes)."""
    return json.dumps(value)
