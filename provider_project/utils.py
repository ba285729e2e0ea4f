"""Shared utility functions for provider-project.

Provides name-case helpers, deterministic JSON/YAML serialisation, async
file writing, and Rich-based console reporting.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def pascal_case(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def snake_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def split_dependency(spec: str) -> tuple[str, str]:
    """Split ``name@version`` into its parts, keeping npm scopes intact.

    Examples::

        split_dependency("@cdktf/provider-project@^0.0.0") -> ("@cdktf/provider-project", "^0.0.0")
        split_dependency("dot-prop") -> ("dot-prop", "")
    """
    spec = spec.strip()
    at = spec.rfind("@")
    if at <= 0:
        return spec, ""
    return spec[:at], spec[at + 1:]


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def to_json(data: Any) -> str:
    """Serialise *data* as pretty-printed JSON with a trailing newline.

    Key order is preserved so that identical input yields identical text.
    """
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class _BlockDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks.

    Shared objects are written out in full instead of as anchors/aliases.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_BlockDumper.add_representer(str, _represent_str)


def to_yaml(data: Any) -> str:
    """Serialise *data* as block-style YAML, preserving key order."""
    return yaml.dump(
        data,
        Dumper=_BlockDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=4096,
    )


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


async def write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path* in a worker thread.

    Parent directories are created automatically.
    """
    out = Path(path)
    await asyncio.to_thread(_write_file, out, content)
    return out


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
