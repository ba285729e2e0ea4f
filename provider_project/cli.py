"""Command line entry point for provider-project.

Usage::

    provider-project provider.yml --output ./out
    provider-project provider.json --dry-run
    python -m provider_project provider.yml
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler
from rich.markup import escape

from provider_project.config import InvalidConfig, ProjectConfig
from provider_project.scaffolder import ProjectGenerator
from provider_project.utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``provider-project``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="provider-project",
        description="Generate the repository of a prebuilt Terraform provider package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  provider-project provider.yml\n"
            "  provider-project provider.yml -o ./providers\n"
            "  provider-project provider.json --dry-run\n"
        ),
    )
    parser.add_argument(
        "config",
        help="Path to the project options (.json, .yml or .yaml)",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Parent directory of the generated project (default: .)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render and list the files without writing them",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = ProjectConfig.load(Path(args.config))
    except InvalidConfig as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1

    generator = ProjectGenerator(config)
    if args.dry_run:
        files = generator.render()
        print_summary_table(
            {path: f"{len(content.splitlines())} lines" for path, content in files.items()},
            title=f"{config.name} ({config.terraform_provider})",
        )
        return 0

    if (Path(args.output) / config.name).exists():
        print_warning(f"Overwriting generated files in {Path(args.output) / config.name}")
    project_root = asyncio.run(generator.generate(Path(args.output)))
    print_success(f"Generated {config.name} in {project_root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
