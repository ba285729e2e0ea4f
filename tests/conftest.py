"""Shared pytest fixtures for the provider-project test suite.

Provides reusable fixtures for:
- Baseline project options and a factory for configs derived from them
- A shared ``ProjectRenderer`` and a ``synth`` helper returning the file map
- Option files on disk for the loader and CLI tests
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from provider_project.config import ProjectConfig
from provider_project.scaffolder.renderer import ProjectRenderer


# ---------------------------------------------------------------------------
# Options & configs
# ---------------------------------------------------------------------------

@pytest.fixture
def base_options() -> dict[str, Any]:
    """The options every test project starts from (camelCase, as in .projenrc)."""
    return {
        "name": "test",
        "terraformProvider": "random@~>2.0",
        "author": "cdktf-team",
        "authorAddress": "https://github.com/cdktf",
        "cdktfVersion": "0.10.3",
        "constructsVersion": "10.0.0",
        "defaultReleaseBranch": "main",
        "repositoryUrl": "github.com/cdktf/cdktf",
        "forceMajorVersion": 42,
        "devDeps": ["@cdktf/provider-project@^0.0.0"],
    }


@pytest.fixture
def make_config(base_options) -> Callable[..., ProjectConfig]:
    """Factory: ``make_config(isDeprecated=True, ...)`` overrides base options."""

    def _make(**overrides: Any) -> ProjectConfig:
        return ProjectConfig.from_options({**base_options, **overrides})

    return _make


@pytest.fixture
def config(make_config) -> ProjectConfig:
    return make_config()


@pytest.fixture
def deprecated_config(make_config) -> ProjectConfig:
    return make_config(isDeprecated=True, deprecationDate="December 11, 2023")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def renderer() -> ProjectRenderer:
    return ProjectRenderer()


@pytest.fixture
def synth(renderer, make_config) -> Callable[..., dict[str, str]]:
    """Render a project from the base options plus overrides."""

    def _synth(**overrides: Any) -> dict[str, str]:
        return renderer.render(make_config(**overrides))

    return _synth


# ---------------------------------------------------------------------------
# Option files
# ---------------------------------------------------------------------------

@pytest.fixture
def yaml_options_file(tmp_path: Path, base_options) -> Path:
    path = tmp_path / "provider.yml"
    path.write_text(yaml.safe_dump(base_options), encoding="utf-8")
    return path


@pytest.fixture
def json_options_file(tmp_path: Path, base_options) -> Path:
    path = tmp_path / "provider.json"
    path.write_text(json.dumps(base_options), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

SNAPSHOT_DIR = Path(__file__).parent / "test_scaffolder" / "snapshots"


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--update-snapshots",
        action="store_true",
        default=False,
        help="Rewrite the stored project snapshots from the current renderer output",
    )


def _read_snapshot(case_dir: Path) -> dict[str, str]:
    return {
        path.relative_to(case_dir).as_posix(): path.read_text(encoding="utf-8")
        for path in sorted(case_dir.rglob("*"))
        if path.is_file()
    }


def _write_snapshot(case_dir: Path, files: dict[str, str]) -> None:
    if case_dir.exists():
        for path in sorted(case_dir.rglob("*"), reverse=True):
            if path.is_file():
                path.unlink()
            else:
                path.rmdir()
    for rel_path, content in files.items():
        target = case_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


@pytest.fixture
def match_snapshot(request) -> Callable[[str, dict[str, str]], None]:
    """Compare a rendered file map against ``snapshots/<case>/``.

    A case with no stored snapshot is recorded on first run, as are all
    cases under ``--update-snapshots``.
    """
    update = request.config.getoption("--update-snapshots")

    def _match(case: str, files: dict[str, str]) -> None:
        case_dir = SNAPSHOT_DIR / case
        if update or not case_dir.is_dir():
            _write_snapshot(case_dir, files)
            return
        stored = _read_snapshot(case_dir)
        assert sorted(files) == sorted(stored), f"file set of snapshot '{case}' changed"
        for rel_path, content in files.items():
            assert content == stored[rel_path], f"{rel_path} differs from snapshot '{case}'"

    return _match
