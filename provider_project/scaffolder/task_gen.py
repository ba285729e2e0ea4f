"""Task-runner configuration: ``.projen/tasks.json``.

Every task is a ``{name, description, env, steps}`` record; steps either
``exec`` a shell command, ``spawn`` another task, or run a projen ``builtin``.
Tasks are emitted in name order.
"""

from __future__ import annotations

from typing import Any

from provider_project.config import ProjectConfig

from .constants import CHECKPOINT_DISABLE, GENERATED_MARKER, TARGETS


class TaskGenerator:
    """Builds ``.projen/tasks.json`` for a provider package."""

    def release_env(self, config: ProjectConfig) -> dict[str, str]:
        """Version-bump settings shared by ``bump``, ``unbump`` and ``release``.

        ``MIN_MAJOR`` makes breaking changes bump at least to major 1.
        """
        env = {
            "OUTFILE": "package.json",
            "CHANGELOG": "dist/changelog.md",
            "BUMPFILE": "dist/version.txt",
            "RELEASETAG": "dist/releasetag.txt",
            "RELEASE_TAG_PREFIX": "",
            "MIN_MAJOR": str(config.min_major_version),
        }
        if config.force_major_version is not None:
            env["MAJOR"] = str(config.force_major_version)
        return env

    def tasks(self, config: ProjectConfig) -> dict[str, dict[str, Any]]:
        """Return every task keyed by name, sorted."""
        provider = config.provider
        release_env = self.release_env(config)

        tasks: dict[str, dict[str, Any]] = {
            "build": _task(
                "build",
                "Full release build",
                steps=[
                    {"spawn": "default"},
                    {"spawn": "pre-compile"},
                    {"spawn": "compile"},
                    {"spawn": "post-compile"},
                    {"spawn": "test"},
                    {"spawn": "package"},
                ],
            ),
            "bump": _task(
                "bump",
                "Bumps version based on latest git tag and generates a changelog entry",
                env=release_env,
                steps=[{"builtin": "release/bump-version"}],
                condition='! git log --oneline -1 | grep -q "chore(release):"',
            ),
            "check-if-new-provider-version": _task(
                "check-if-new-provider-version",
                "Checks if a new provider version is available",
                steps=[{"exec": "node ./scripts/check-for-upgrades.js"}],
            ),
            "compile": _task(
                "compile",
                "Only compile",
                steps=[{"exec": "jsii --silence-warnings=reserved-word"}],
            ),
            "default": _task(
                "default",
                "Synthesize project files",
                steps=[{"exec": "node .projenrc.js"}],
            ),
            "docgen": _task(
                "docgen",
                "Generate API.md from .jsii manifest",
                steps=[{"exec": "jsii-docgen --split-by-submodule -l typescript -l python -l java -l csharp -l go"}],
            ),
            "fetch": _task(
                "fetch",
                "Fetch the provider schema and generate bindings",
                env={"CHECKPOINT_DISABLE": CHECKPOINT_DISABLE},
                steps=[
                    {
                        "exec": (
                            "mkdir -p src && rm -rf ./src/* && cdktf get && "
                            f"cp -R .gen/providers/{provider.name}/* ./src/ && "
                            "cp .gen/versions.json ./src/version.json"
                        )
                    }
                ],
            ),
            "package": _task(
                "package",
                "Creates the distribution package",
                steps=[
                    {"exec": "mkdir -p dist/js"},
                    {"exec": "npm pack --pack-destination dist/js"},
                ],
            ),
            "package-all": _task(
                "package-all",
                "Packages artifacts for all target languages",
                steps=[{"spawn": f"package:{target}"} for target in TARGETS],
            ),
            "post-compile": _task(
                "post-compile",
                "Runs after successful compilation",
                steps=[{"spawn": "docgen"}],
            ),
            "pre-compile": _task("pre-compile", "Prepare the project for compilation"),
            "release": _task(
                "release",
                f'Prepare a release from "{config.default_release_branch}" branch',
                env={"RELEASE": "true", **release_env},
                steps=[
                    {"exec": "rm -fr dist"},
                    {"spawn": "bump"},
                    {"spawn": "build"},
                    {"spawn": "unbump"},
                    {"exec": "git diff --ignore-space-at-eol --exit-code"},
                ],
            ),
            "test": _task(
                "test",
                "Run tests",
                steps=[{"exec": "jest --passWithNoTests --updateSnapshot"}],
            ),
            "unbump": _task(
                "unbump",
                "Restores version to 0.0.0",
                env=release_env,
                steps=[{"builtin": "release/reset-version"}],
            ),
        }
        for target in TARGETS:
            tasks[f"package:{target}"] = _task(
                f"package:{target}",
                f"Create {target} language bindings",
                steps=[{"exec": f"jsii-pacmak -v --target {target}"}],
            )
        return dict(sorted(tasks.items()))

    def tasks_json(self, config: ProjectConfig) -> dict[str, Any]:
        """Build the full ``.projen/tasks.json`` document."""
        return {
            "tasks": self.tasks(config),
            "env": {
                "PATH": '$(npx -c "node --print process.env.PATH")',
                "CHECKPOINT_DISABLE": CHECKPOINT_DISABLE,
            },
            "//": GENERATED_MARKER,
        }


def _task(
    name: str,
    description: str,
    *,
    env: dict[str, str] | None = None,
    steps: list[dict[str, str]] | None = None,
    condition: str | None = None,
) -> dict[str, Any]:
    task: dict[str, Any] = {"name": name, "description": description}
    if env:
        task["env"] = dict(env)
    if condition:
        task["condition"] = condition
    if steps:
        task["steps"] = steps
    return task
