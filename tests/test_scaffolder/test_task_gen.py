"""Tests for ``.projen/tasks.json`` (provider_project.scaffolder.task_gen)."""

from __future__ import annotations

import pytest

from provider_project.scaffolder.task_gen import TaskGenerator


pytestmark = pytest.mark.unit


@pytest.fixture
def gen() -> TaskGenerator:
    return TaskGenerator()


class TestReleaseEnv:
    def test_min_major_default(self, gen, config):
        assert gen.release_env(config)["MIN_MAJOR"] == "1"

    def test_min_major_override(self, gen, make_config):
        assert gen.release_env(make_config(minMajorVersion=3))["MIN_MAJOR"] == "3"

    def test_forced_major(self, gen, config):
        assert gen.release_env(config)["MAJOR"] == "42"

    def test_no_forced_major(self, gen, make_config):
        assert "MAJOR" not in gen.release_env(make_config(forceMajorVersion=None))


class TestTasks:
    def test_tasks_sorted(self, gen, config):
        names = list(gen.tasks(config))
        assert names == sorted(names)

    def test_package_task_per_target(self, gen, config):
        tasks = gen.tasks(config)
        for target in ("js", "python", "dotnet", "java", "go"):
            assert tasks[f"package:{target}"]["steps"] == [
                {"exec": f"jsii-pacmak -v --target {target}"}
            ]

    def test_release_task(self, gen, config):
        release = gen.tasks(config)["release"]
        assert release["description"] == 'Prepare a release from "main" branch'
        assert release["env"]["RELEASE"] == "true"
        assert {"spawn": "build"} in release["steps"]

    def test_release_branch_in_description(self, gen, make_config):
        release = gen.tasks(make_config(defaultReleaseBranch="trunk"))["release"]
        assert release["description"] == 'Prepare a release from "trunk" branch'

    def test_fetch_copies_provider_bindings(self, gen, config):
        fetch = gen.tasks(config)["fetch"]
        assert fetch["env"] == {"CHECKPOINT_DISABLE": "1"}
        assert "cp -R .gen/providers/random/* ./src/" in fetch["steps"][0]["exec"]

    def test_task_without_steps(self, gen, config):
        assert gen.tasks(config)["pre-compile"] == {
            "name": "pre-compile",
            "description": "Prepare the project for compilation",
        }


class TestTasksJson:
    def test_telemetry_disabled(self, gen, config):
        assert gen.tasks_json(config)["env"]["CHECKPOINT_DISABLE"] == "1"

    def test_generated_marker(self, gen, config):
        assert gen.tasks_json(config)["//"].startswith("~~ Generated by projen")
