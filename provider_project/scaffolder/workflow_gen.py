"""GitHub Actions workflow generation.

Workflows are assembled as ordered job and step documents and dumped as YAML.
Flag-dependent content (deprecation handling, custom runners) is a matter of
which steps go into which job, never of string patching, so the position of
every step is fixed by the order the builders below append them in.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from provider_project.config import ProjectConfig
from provider_project.utils import to_yaml

from .constants import (
    CHECKOUT_ACTION,
    CHECKPOINT_DISABLE,
    CUSTOM_RUNNER,
    DEFAULT_RUNNER,
    DEPRECATION_STEP_NAME,
    GENERATED_MARKER,
    GO_PACKAGE_JOB,
    GO_RELEASE_JOB,
    NODE_ACTION,
    SETUP_COPYWRITE_ACTION,
    TARGETS,
)

logger = logging.getLogger(__name__)

Step = dict[str, Any]
Job = dict[str, Any]

_ON_LATEST_COMMIT = "needs.release.outputs.latest_commit == github.sha"
_ARTIFACT = "build-artifact"

# Per-language toolchain setup for the package and publish jobs.
_LANGUAGE_SETUP: dict[str, Step] = {
    "python": {"name": "Setup Python", "uses": "actions/setup-python@v4", "with": {"python-version": "3.x"}},
    "dotnet": {"name": "Setup .NET", "uses": "actions/setup-dotnet@v3", "with": {"dotnet-version": "6.x"}},
    "java": {
        "name": "Setup Java",
        "uses": "actions/setup-java@v3",
        "with": {"distribution": "temurin", "java-version": "11.x"},
    },
    "go": {"name": "Setup Go", "uses": "actions/setup-go@v3", "with": {"go-version": "^1.18.0"}},
}

# (target, job id, display name, publish command, env)
_PUBLISH_TARGETS: list[tuple[str, str, str, str, dict[str, str]]] = [
    (
        "js",
        "release_npm",
        "Publish to npm",
        "npx -p publib@latest publib-npm",
        {
            "NPM_DIST_TAG": "latest",
            "NPM_REGISTRY": "registry.npmjs.org",
            "NPM_TOKEN": "${{ secrets.NPM_TOKEN }}",
        },
    ),
    (
        "python",
        "release_pypi",
        "Publish to PyPI",
        "npx -p publib@latest publib-pypi",
        {
            "TWINE_USERNAME": "${{ secrets.TWINE_USERNAME }}",
            "TWINE_PASSWORD": "${{ secrets.TWINE_PASSWORD }}",
        },
    ),
    (
        "dotnet",
        "release_nuget",
        "Publish to NuGet Gallery",
        "npx -p publib@latest publib-nuget",
        {"NUGET_API_KEY": "${{ secrets.NUGET_API_KEY }}"},
    ),
    (
        "java",
        "release_maven",
        "Publish to Maven Central",
        "npx -p publib@latest publib-maven",
        {
            "MAVEN_ENDPOINT": "https://hashicorp.oss.sonatype.org",
            "MAVEN_GPG_PRIVATE_KEY": "${{ secrets.MAVEN_GPG_PRIVATE_KEY }}",
            "MAVEN_GPG_PRIVATE_KEY_PASSPHRASE": "${{ secrets.MAVEN_GPG_PRIVATE_KEY_PASSPHRASE }}",
            "MAVEN_PASSWORD": "${{ secrets.MAVEN_PASSWORD }}",
            "MAVEN_USERNAME": "${{ secrets.MAVEN_USERNAME }}",
            "MAVEN_STAGING_PROFILE_ID": "${{ secrets.MAVEN_STAGING_PROFILE_ID }}",
        },
    ),
    (
        "go",
        GO_RELEASE_JOB,
        "Publish to GitHub Go Module Repository",
        "npx -p publib@latest publib-golang",
        {
            "GIT_USER_NAME": "CDK for Terraform Team",
            "GIT_USER_EMAIL": "github-team-tf-cdk@hashicorp.com",
            "GITHUB_TOKEN": "${{ secrets.GO_GITHUB_TOKEN }}",
        },
    ),
]


class WorkflowGenerator:
    """Builds the CI workflows of a provider package."""

    # -- Shared pieces -----------------------------------------------------

    def runs_on(self, config: ProjectConfig) -> str | list[str]:
        if config.use_custom_github_runner:
            return list(CUSTOM_RUNNER)
        return DEFAULT_RUNNER

    def job(self, config: ProjectConfig, steps: list[Step], **fields: Any) -> Job:
        """Create a job with the configured runner and telemetry disabled."""
        job: Job = {}
        if "name" in fields:
            job["name"] = fields.pop("name")
        if "needs" in fields:
            job["needs"] = fields.pop("needs")
        job["runs-on"] = self.runs_on(config)
        job.update(fields)
        job["env"] = {"CI": "true", "CHECKPOINT_DISABLE": CHECKPOINT_DISABLE, **job.get("env", {})}
        job["steps"] = steps
        return job

    def setup_node(self, config: ProjectConfig) -> Step:
        return {"name": "Setup Node.js", "uses": NODE_ACTION, "with": {"node-version": config.min_node_version}}

    def go_source_steps(self, config: ProjectConfig, working_directory: str = "dist/go") -> list[Step]:
        """Steps that fix up the generated Go sources before they are published.

        A deprecated project first gets a ``// Deprecated:`` notice on every
        Go package clause; the sources then always receive copyright headers.
        """
        steps: list[Step] = []
        if config.is_deprecated:
            notice = (
                "// Deprecated: HashiCorp is no longer publishing new versions of the "
                f"prebuilt provider for {config.provider.name}."
            )
            steps.append({
                "name": "Add deprecation notice to the Go package",
                "run": "\n".join([
                    f'NOTICE="{notice}"',
                    "find . -name '*.go' -exec sed -i \"s|^package |${NOTICE}\\npackage |\" {} +",
                ]),
                "working-directory": working_directory,
            })
        steps.append({"name": "Setup Copywrite tool", "uses": SETUP_COPYWRITE_ACTION})
        steps.append({
            "name": "Copy copywrite hcl file",
            "run": "cp -f ../.copywrite.hcl .copywrite.hcl",
            "working-directory": working_directory,
        })
        steps.append({
            "name": "Add headers using Copywrite tool",
            "run": "copywrite headers",
            "working-directory": working_directory,
        })
        return steps

    def _download_artifact(self) -> list[Step]:
        return [
            {
                "name": "Download build artifacts",
                "uses": "actions/download-artifact@v3",
                "with": {"name": _ARTIFACT, "path": "dist"},
            },
            {
                "name": "Restore build artifact permissions",
                "run": "cd dist && setfacl --restore=permissions-backup.acl",
                "continue-on-error": True,
            },
        ]

    def _upload_artifact(self, condition: str | None = None) -> list[Step]:
        steps: list[Step] = [
            {
                "name": "Include copywrite configuration",
                "run": "cp -f .copywrite.hcl dist/.copywrite.hcl",
            },
            {
                "name": "Backup artifact permissions",
                "run": "cd dist && getfacl -R . > permissions-backup.acl",
                "continue-on-error": True,
            },
            {
                "name": "Upload artifact",
                "uses": "actions/upload-artifact@v3",
                "with": {"name": _ARTIFACT, "path": "dist"},
            },
        ]
        if condition:
            for step in steps:
                step["if"] = condition
        return steps

    def _install_steps(self, config: ProjectConfig, checkout: Step) -> list[Step]:
        return [
            checkout,
            self.setup_node(config),
            {
                "name": "Setup Terraform",
                "uses": "hashicorp/setup-terraform@v2",
                "with": {"terraform_wrapper": False},
            },
            {"name": "Install dependencies", "run": "yarn install --check-files --frozen-lockfile"},
        ]

    # -- build.yml ---------------------------------------------------------

    def build_workflow(self, config: ProjectConfig) -> dict[str, Any]:
        """Pull-request build: compile once, then package every target."""
        checkout = {
            "name": "Checkout",
            "uses": CHECKOUT_ACTION,
            "with": {
                "ref": "${{ github.event.pull_request.head.ref }}",
                "repository": "${{ github.event.pull_request.head.repo.full_name }}",
            },
        }
        jobs: dict[str, Job] = {
            "build": self.job(
                config,
                [
                    *self._install_steps(config, checkout),
                    {"name": "build", "run": "npx projen build"},
                    *self._upload_artifact(),
                ],
                permissions={"contents": "read"},
            ),
        }

        for target in TARGETS:
            steps = self._install_steps(config, checkout)
            if target in _LANGUAGE_SETUP:
                steps.append(copy.deepcopy(_LANGUAGE_SETUP[target]))
            steps.extend(self._download_artifact())
            steps.append({"name": f"Create {target} artifact", "run": f"npx projen package:{target}"})
            if target == "go":
                steps.extend(self.go_source_steps(config))
            job_id = GO_PACKAGE_JOB if target == "go" else f"package-{target}"
            jobs[job_id] = self.job(
                config,
                steps,
                needs="build",
                permissions={"contents": "read"},
            )

        return {
            "name": "build",
            "on": {"pull_request": {}, "workflow_dispatch": {}},
            "jobs": jobs,
        }

    # -- release.yml -------------------------------------------------------

    def release_workflow(self, config: ProjectConfig) -> dict[str, Any]:
        """Release on every push to the release branch, then publish each target."""
        checkout = {"name": "Checkout", "uses": CHECKOUT_ACTION, "with": {"fetch-depth": 0}}
        published_if = "${{ steps.git_remote.outputs.latest_commit == github.sha }}"

        release_steps: list[Step] = [
            *self._install_steps(config, checkout),
            {
                "name": "Set git identity",
                "run": "\n".join([
                    'git config user.name "github-actions"',
                    'git config user.email "github-actions@github.com"',
                ]),
            },
            {"name": "release", "run": "npx projen release"},
            {
                "name": "Check for new commits",
                "id": "git_remote",
                "run": 'echo "latest_commit=$(git ls-remote origin -h ${{ github.ref }} | cut -f1)" >> $GITHUB_OUTPUT',
            },
            *self._upload_artifact(published_if),
        ]

        jobs: dict[str, Job] = {
            "release": self.job(
                config,
                release_steps,
                permissions={"contents": "write"},
                outputs={"latest_commit": "${{ steps.git_remote.outputs.latest_commit }}"},
            ),
            "release_github": self.job(
                config,
                [
                    self.setup_node(config),
                    *self._download_artifact(),
                    {
                        "name": "Release",
                        "env": {
                            "GITHUB_TOKEN": "${{ secrets.GITHUB_TOKEN }}",
                            "GITHUB_REPOSITORY": "${{ github.repository }}",
                            "GITHUB_REF": "${{ github.ref }}",
                        },
                        "run": "\n".join([
                            "errout=$(mktemp)",
                            "gh release create $(cat dist/releasetag.txt) -R $GITHUB_REPOSITORY "
                            "-F dist/changelog.md -t $(cat dist/releasetag.txt) --target $GITHUB_REF 2> $errout && true",
                            "exitcode=$?",
                            'if [ $exitcode -ne 0 ] && ! grep -q "Release.tag_name already exists" $errout; then',
                            "  cat $errout",
                            "  exit $exitcode",
                            "fi",
                        ]),
                    },
                ],
                name="Publish to GitHub Releases",
                needs="release",
                permissions={"contents": "write"},
                **{"if": _ON_LATEST_COMMIT},
            ),
        }

        for target, job_id, title, command, secrets in _PUBLISH_TARGETS:
            steps: list[Step] = [self.setup_node(config)]
            if target in _LANGUAGE_SETUP:
                steps.append(copy.deepcopy(_LANGUAGE_SETUP[target]))
            steps.extend(self._download_artifact())
            if target == "go":
                steps.extend(self.go_source_steps(config))
            steps.append({"name": "Release", "env": dict(secrets), "run": command})
            if target == "js" and config.is_deprecated:
                steps.append(self._npm_deprecation_step(config))
            jobs[job_id] = self.job(
                config,
                steps,
                name=title,
                needs="release",
                permissions={"contents": "read"},
                **{"if": _ON_LATEST_COMMIT},
            )

        return {
            "name": "release",
            "on": {
                "push": {"branches": [config.default_release_branch]},
                "workflow_dispatch": {},
            },
            "concurrency": {"group": "${{ github.workflow }}", "cancel-in-progress": False},
            "jobs": jobs,
        }

    def _npm_deprecation_step(self, config: ProjectConfig) -> Step:
        provider = config.provider
        message = (
            f"See https://cdk.tf/imports for details on how to continue to use the {provider.source} "
            "provider in your CDK for Terraform (CDKTF) projects by generating the bindings locally."
        )
        return {
            "name": DEPRECATION_STEP_NAME,
            "env": {"NPM_TOKEN": "${{ secrets.NPM_TOKEN }}"},
            "run": "\n".join([
                'echo "//registry.npmjs.org/:_authToken=$NPM_TOKEN" > ~/.npmrc',
                f'npm deprecate {config.packages.npm_name} "{message}"',
            ]),
        }

    # -- provider-upgrade.yml ----------------------------------------------

    def upgrade_workflow(self, config: ProjectConfig) -> dict[str, Any]:
        """Daily check for a newer provider release; opens a PR when one exists."""
        provider = config.provider
        checkout = {"name": "Checkout", "uses": CHECKOUT_ACTION}
        available = "steps.check_version.outputs.new_version == 'available'"
        tracked = f"`{provider.constraint}`" if provider.constraint else "`latest`"
        steps: list[Step] = [
            *self._install_steps(config, checkout),
            {
                "name": "Check for new provider version",
                "id": "check_version",
                "run": "npx projen check-if-new-provider-version",
            },
            {"name": "Fetch new provider bindings", "if": available, "run": "npx projen fetch"},
            {
                "name": "Create Pull Request",
                "if": available,
                "uses": "peter-evans/create-pull-request@v5",
                "with": {
                    "branch": "auto/provider-upgrade",
                    "commit-message": "fix: upgrade provider",
                    "title": "fix: upgrade provider",
                    "body": f"This PR upgrades the {provider.source} provider to the latest version matching {tracked}.",
                    "labels": "automerge,auto-approve",
                    "token": "${{ secrets.GH_TOKEN }}",
                },
            },
        ]
        return {
            "name": "provider-upgrade",
            "on": {"schedule": [{"cron": "0 3 * * *"}], "workflow_dispatch": {}},
            "jobs": {
                "upgrade": self.job(
                    config,
                    steps,
                    permissions={"contents": "write", "pull-requests": "write"},
                ),
            },
        }

    # -- Rendering ---------------------------------------------------------

    def generate_all(self, config: ProjectConfig) -> dict[str, str]:
        """Render every workflow to YAML text keyed by repository path.

        ``provider-upgrade.yml`` is omitted for deprecated projects.
        """
        workflows = {
            ".github/workflows/build.yml": self.build_workflow(config),
            ".github/workflows/release.yml": self.release_workflow(config),
        }
        if config.is_deprecated:
            logger.debug("Skipping provider-upgrade workflow for deprecated provider")
        else:
            workflows[".github/workflows/provider-upgrade.yml"] = self.upgrade_workflow(config)
        return {path: _with_marker(document) for path, document in workflows.items()}


def _with_marker(document: dict[str, Any]) -> str:
    return f"# {GENERATED_MARKER}\n\n{to_yaml(document)}"
