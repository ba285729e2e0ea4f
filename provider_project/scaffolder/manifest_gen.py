"""Package manifest generation: ``package.json``, ``cdktf.json`` and ``.projen/deps.json``.

Manifests are assembled as ordered dictionaries and serialised by the caller,
so identical configurations always produce byte-identical JSON.
"""

from __future__ import annotations

from typing import Any

from provider_project.config import ProjectConfig
from provider_project.utils import split_dependency

from .constants import GENERATED_MARKER, SEND_CRASH_REPORTS, TYPES_YARGS_VERSION


# Tooling every provider package builds with, besides cdktf and constructs.
_BASE_DEV_DEPENDENCIES: dict[str, str] = {
    "dot-prop": "^5.2.0",
    "jsii-docgen": "^10.2.3",
    "jsii-pacmak": "^1.93.0",
    "projen": "^0.78.0",
}


class ManifestGenerator:
    """Builds the JSON manifests of a provider package."""

    def dev_dependencies(self, config: ProjectConfig) -> dict[str, str]:
        """Dev dependencies, sorted by name.

        cdktf and constructs are pinned to the lowest version their configured
        ranges allow; entries from ``dev_deps`` override the defaults.
        """
        node_major = config.min_node_version.split(".")[0]
        deps: dict[str, str] = {
            **_BASE_DEV_DEPENDENCIES,
            "@types/node": f"^{node_major}",
            "cdktf": config.cdktf_min_version,
            "cdktf-cli": config.cdktf_min_version,
            "constructs": config.constructs_min_version,
            "jsii": config.jsii_version,
            "jsii-rosetta": config.jsii_version,
            "typescript": config.typescript_version,
        }
        for spec in config.dev_deps:
            name, version = split_dependency(spec)
            deps[name] = version or "*"
        return dict(sorted(deps.items()))

    def peer_dependencies(self, config: ProjectConfig) -> dict[str, str]:
        return {
            "cdktf": config.cdktf_peer_range,
            "constructs": config.constructs_peer_range,
        }

    # -- package.json ------------------------------------------------------

    def package_json(self, config: ProjectConfig, task_names: list[str]) -> dict[str, Any]:
        """Build ``package.json``.

        Args:
            config: The project configuration.
            task_names: Names of the tasks in ``.projen/tasks.json``; each
                becomes an npm script delegating to projen.
        """
        provider = config.provider
        packages = config.packages

        cdktf_section: dict[str, Any] = {"isDeprecated": config.is_deprecated}
        if config.is_deprecated:
            cdktf_section["deprecationDate"] = config.deprecation_date
        provider_section = {"name": f"registry.terraform.io/{provider.source}"}
        if provider.constraint:
            provider_section["version"] = provider.constraint
        cdktf_section["provider"] = provider_section

        return {
            "name": packages.npm_name,
            "description": f"Prebuilt {provider.name} Provider for Terraform CDK (cdktf)",
            "repository": {"type": "git", "url": config.repository},
            "scripts": {name: f"npx projen {name}" for name in task_names},
            "author": {
                "name": config.author,
                "url": config.author_address,
                "organization": True,
            },
            "devDependencies": self.dev_dependencies(config),
            "peerDependencies": self.peer_dependencies(config),
            "resolutions": {"@types/yargs": TYPES_YARGS_VERSION},
            "keywords": ["cdk", "cdktf", "provider", "terraform", provider.name],
            "engines": {"node": f">= {config.min_node_version}"},
            "main": "lib/index.js",
            "license": "MPL-2.0",
            "publishConfig": {"access": "public"},
            "version": "0.0.0",
            "types": "lib/index.d.ts",
            "stability": "stable",
            "jsii": {
                "outdir": "dist",
                "targets": {
                    "java": {
                        "package": packages.java_package,
                        "maven": {
                            "groupId": packages.maven_group_id,
                            "artifactId": packages.maven_artifact_id,
                        },
                    },
                    "python": {
                        "distName": packages.pypi_dist_name,
                        "module": packages.pypi_module,
                    },
                    "dotnet": {
                        "namespace": packages.nuget_package_id,
                        "packageId": packages.nuget_package_id,
                    },
                    "go": {
                        "moduleName": packages.go_module,
                        "packageName": packages.go_package,
                    },
                },
                "tsc": {"outDir": "lib", "rootDir": "src"},
            },
            "cdktf": cdktf_section,
            "//": GENERATED_MARKER,
        }

    # -- cdktf.json --------------------------------------------------------

    def cdktf_json(self, config: ProjectConfig) -> dict[str, Any]:
        """Build ``cdktf.json``, used by ``cdktf get`` to fetch the provider schema."""
        return {
            "language": "typescript",
            "app": "echo noop",
            "sendCrashReports": SEND_CRASH_REPORTS,
            "terraformProviders": [config.terraform_provider],
            "terraformModules": [],
            "codeMakerOutput": ".gen",
            "context": {},
        }

    # -- .projen/deps.json -------------------------------------------------

    def deps_json(self, config: ProjectConfig) -> dict[str, Any]:
        """Build ``.projen/deps.json``: every dependency with its type."""
        entries: list[dict[str, str]] = []
        for name, version in self.dev_dependencies(config).items():
            entries.append(_dep_entry(name, version, "build"))
        for name, version in self.peer_dependencies(config).items():
            entries.append(_dep_entry(name, version, "peer"))
        entries.append(_dep_entry("@types/yargs", TYPES_YARGS_VERSION, "override"))
        entries.sort(key=lambda e: (e["name"], e["type"]))
        return {"dependencies": entries, "//": GENERATED_MARKER}


def _dep_entry(name: str, version: str, dep_type: str) -> dict[str, str]:
    entry = {"name": name}
    if version and version != "*":
        entry["version"] = version
    entry["type"] = dep_type
    return entry
