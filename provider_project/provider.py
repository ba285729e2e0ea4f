"""Terraform provider identifiers and the package names derived from them.

A provider is configured as ``[namespace/]name[@constraint]``, for example
``random@~>2.0`` or ``integrations/github@~> 5.0``.  The namespace defaults to
``hashicorp``.  The constraint uses Terraform's syntax (``~>``, ``>=``,
comma-separated) and is only needed here to build registry links and the
README's versioning notes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from provider_project import semver
from provider_project.utils import pascal_case, snake_case

REGISTRY_URL = "https://registry.terraform.io/providers"
DEFAULT_PROVIDER_NAMESPACE = "hashicorp"

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
_NAMESPACE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_TERRAFORM_CONSTRAINT_RE = re.compile(
    r"^\s*(?:=|!=|>=|<=|>|<|~>)?\s*v?\d+(?:\.\d+){0,2}(?:-[0-9A-Za-z.-]+)?\s*$"
)


@dataclass(frozen=True)
class ProviderSpec:
    """A parsed Terraform provider identifier."""

    namespace: str
    name: str
    constraint: str = ""

    @property
    def source(self) -> str:
        """``namespace/name`` as used in Terraform ``required_providers``."""
        return f"{self.namespace}/{self.name}"

    @property
    def version(self) -> str:
        """The constraint's version coerced to ``x.y.z`` (empty when unconstrained)."""
        if not self.constraint:
            return ""
        first = self.constraint.split(",")[0]
        coerced = semver.coerce(first)
        return str(coerced) if coerced else ""

    @property
    def registry_url(self) -> str:
        """Registry page of the provider; the version segment is empty when unconstrained."""
        return f"{REGISTRY_URL}/{self.namespace}/{self.name}/{self.version}"


def parse_provider(identifier: str) -> ProviderSpec:
    """Parse ``[registry/][namespace/]name[@constraint]``.

    Raises:
        ValueError: If the name, namespace or any constraint part is malformed.
    """
    text = identifier.strip()
    if not text:
        raise ValueError("Provider identifier must not be empty")

    source, _, constraint = text.partition("@")
    constraint = constraint.strip()
    parts = [p for p in source.strip().split("/") if p]
    if not parts:
        raise ValueError(f"Provider identifier {identifier!r} has no name")

    name = parts[-1].lower()
    namespace = parts[-2] if len(parts) > 1 else DEFAULT_PROVIDER_NAMESPACE
    if not _NAME_RE.match(name):
        raise ValueError(f"Invalid provider name {name!r} in {identifier!r}")
    if not _NAMESPACE_RE.match(namespace):
        raise ValueError(f"Invalid provider namespace {namespace!r} in {identifier!r}")

    if "@" in text and not constraint:
        raise ValueError(f"Provider identifier {identifier!r} has an empty version constraint")
    for part in constraint.split(",") if constraint else []:
        if not _TERRAFORM_CONSTRAINT_RE.match(part):
            raise ValueError(f"Invalid version constraint {constraint!r} in {identifier!r}")

    return ProviderSpec(namespace=namespace, name=name, constraint=constraint)


# ---------------------------------------------------------------------------
# Package coordinates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageInfo:
    """Package names of the generated bindings in every target ecosystem."""

    npm_name: str
    pypi_dist_name: str
    pypi_module: str
    nuget_package_id: str
    maven_group_id: str
    maven_artifact_id: str
    java_package: str
    go_module: str
    go_package: str

    @property
    def go_import_path(self) -> str:
        return f"{self.go_module}/{self.go_package}"


def package_info(provider: ProviderSpec, namespace: str, github_namespace: str) -> PackageInfo:
    """Derive the published package names for *provider*.

    ``namespace`` is the npm scope (``cdktf`` -> ``@cdktf/provider-random``)
    and ``github_namespace`` the GitHub organisation hosting the Go module.
    """
    dashed = f"{namespace}-provider-{provider.name}"
    underscored = snake_case(provider.name)
    return PackageInfo(
        npm_name=f"@{namespace}/provider-{provider.name}",
        pypi_dist_name=f"{namespace}-cdktf-provider-{provider.name}",
        pypi_module=f"{snake_case(namespace)}_cdktf_provider_{underscored}",
        nuget_package_id=f"HashiCorp.{pascal_case(namespace)}.Providers.{pascal_case(provider.name)}",
        maven_group_id="com.hashicorp",
        maven_artifact_id=dashed,
        java_package=f"com.hashicorp.{snake_case(namespace)}.providers.{underscored}",
        go_module=f"github.com/{github_namespace}/{dashed}-go",
        go_package=underscored.replace("_", ""),
    )
