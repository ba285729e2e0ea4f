"""provider-project configuration.

``ProjectConfig`` is the single, immutable input of a render pass.  It is a
Pydantic v2 model so that every option is validated at construction time;
option names may be written in camelCase (as in a ``.projenrc`` file) or
snake_case.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from provider_project import semver
from provider_project.provider import PackageInfo, ProviderSpec, package_info, parse_provider
from provider_project.utils import snake_case


class InvalidConfig(ValueError):
    """Raised when project options are missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Invalid configuration for '{field}': {message}")


class ProjectConfig(BaseModel):
    """Options describing one prebuilt provider package."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Project name (output directory)")
    terraform_provider: str = Field(
        ..., description="Provider identifier, e.g. 'random@~>2.0' or 'integrations/github'"
    )
    author: str = Field(..., min_length=1)
    author_address: str = Field(..., min_length=1)
    cdktf_version: str = Field(..., description="Semver range of the supported cdktf release")
    constructs_version: str = Field(..., description="Semver range of the constructs library")
    default_release_branch: str = Field(default="main", min_length=1)
    repository_url: Optional[str] = Field(
        default=None, description="Defaults to the provider repository under github_namespace"
    )
    force_major_version: Optional[int] = Field(default=None, ge=0)
    min_major_version: int = Field(
        default=1, ge=0, description="Breaking changes bump at least to this major version"
    )
    dev_deps: tuple[str, ...] = Field(default=(), description="Extra 'name@version' dev dependencies")
    is_deprecated: bool = Field(default=False)
    deprecation_date: Optional[str] = Field(default=None, validate_default=True)
    use_custom_github_runner: bool = Field(default=False)
    namespace: str = Field(default="cdktf", min_length=1, description="npm scope")
    github_namespace: str = Field(default="cdktf", min_length=1)
    min_node_version: str = Field(default="18.12.0")
    jsii_version: str = Field(default="~5.2.0")
    typescript_version: str = Field(default="~5.2.0")
    copyright_year: int = Field(default=2021, ge=1970)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("name", "author", "author_address")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("name")
    @classmethod
    def _single_path_segment(cls, value: str) -> str:
        # The writer creates output_dir/<name>; it must stay inside output_dir.
        if "/" in value or "\\" in value or value.strip() in (".", ".."):
            raise ValueError("must be a single directory name without path separators")
        return value

    @field_validator("terraform_provider")
    @classmethod
    def _valid_provider(cls, value: str) -> str:
        parse_provider(value)
        return value

    @field_validator("cdktf_version", "constructs_version", "jsii_version", "typescript_version")
    @classmethod
    def _valid_range(cls, value: str) -> str:
        semver.min_version(value)
        return value

    @field_validator("min_node_version")
    @classmethod
    def _exact_version(cls, value: str) -> str:
        semver.parse_version(value)
        return value

    @field_validator("dev_deps")
    @classmethod
    def _valid_dev_deps(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for dep in value:
            if not dep.strip():
                raise ValueError("dependency names must not be blank")
        return value

    @field_validator("deprecation_date")
    @classmethod
    def _date_when_deprecated(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("is_deprecated") and not (value and value.strip()):
            raise ValueError("is required when is_deprecated is set")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def provider(self) -> ProviderSpec:
        return parse_provider(self.terraform_provider)

    @property
    def packages(self) -> PackageInfo:
        return package_info(self.provider, self.namespace, self.github_namespace)

    @property
    def repository(self) -> str:
        if self.repository_url:
            return self.repository_url
        return f"https://github.com/{self.github_namespace}/{self.namespace}-provider-{self.provider.name}.git"

    @property
    def cdktf_peer_range(self) -> str:
        """Peer range for cdktf: an exact version becomes a caret range."""
        return _peer_range(self.cdktf_version)

    @property
    def constructs_peer_range(self) -> str:
        return _peer_range(self.constructs_version)

    @property
    def cdktf_min_version(self) -> str:
        """Lowest cdktf version allowed, pinned in dev dependencies."""
        return str(semver.min_version(self.cdktf_version))

    @property
    def constructs_min_version(self) -> str:
        return str(semver.min_version(self.constructs_version))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **kwargs: Any) -> "ProjectConfig":
        """Validate a mapping of options, accepting camelCase names.

        Raises:
            InvalidConfig: Naming the first offending option.
        """
        merged = {**(options or {}), **kwargs}
        for key in merged:
            if not isinstance(key, str):
                raise InvalidConfig(str(key), "option names must be strings")
        normalised = {snake_case(key): value for key, value in merged.items()}
        try:
            return cls.model_validate(normalised)
        except ValidationError as exc:
            raise _invalid_config(exc) from exc

    @classmethod
    def load(cls, path: str | Path) -> "ProjectConfig":
        """Load options from a ``.json``, ``.yml`` or ``.yaml`` file.

        Raises:
            InvalidConfig: If the file is unreadable, not a mapping, or the
                options do not validate.
        """
        file_path = Path(path)
        try:
            raw = file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidConfig(str(file_path), f"cannot read file: {exc}") from exc

        try:
            if file_path.suffix.lower() == ".json":
                data = json.loads(raw)
            else:
                data = yaml.safe_load(raw)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise InvalidConfig(str(file_path), f"cannot parse file: {exc}") from exc

        if not isinstance(data, dict):
            raise InvalidConfig(str(file_path), "expected a mapping of options")
        return cls.from_options(data)


def _peer_range(version: str) -> str:
    if semver.is_version(version):
        return f"^{version.strip()}"
    return version


def _invalid_config(exc: ValidationError) -> InvalidConfig:
    """Convert the first Pydantic error into an ``InvalidConfig``."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    message = error.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return InvalidConfig(field, message)
