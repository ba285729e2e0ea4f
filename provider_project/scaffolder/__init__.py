"""provider-project scaffolder -- renders prebuilt provider package repositories.

This module takes a ``ProjectConfig`` and renders the package manifests,
task-runner configuration, CI workflows and README of a prebuilt Terraform
provider binding package.

Quick usage::

    from provider_project.config import ProjectConfig
    from provider_project.scaffolder import ProjectGenerator, ProjectRenderer

    config = ProjectConfig(
        name="cdktf-provider-random",
        terraform_provider="random@~> 3.1",
        author="cdktf-team",
        author_address="https://github.com/cdktf",
        cdktf_version="0.10.3",
        constructs_version="10.0.0",
    )
    files = ProjectRenderer().render(config)
    project_path = await ProjectGenerator(config).generate("/tmp/output")
"""

from provider_project.scaffolder.generator import ProjectGenerator
from provider_project.scaffolder.renderer import ProjectRenderer, render
from provider_project.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectGenerator",
    "ProjectRenderer",
    "TemplateRenderer",
    "render",
]
