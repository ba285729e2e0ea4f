"""Tests for TemplateRenderer and the text templates it ships with."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from provider_project.scaffolder.templates import TemplateRenderer


pytestmark = pytest.mark.unit


class TestTemplateRenderer:
    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.txt.j2").write_text("Hello {{ who }}!\n", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.render("hello.txt.j2", {"who": "cdktf"}) == "Hello cdktf!\n"

    def test_to_json_filter(self, tmp_path: Path):
        (tmp_path / "value.js.j2").write_text("const v = {{ v | to_json }};\n", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.render("value.js.j2", {"v": 'say "hi"'}) == 'const v = "say \\"hi\\"";\n'

    def test_output_is_not_html_escaped(self, tmp_path: Path):
        (tmp_path / "plain.j2").write_text("{{ v }}", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.render("plain.j2", {"v": "a < b & c"}) == "a < b & c"

    def test_undefined_variable_raises(self, tmp_path: Path):
        (tmp_path / "missing.j2").write_text("{{ missing }}", encoding="utf-8")
        with pytest.raises(UndefinedError):
            TemplateRenderer(tmp_path).render("missing.j2", {})


class TestBundledTemplates:
    def test_copywrite_year(self, renderer, config):
        text = renderer.templates.render("copywrite.hcl.j2", renderer.build_context(config))
        assert "copyright_year = 2021" in text
        assert 'license        = "MPL-2.0"' in text

    def test_upgrade_script_embeds_provider(self, renderer, config):
        text = renderer.templates.render(
            "scripts/check-for-upgrades.js.j2", renderer.build_context(config)
        )
        assert 'const providerSource = "hashicorp/random";' in text
        assert 'const constraint = "~>2.0";' in text

    def test_upgrade_script_filters_by_constraint(self, renderer, config):
        text = renderer.templates.render(
            "scripts/check-for-upgrades.js.j2", renderer.build_context(config)
        )
        assert "/v1/providers/${providerSource}/versions" in text
        assert "satisfies(version, constraint)" in text
        assert "res.statusCode !== 200" in text
        assert "current !== latest" not in text

    def test_upgrade_script_only_reports_newer_versions(self, renderer, config):
        text = renderer.templates.render(
            "scripts/check-for-upgrades.js.j2", renderer.build_context(config)
        )
        assert "compare(parseVersion(latest), parseVersion(current)) > 0" in text

    def test_upgrade_script_without_constraint(self, renderer, make_config):
        config = make_config(terraformProvider="random")
        text = renderer.templates.render(
            "scripts/check-for-upgrades.js.j2", renderer.build_context(config)
        )
        assert 'const constraint = "";' in text

    def test_gitignore_keeps_generated_files(self, renderer, config):
        text = renderer.templates.render("gitignore.j2", renderer.build_context(config))
        assert "!/.github/workflows/provider-upgrade.yml\n" in text
        assert "!/cdktf.json\n" in text

    def test_readme_lists_packages(self, renderer, config):
        text = renderer.templates.render("README.md.j2", renderer.build_context(config))
        assert "`npm install @cdktf/provider-random`" in text
        assert "`pipenv install cdktf-cdktf-provider-random`" in text
        assert "`dotnet add package HashiCorp.Cdktf.Providers.Random`" in text
        assert "<artifactId>cdktf-provider-random</artifactId>" in text
        assert "`go get github.com/cdktf/cdktf-provider-random-go/random/<version>`" in text

    def test_readme_versioning_mentions_constraint(self, renderer, config):
        text = renderer.templates.render("README.md.j2", renderer.build_context(config))
        assert "it always tracks `latest` of `~>2.0` with every release" in text
