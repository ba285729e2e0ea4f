"""End-to-end tests for the ``provider-project`` command line.

These run ``main()`` against option files on disk and check the generated
project tree, the dry-run listing and the error exit code.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from provider_project.cli import main


pytestmark = pytest.mark.integration


class TestGenerateCommand:
    def test_generates_project_from_yaml(self, yaml_options_file: Path, tmp_path: Path):
        out = tmp_path / "out"
        assert main([str(yaml_options_file), "--output", str(out)]) == 0

        root = out / "test"
        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "@cdktf/provider-random"
        assert package["resolutions"]["@types/yargs"] == "17.0.13"

        release = yaml.safe_load((root / ".github" / "workflows" / "release.yml").read_text(encoding="utf-8"))
        assert list(release["jobs"])[-1] == "release_go"

    def test_generates_project_from_json(self, json_options_file: Path, tmp_path: Path):
        assert main([str(json_options_file), "-o", str(tmp_path)]) == 0
        cdktf = json.loads((tmp_path / "test" / "cdktf.json").read_text(encoding="utf-8"))
        assert cdktf["sendCrashReports"] is False

    def test_warns_when_regenerating(self, yaml_options_file: Path, tmp_path: Path, capsys):
        assert main([str(yaml_options_file), "-o", str(tmp_path)]) == 0
        capsys.readouterr()
        assert main([str(yaml_options_file), "-o", str(tmp_path)]) == 0
        assert "Overwriting generated files" in capsys.readouterr().out

    def test_dry_run_writes_nothing(self, yaml_options_file: Path, tmp_path: Path, capsys):
        out = tmp_path / "out"
        assert main([str(yaml_options_file), "--output", str(out), "--dry-run"]) == 0
        assert not out.exists()
        assert "package.json" in capsys.readouterr().out


class TestErrors:
    def test_invalid_options_exit_code(self, tmp_path: Path, capsys):
        path = tmp_path / "bad.yml"
        path.write_text("name: test\nterraformProvider: random\n", encoding="utf-8")
        assert main([str(path), "--output", str(tmp_path / "out")]) == 1
        assert "Invalid configuration" in capsys.readouterr().out
        assert not (tmp_path / "out").exists()

    def test_non_string_option_name_exit_code(self, tmp_path: Path, capsys):
        path = tmp_path / "provider.yml"
        path.write_text("name: test\n1: oops\n", encoding="utf-8")
        assert main([str(path), "--dry-run"]) == 1
        assert "option names must be strings" in capsys.readouterr().out

    def test_name_outside_output_dir_exit_code(self, base_options, tmp_path: Path):
        path = tmp_path / "provider.json"
        path.write_text(json.dumps({**base_options, "name": "../escaped"}), encoding="utf-8")
        out = tmp_path / "out"
        assert main([str(path), "--output", str(out)]) == 1
        assert not (tmp_path / "escaped").exists()

    def test_missing_file_exit_code(self, tmp_path: Path):
        assert main([str(tmp_path / "nope.yml")]) == 1
