"""Integration tests for the command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from propdoc.cli import main

MOCKS = Path(__file__).parent.parent / "mocks" / "components"


class TestCLI:
    """Test running propdoc from the command line."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_single_file(self, tmp_path):
        """Test documenting one file into a JSON file."""
        output = tmp_path / "docs.json"

        result = self.runner.invoke(main, [str(MOCKS / "icons" / "AnotherComponent.js"), "--out", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        component = data["files"][0]["components"][0]
        assert component["displayName"] == "Icon"
        assert component["props"]["name"]["required"] is True

    def test_directory_reports_failures(self, tmp_path):
        """Test that a failing file is recorded without stopping the run."""
        output = tmp_path / "docs.json"

        result = self.runner.invoke(main, [str(MOCKS / "cycle"), str(MOCKS / "props"), "--out", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        documented = {Path(f["path"]).name for f in data["files"]}
        assert documented == {"Greeting.js", "Badge.js"}
        assert any(Path(path).name == "Looping.js" for path in data["errors"])

    def test_deeply_nested_file_is_reported(self, tmp_path):
        """Test that a file nested too deeply to parse is recorded as an error."""
        src = tmp_path / "src"
        src.mkdir()
        (src / "Deep.js").write_text(
            "import React from 'react';\nexport const x = " + "[" * 3000 + "]" * 3000 + ";\n"
        )
        (src / "Card.js").write_text(
            "import React from 'react';\nexport default function Card(props: { title: string }) {}\n"
        )
        output = tmp_path / "docs.json"

        result = self.runner.invoke(main, [str(src), "--out", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert [Path(f["path"]).name for f in data["files"]] == ["Card.js"]
        assert [Path(path).name for path in data["errors"]] == ["Deep.js"]

    def test_config_file(self, tmp_path):
        """Test that a configuration file is applied."""
        config_file = tmp_path / "propdoc.yaml"
        config_file.write_text("export:\n  pretty: true\n  indent: 4\n")
        output = tmp_path / "docs.json"

        result = self.runner.invoke(main, [
            str(MOCKS / "props" / "Greeting.js"),
            "--config", str(config_file),
            "--out", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert '\n    "metadata"' in output.read_text()

    def test_every_file_failing(self, tmp_path):
        """Test the exit code when no file could be documented."""
        util = tmp_path / "util.js"
        util.write_text("export const x = 1;\n")

        result = self.runner.invoke(main, [str(util), "--out", str(tmp_path / "docs.json")])

        assert result.exit_code == 1

    def test_missing_path(self):
        """Test that a missing input path is a usage error."""
        result = self.runner.invoke(main, ["does/not/exist.js"])
        assert result.exit_code == 2
