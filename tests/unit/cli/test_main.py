"""
Unit tests for the 'codedump' command.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from codedump.cli.main import main, resolve_folders
from codedump.config import DumpConfig

MAIN_GO = "package main\n\nfunc main() {\n\tprintln(\"hello, world\")\n}\n"


class TestDumpCommand:
    """Tests for the main command execution."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture(autouse=True)
    def no_env_config(self, monkeypatch):
        monkeypatch.delenv("CODEDUMP_CONFIG", raising=False)

    @staticmethod
    def make_project():
        """Create the example tree in the current directory."""
        Path("app/sub").mkdir(parents=True)
        Path("app/main.go").write_text(MAIN_GO)
        Path("app/image.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\x0dIHDR")
        Path("app/sub/README.md").write_text("# App\n")

    def test_explicit_folders(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, ["out.txt", "app"])

            assert result.exit_code == 0, result.output
            content = Path("out.txt").read_text().replace(os.sep, "/")

        assert content == (
            "app/main.go\n" + MAIN_GO + "\n\n"
            + "app/sub/README.md\n# App\n\n\n"
        )
        assert "Using command-line specified folders" in result.output
        assert "Scanning folder: app" in result.output
        assert "Skipping binary file" in result.output
        assert "Processed 2 files" in result.output
        assert "Code aggregation completed!" in result.output

    def test_default_output_file(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, [])

            assert result.exit_code == 0, result.output
            assert Path("codebase_dump.txt").exists()
            expected = str(Path("codebase_dump.txt").resolve())

        assert f"Output written to: {expected}" in result.output

    def test_default_folders_used_without_arguments(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("src/router").mkdir(parents=True)
            Path("src/router/index.ts").write_text("export default [];\n")
            result = runner.invoke(main, [])

            content = Path("codebase_dump.txt").read_text().replace(os.sep, "/")

        assert result.exit_code == 0, result.output
        assert "Using default configured folders" in result.output
        assert "Tip: You can override" in result.output
        # src/stores is missing, src/App.vue is missing
        assert "src/stores" in result.output
        assert "src/App.vue" in result.output
        assert content == "src/router/index.ts\nexport default [];\n\n\n"

    def test_explicit_folders_ignore_defaults(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("src/router").mkdir(parents=True)
            Path("src/router/index.ts").write_text("export default [];\n")
            self.make_project()
            result = runner.invoke(main, ["out.txt", "app"])

            content = Path("out.txt").read_text()

        assert result.exit_code == 0
        assert "index.ts" not in content
        assert "src/router" not in result.output
        assert "Processed 2 files" in result.output

    def test_missing_folder_warns_and_continues(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, ["out.txt", "ghost", "app"])

        assert result.exit_code == 0
        assert "Folder 'ghost' does not exist, skipping..." in result.output
        assert "Processed 2 files" in result.output

    def test_config_file_defaults(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            Path(".codedump").mkdir()
            Path(".codedump/config.yaml").write_text(
                yaml.dump({"output_file": "from_config.txt", "default_folders": ["app"]})
            )
            result = runner.invoke(main, [])

            assert result.exit_code == 0, result.output
            assert Path("from_config.txt").exists()

        assert "Processed 2 files" in result.output

    def test_config_option_extra_extensions(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            Path("app/App.vue").write_text("<template/>\n")
            Path("dump.yaml").write_text(yaml.dump({"extra_extensions": ["*.vue"]}))
            result = runner.invoke(main, ["--config", "dump.yaml", "out.txt", "app"])

            content = Path("out.txt").read_text()

        assert result.exit_code == 0, result.output
        assert "App.vue" in content
        assert "Processed 3 files" in result.output

    def test_bad_config_exits_with_error(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("bad.yaml").write_text("- not\n- a mapping\n")
            result = runner.invoke(main, ["--config", "bad.yaml"])

        assert result.exit_code == 1
        assert "must be a mapping" in result.output

    def test_unwritable_output_exits_with_error(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, ["missing_dir/out.txt", "app"])

        assert result.exit_code == 1
        assert "Cannot write output file" in result.output

    def test_json_summary(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, ["--json", "out.txt", "app", "ghost"])
            expected_path = str(Path("out.txt").resolve())

        assert result.exit_code == 0, result.output
        # The skipped-folder warning goes to stderr ahead of the document
        data = json.loads(result.output[result.output.index("{"):])
        assert data["files_processed"] == 2
        assert data["files_skipped_binary"] == 1
        assert data["folders_scanned"] == 1
        assert data["folders_skipped"] == ["ghost"]
        assert data["output_path"] == expected_path

    def test_json_mode_still_warns_about_missing_folder(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            result = runner.invoke(main, ["--json", "out.txt", "ghost"])

        assert result.exit_code == 0
        assert "ghost" in result.output.split("{", 1)[0]

    def test_invalid_extra_extensions_exit_before_writing(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("app").mkdir()
            Path("app/LICENSE").write_text("MIT\n")
            Path("out.txt").write_text("previous dump\n")
            Path("c.yaml").write_text(yaml.dump({"extra_extensions": [123]}))
            result = runner.invoke(main, ["--config", "c.yaml", "out.txt", "app"])

            previous = Path("out.txt").read_text()

        assert result.exit_code == 1
        assert "Invalid config" in result.output
        assert "Scanning folder" not in result.output
        assert previous == "previous dump\n"

    def test_verbose_enables_debug_logging(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            self.make_project()
            with patch("codedump.cli.main.setup_logging") as mock_setup:
                result = runner.invoke(main, ["-v", "out.txt", "app"])

        assert result.exit_code == 0
        mock_setup.assert_called_once_with(True)


class TestResolveFolders:
    def test_cli_folders_win(self):
        folders, from_cli = resolve_folders(("a", "b"), DumpConfig(default_folders=["x"]))
        assert folders == ["a", "b"]
        assert from_cli is True

    def test_defaults_when_empty(self):
        folders, from_cli = resolve_folders((), DumpConfig(default_folders=["x"]))
        assert folders == ["x"]
        assert from_cli is False
