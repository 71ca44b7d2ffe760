"""
End-to-end checks of the are command line.

Runs each command against small temporary projects.
"""

import logging
import sqlite3

import pytest
from typer.testing import CliRunner

from are.cli import app
from are.infrastructure.state_store import FileRecord, StateStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Commands install a Rich handler on the package logger; undo it."""
    package_logger = logging.getLogger("are")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = True


class TestCLIHelp:
    """Help output."""

    def test_main_help(self):
        """Top-level help lists every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "discover" in result.stdout
        assert "status" in result.stdout
        assert "update" in result.stdout

    def test_discover_help(self):
        """Discover command help should display options."""
        result = runner.invoke(app, ["discover", "--help"])

        assert result.exit_code == 0
        assert "--show-excluded" in result.stdout
        assert "--config" in result.stdout

    def test_update_help_says_no_summaries_are_generated(self):
        result = runner.invoke(app, ["update", "--help"])

        assert result.exit_code == 0
        assert "summarizer" in result.stdout


class TestCLICommands:
    """Commands against temporary projects."""

    def test_discover_reports_counts(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.ts").write_text("export const a = 1;\n")
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib" / "index.js").write_text("module.exports = {}\n")

        result = runner.invoke(app, ["discover", str(tmp_path), "--show-excluded"])

        assert result.exit_code == 0
        assert "Included:" in result.stdout
        assert "Excluded Files" in result.stdout
        assert "vendor" in result.stdout

    def test_status_on_fresh_project(self, tmp_path):
        (tmp_path / "a.ts").write_text("a")

        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 0
        assert "New Files:" in result.stdout
        assert "No completed runs yet" in result.stdout

    def test_status_is_read_only(self, tmp_path):
        with StateStore(tmp_path / ".are" / "state.db") as store:
            store.upsert_file(FileRecord("gone.ts", "h1"))

        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 0
        with StateStore(tmp_path / ".are" / "state.db") as store:
            assert store.get_file("gone.ts") is not None

    def test_status_lists_recent_runs(self, tmp_path):
        assert runner.invoke(app, ["update", str(tmp_path)]).exit_code == 0

        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 0
        assert "Recent Runs" in result.stdout
        assert "No completed runs yet" not in result.stdout

    def test_update_records_run(self, tmp_path):
        result = runner.invoke(app, ["update", str(tmp_path)])

        assert result.exit_code == 0
        assert "Update Complete" in result.stdout
        with StateStore(tmp_path / ".are" / "state.db") as store:
            assert store.get_last_run() is not None


class TestCLIErrorHandling:
    """Bad paths and broken state end with exit code 1."""

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["status", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Not a directory" in result.stdout

    def test_newer_state_database(self, tmp_path):
        db_path = tmp_path / ".are" / "state.db"
        db_path.parent.mkdir()
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA user_version = 9")
        conn.close()

        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 1
        assert "State error" in result.stdout

    @pytest.mark.parametrize(
        "content",
        ["budget: [unclosed\n", "budget:\n  unknown_key: 1\n", "- just a list\n"],
    )
    def test_malformed_project_config(self, tmp_path, content):
        config_path = tmp_path / ".are" / "config.yaml"
        config_path.parent.mkdir()
        config_path.write_text(content)

        result = runner.invoke(app, ["discover", str(tmp_path)])

        assert result.exit_code == 1
        assert "Config error" in result.stdout
