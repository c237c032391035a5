"""Tests for CLI functionality."""

import json
import subprocess
import sys
from pathlib import Path

import pytest


def run_cli(*args):
    """Run the CLI and return the result."""
    cmd = [sys.executable, "-m", "resource_accessor"] + [str(arg) for arg in args]
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
    )
    return result


class TestCLI:
    """Test CLI commands."""

    def test_list_command(self, classes_dir: Path, ext_jar: Path):
        """Test the list command across a directory and an archive."""
        result = run_cli("list", "db", "--root", classes_dir, "--root", ext_jar)

        assert result.returncode == 0
        assert result.stdout.splitlines() == ["db/changelog.xml", "db/extra.xml"]

    def test_list_recursive_with_directories(self, classes_dir: Path):
        result = run_cli("list", "db", "--root", classes_dir, "--recursive", "--dirs", "--no-files")

        assert result.returncode == 0
        assert result.stdout.splitlines() == ["db/sub/", "db/sub/nested/"]

    def test_list_relative_to(self, classes_dir: Path):
        result = run_cli("list", "sub", "--relative-to", "db/changelog.xml", "--root", classes_dir)

        assert result.returncode == 0
        assert result.stdout.splitlines() == ["db/sub/one.sql"]

    def test_list_not_found(self, classes_dir: Path):
        result = run_cli("list", "missing", "--root", classes_dir)

        assert result.returncode == 1
        assert "No resources found at missing" in result.stderr

    def test_list_traversal_rejected(self, classes_dir: Path):
        result = run_cli("list", "../etc", "--root", classes_dir)

        assert result.returncode == 1
        assert "Path traversal detected" in result.stderr

    def test_no_roots(self):
        result = run_cli("list", "db")

        assert result.returncode == 1
        assert "No roots configured" in result.stderr

    def test_cat_command(self, classes_dir: Path, ext_jar: Path, make_archive, temp_dir: Path):
        override = make_archive(temp_dir / "override.jar", {"db/changelog.xml": "<override/>"})

        result = run_cli("cat", "classpath:db/changelog.xml", "--root", classes_dir, "--root", override)

        assert result.returncode == 0
        assert "[1/2]" in result.stdout
        assert "[2/2]" in result.stdout
        assert result.stdout.index("<databaseChangeLog/>") < result.stdout.index("<override/>")

    def test_cat_truncates(self, classes_dir: Path):
        result = run_cli("cat", "db/changelog.xml", "--root", classes_dir, "--max-bytes", "5")

        assert result.returncode == 0
        assert "<data" in result.stdout
        assert "... truncated at 5 bytes" in result.stdout

    def test_cat_not_found(self, classes_dir: Path):
        result = run_cli("cat", "db/missing.xml", "--root", classes_dir)

        assert result.returncode == 1
        assert "No resources found" in result.stderr

    def test_cat_damaged_archive_member(self, classes_dir: Path, temp_dir: Path, make_archive):
        """A checksum failure while reading is reported, not raised."""
        damaged = make_archive(temp_dir / "crc.jar", {"db/changelog.xml": "<broken/>"})
        damaged.write_bytes(damaged.read_bytes().replace(b"<broken/>", b"<brokeN/>"))

        result = run_cli("cat", "db/changelog.xml", "--root", classes_dir, "--root", damaged)

        assert result.returncode == 1
        assert "<databaseChangeLog/>" in result.stdout
        assert "Error: Bad CRC-32" in result.stderr
        assert "Traceback" not in result.stderr

    def test_cat_invalid_max_bytes(self, classes_dir: Path):
        result = run_cli("cat", "db/changelog.xml", "--root", classes_dir, "--max-bytes", "0")

        assert result.returncode == 1
        assert "max_bytes must be positive" in result.stderr

    def test_describe_command(self, classes_dir: Path, ext_jar: Path):
        result = run_cli("describe", "--root", classes_dir, "--root", ext_jar)

        assert result.returncode == 0
        assert result.stdout.strip() == (
            f"ResourceResolver({classes_dir.as_uri()}/,jar:{ext_jar.as_uri()}!/)"
        )

    def test_describe_invalid_descriptor(self, ext_jar: Path):
        result = run_cli("describe", "--root", f"jar:file:{ext_jar}!/a!/b!/c")

        assert result.returncode == 1
        assert "Too many nested archive delimiters" in result.stderr

    def test_config_file(self, temp_dir: Path, classes_dir: Path, ext_jar: Path):
        config_path = temp_dir / "resources.yaml"
        config_path.write_text("roots:\n  - app/classes\n  - app/lib/ext.jar\n")

        result = run_cli("list", "db", "--config", config_path)

        assert result.returncode == 0
        assert result.stdout.splitlines() == ["db/changelog.xml", "db/extra.xml"]

    def test_config_file_missing(self, temp_dir: Path):
        result = run_cli("describe", "--config", temp_dir / "missing.yaml")

        assert result.returncode == 1
        assert "Configuration file not found" in result.stderr

    def test_audit_log(self, temp_dir: Path, classes_dir: Path):
        audit_log = temp_dir / "logs" / "audit.jsonl"

        result = run_cli("list", "db", "--root", classes_dir, "--audit-log", audit_log)

        assert result.returncode == 0
        events = [json.loads(line) for line in audit_log.read_text().splitlines()]
        assert [event["kind"] for event in events] == ["list"]
        assert events[0]["detail"]["matches"] == 1

    def test_skipped_archive_is_logged(self, temp_dir: Path, classes_dir: Path):
        result = run_cli("list", "db", "--root", temp_dir / "gone.jar", "--root", classes_dir)

        assert result.returncode == 0
        assert result.stdout.splitlines() == ["db/changelog.xml"]
        assert "WARNING" in result.stderr
        assert "gone.jar" in result.stderr

    def test_verbose_logs_opened_streams(self, classes_dir: Path):
        result = run_cli("cat", "db/changelog.xml", "--root", classes_dir, "--verbose")

        assert result.returncode == 0
        assert "Opening file://" in result.stderr

    def test_no_command(self):
        result = run_cli()

        assert result.returncode == 1

    @pytest.mark.parametrize("command", ["list", "cat", "describe"])
    def test_help(self, command):
        result = run_cli(command, "--help")

        assert result.returncode == 0
        assert "--root" in result.stdout
