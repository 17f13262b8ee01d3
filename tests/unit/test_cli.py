"""
Unit tests for content_engine.cli module.

Drives main() with argument lists and temporary files.
"""

import json

import pytest

from content_engine.cli import main


@pytest.fixture
def records_file(temp_dir, legacy_records):
    path = temp_dir / "records.json"
    path.write_text(json.dumps([r.to_dict() for r in legacy_records]), encoding="utf-8")
    return path


def write(temp_dir, name, text):
    path = temp_dir / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestSimpleCommands:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "content-engine" in capsys.readouterr().out

    def test_classify(self, temp_dir, capsys):
        path = write(temp_dir, "note.md", "# Title\n\n- one\n- two")
        assert main(["classify", path]) == 0
        out = capsys.readouterr().out
        assert "Format: markdown" in out
        assert "Confidence: 0.80" in out

    def test_convert(self, temp_dir, capsys):
        path = write(temp_dir, "note.txt", "Hello {{name}}, welcome!")
        assert main(["convert", path]) == 0
        assert "<p>Hello {{name}}, welcome!</p>" in capsys.readouterr().out

    def test_convert_with_declared_format(self, temp_dir, capsys):
        path = write(temp_dir, "note.txt", "# not a heading")
        assert main(["convert", path, "--format", "plain-text"]) == 0
        assert "<p># not a heading</p>" in capsys.readouterr().out

    def test_validate_storage_valid(self, temp_dir, capsys):
        path = write(temp_dir, "ok.html", "<p>Hello {{name}}, your report is ready.</p>")
        assert main(["validate", path]) == 0
        assert "Valid: Yes" in capsys.readouterr().out

    def test_validate_storage_dangerous(self, temp_dir, capsys):
        path = write(temp_dir, "bad.html", '<p onclick="x()">Click here to continue</p>')
        assert main(["validate", path, "--mode", "storage"]) == 1
        out = capsys.readouterr().out
        assert "Severity: critical" in out
        assert "[X] Content contains potentially dangerous elements" in out

    def test_validate_edit_mode(self, temp_dir, capsys):
        path = write(temp_dir, "short.txt", "tiny")
        assert main(["validate", path, "--mode", "edit", "--format", "plain-text"]) == 1
        assert "Content is too short" in capsys.readouterr().out

    def test_missing_file(self, temp_dir, capsys):
        assert main(["classify", str(temp_dir / "missing.txt")]) == 2
        assert "[X]" in capsys.readouterr().err


class TestMigrate:

    def test_migrate_writes_outputs(self, temp_dir, records_file, capsys):
        backup = temp_dir / "backup.json"
        report = temp_dir / "report.md"
        output = temp_dir / "out" / "migrated.json"

        code = main([
            "migrate", str(records_file),
            "--backup", str(backup),
            "--report", str(report),
            "--output", str(output),
        ])

        assert code == 1  # the empty record fails
        assert backup.exists()
        assert "# Migration Report" in report.read_text(encoding="utf-8")

        migrated = json.loads(output.read_text(encoding="utf-8"))
        by_id = {item["id"]: item for item in migrated}
        assert by_id["1"]["content"] == "<p>This is a plain text prompt with {{variable}} placeholder.</p>"
        assert by_id["2"]["content"] == "<p>This is <strong>HTML</strong> content with {{variable}}.</p>"
        assert by_id["5"]["content"] == ""

        out = capsys.readouterr().out
        assert "Summary: 2 migrated, 2 skipped, 1 failed" in out

    def test_dry_run_does_not_write_records(self, temp_dir, records_file, capsys):
        output = temp_dir / "migrated.json"
        main(["migrate", str(records_file), "--dry-run", "--output", str(output)])
        assert not output.exists()
        out = capsys.readouterr().out
        assert "(dry run)" in out
        assert "Dry run: migrated records not written" in out

    def test_report_printed_without_report_path(self, records_file, capsys):
        main(["migrate", str(records_file)])
        assert "## Summary" in capsys.readouterr().out

    def test_records_file_must_be_list(self, temp_dir, capsys):
        path = write(temp_dir, "records.json", json.dumps({"id": "1"}))
        assert main(["migrate", path]) == 2
        assert "expected a JSON list" in capsys.readouterr().err


class TestRollback:

    def test_rollback_round_trip(self, temp_dir, records_file, legacy_records, capsys):
        backup = temp_dir / "backup.json"
        restored = temp_dir / "restored.json"
        main(["migrate", str(records_file), "--backup", str(backup)])

        assert main(["rollback", str(backup), "--output", str(restored)]) == 0
        data = json.loads(restored.read_text(encoding="utf-8"))
        assert data == [r.to_dict() for r in legacy_records]

    def test_rollback_corrupt_snapshot(self, temp_dir, capsys):
        path = write(temp_dir, "backup.json", '{"version": "1.0.0"}')
        assert main(["rollback", path]) == 1
        err = capsys.readouterr().err
        assert "Failed to rollback migration: Invalid backup format" in err
        assert "records" in err
