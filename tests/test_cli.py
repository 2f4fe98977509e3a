import json

import pytest

from cli import main


def test_analyze_file_report(tmp_path, capsys):
	p = tmp_path / "q.sql"
	p.write_text("UPDATE Orders SET Total = 0\n")
	assert main(["analyze", str(p)]) == 0
	out = capsys.readouterr().out
	assert "=== Summary ===" in out
	assert "Updates records in Orders." in out
	assert "=== Language ===\nSQL" in out
	assert "1. [SQL.MissingWhere] (Line 1): DELETE/UPDATE without WHERE clause." in out


def test_analyze_json(tmp_path, capsys):
	p = tmp_path / "q.sql"
	p.write_text("DELETE FROM Orders")
	assert main(["analyze", str(p), "--dialect", "SQL", "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["language"] == "SQL"
	assert payload["issues"][0]["type"] == "SQL.MissingWhere"
	assert payload["issues"][0]["lineNumber"] == 1


def test_clean_snippet(tmp_path, capsys):
	p = tmp_path / "q.sql"
	p.write_text("SELECT Id FROM Orders WHERE Id = 7")
	assert main(["analyze", str(p)]) == 0
	assert "No issues detected." in capsys.readouterr().out


def test_empty_file(tmp_path, capsys):
	p = tmp_path / "empty.cs"
	p.write_text("")
	assert main(["analyze", str(p)]) == 1
	assert "No code provided" in capsys.readouterr().err


def test_missing_file_is_usage_error(tmp_path):
	with pytest.raises(SystemExit) as exc:
		main(["analyze", str(tmp_path / "nope.cs")])
	assert exc.value.code == 2
