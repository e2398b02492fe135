import json
import sys

import pytest

import main


@pytest.fixture
def tree_file(tmp_path):
    path = tmp_path / "family.json"
    path.write_text(
        json.dumps(
            {
                "persons": [
                    {"id": "a", "given_name": "Ahmad", "birth_date": "1940"},
                    {"id": "b", "given_name": "Bushra"},
                    {"id": "c", "given_name": "Kareem", "birth_date": "1930"},
                ],
                "relationships": [
                    {"person1_id": "a", "person2_id": "b", "type": "spouse"},
                    {"person1_id": "a", "person2_id": "c", "type": "parent"},
                    {"person1_id": "a", "person2_id": "zz", "type": "parent"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


def test_cli_reports_layout(tree_file, tmp_path, monkeypatch, capsys):
    output = tmp_path / "family.dot"
    monkeypatch.setattr(sys, "argv", ["main.py", str(tree_file), "-o", str(output)])

    assert main.main() == 0

    out = capsys.readouterr().out
    assert "Found 3 persons and 3 relationships" in out
    assert "Impossible: Kareem born before parent Ahmad" in out
    assert "Found 1 layout diagnostics" in out
    assert "Layout has 3 visible nodes" in out
    assert output.exists()
    assert out.rstrip().endswith("Done!")


def test_cli_unknown_root_fails(tree_file, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["main.py", str(tree_file), "--root", "nobody"])

    assert main.main() == 1
    assert "Error: " in capsys.readouterr().out


def test_report_truncates_long_lists(capsys):
    class Item:
        message = "something"

    main.report("things", [Item()] * 12)

    out = capsys.readouterr().out
    assert "Found 12 things" in out
    assert out.count("- something") == 10
    assert "... and 2 more" in out
