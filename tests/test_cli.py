"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest

from schema_scraper.cli import main


def _write(path, data) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestMapCommand:
    """Tests for ``schema-scraper map``."""

    def test_maps_record_list(self, tmp_path, capsys) -> None:
        schema = _write(tmp_path / "schema.json", {"id": "__id__", "label": "#__code__"})
        records = _write(tmp_path / "records.json", [{"id": 1, "code": "A"}, {"id": 2, "code": "B"}])
        main(["map", records, "--schema", schema])
        assert json.loads(capsys.readouterr().out) == [
            {"id": 1, "label": "#A"},
            {"id": 2, "label": "#B"},
        ]

    def test_maps_single_record_to_file(self, tmp_path) -> None:
        schema = _write(tmp_path / "schema.json", {"n": "{{count}}"})
        records = _write(tmp_path / "record.json", {"count": 3})
        output = tmp_path / "out.json"
        main(["map", records, "--schema", schema, "--syntax", "mustache", "--output", str(output)])
        assert json.loads(output.read_text(encoding="utf-8")) == {"n": 3}

    def test_missing_schema_file(self, tmp_path, capsys) -> None:
        records = _write(tmp_path / "records.json", [])
        with pytest.raises(SystemExit) as excinfo:
            main(["map", records, "--schema", str(tmp_path / "nope.json")])
        assert excinfo.value.code == 1
        assert "Cannot read schema file" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys) -> None:
        schema = tmp_path / "schema.json"
        schema.write_text("{not json", encoding="utf-8")
        records = _write(tmp_path / "records.json", [])
        with pytest.raises(SystemExit) as excinfo:
            main(["map", records, "--schema", str(schema)])
        assert excinfo.value.code == 1
        assert "not valid JSON" in capsys.readouterr().err


def test_no_command_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1
    assert "schema-scraper" in capsys.readouterr().out
