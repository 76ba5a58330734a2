"""
Unit tests for parsing, normalization and logging helpers.
"""

import json
import pytest
from datetime import datetime
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from sheet_diff.utils.converters import (
    normalize_boolean,
    parse_strict_date,
    parse_strict_number,
)
from sheet_diff.utils.normalizers import clean_header, clean_headers, to_cell_text
from sheet_diff.utils.logger import StructuredLogger


class TestConverters:

    @pytest.mark.parametrize("text,expected", [
        ("true", True), ("FALSE", False), (" Yes ", True), ("no", False),
        ("1", None), ("", None), ("y", None),
    ])
    def test_normalize_boolean(self, text, expected):
        assert normalize_boolean(text) is expected

    @pytest.mark.parametrize("text,expected", [
        ("2024-01-05", datetime(2024, 1, 5)),
        ("2024-01-05T08:30:00", datetime(2024, 1, 5, 8, 30)),
        ("2024/01/05", datetime(2024, 1, 5)),
        ("05.01.2024", datetime(2024, 1, 5)),
    ])
    def test_parse_strict_date(self, text, expected):
        assert parse_strict_date(text) == expected

    @pytest.mark.parametrize("text", ["2024-1-5", "01/05/2024", "2024-02-30", "yesterday", ""])
    def test_parse_strict_date_rejects(self, text):
        assert parse_strict_date(text) is None

    @pytest.mark.parametrize("text,expected", [
        ("10", 10.0), ("-12.5", -12.5), ("+.5", 0.5), ("1e3", 1000.0), ("10.", 10.0),
    ])
    def test_parse_strict_number(self, text, expected):
        assert parse_strict_number(text) == expected

    @pytest.mark.parametrize("text", ["1,234", "$5", "nan", "inf", "1e999", "", "-", "."])
    def test_parse_strict_number_rejects(self, text):
        assert parse_strict_number(text) is None


class TestNormalizers:

    def test_to_cell_text(self):
        assert to_cell_text(None) == ""
        assert to_cell_text(float("nan")) == ""
        assert to_cell_text(" kept ") == " kept "
        assert to_cell_text(3) == "3"

    def test_clean_header(self):
        assert clean_header("\ufeffCity ", 0) == "City"
        assert clean_header("Na\u200bme", 1) == "Name"
        assert clean_header("Unnamed: 4", 4) == "Column 5"
        assert clean_header(None, 2) == "Column 3"

    def test_clean_headers_dedupes(self):
        assert clean_headers(["A", "A", "", "A"]) == ["A", "A.1", "Column 3", "A.2"]

    def test_clean_headers_suffix_never_reuses_existing_name(self):
        assert clean_headers(["a.1", "a", " a"]) == ["a.1", "a", "a.2"]
        assert clean_headers(["a", "a", "a.1"]) == ["a", "a.2", "a.1"]


class TestStructuredLogger:

    def test_console_respects_level(self, capsys):
        logger = StructuredLogger("test", level="WARN")

        logger.info("quiet.event")
        logger.warning("loud.event", rows=3)

        err = capsys.readouterr().err
        assert "quiet.event" not in err
        assert "loud.event" in err
        assert "rows=3" in err

    def test_file_gets_every_level(self, tmp_path, capsys):
        log_file = tmp_path / "run.log"
        logger = StructuredLogger("test", level="ERROR")
        logger.set_log_file(log_file)

        logger.debug("debug.event", column="עיר")
        logger.error("error.event")

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert [e["message"] for e in entries] == ["debug.event", "error.event"]
        assert entries[0]["context"] == {"column": "עיר"}
        assert entries[0]["logger"] == "test"

    def test_log_with_explicit_level(self, capsys):
        logger = StructuredLogger("test", level="INFO")

        logger.log("ERROR", "explicit.event", side="left")

        err = capsys.readouterr().err
        assert "ERROR | explicit.event" in err
        assert "side=left" in err

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            StructuredLogger().set_level("LOUD")
