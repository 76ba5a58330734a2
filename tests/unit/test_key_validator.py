"""
Unit tests for SortKeyValidator.
Runs real DuckDB queries against in-memory rows.
"""

import pytest
from unittest.mock import Mock
from pathlib import Path
import sys

import duckdb

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from sheet_diff.core.key_validator import (
    SortKeyValidator,
    KeyValidationError,
    KeyValidationResult,
    qident,
)


class TestSortKeyValidator:
    """Test cases for SortKeyValidator component."""

    def setup_method(self):
        self.validator = SortKeyValidator(duckdb.connect(":memory:"))

    def test_unique_single_column(self):
        rows = [{"id": "1"}, {"id": "2"}, {"id": "3"}]

        result = self.validator.validate(rows, ["id"])

        assert isinstance(result, KeyValidationResult)
        assert result.is_valid
        assert result.total_rows == 3
        assert result.unique_values == 3
        assert result.duplicate_count == 0
        assert result.error_message is None

    def test_duplicates_detected(self):
        rows = [{"id": "1"}, {"id": "1"}, {"id": "2"}, {"id": "2"}, {"id": "2"}]

        result = self.validator.validate(rows, ["id"], dataset_name="orders")

        assert not result.is_valid
        assert result.duplicate_groups == 2
        assert result.duplicate_count == 3
        assert "orders" in result.error_message

    def test_composite_key_resolves_duplicates(self):
        rows = [
            {"City": "Haifa", "Name": "Avi"},
            {"City": "Haifa", "Name": "Dana"},
            {"City": "Eilat", "Name": "Avi"},
        ]

        assert not self.validator.validate(rows, ["City"]).is_valid
        assert self.validator.validate(rows, ["City", "Name"]).is_valid

    def test_blank_and_absent_cells_collide(self):
        rows = [{"id": ""}, {}, {"id": "1"}]

        result = self.validator.validate(rows, ["id"])

        assert not result.is_valid
        assert result.duplicate_count == 1

    def test_awkward_column_names(self):
        rows = [{'Unit "price"': "1", "שם לקוח": "a"}, {'Unit "price"': "1", "שם לקוח": "b"}]

        assert not self.validator.validate(rows, ['Unit "price"']).is_valid
        assert self.validator.validate(rows, ['Unit "price"', "שם לקוח"]).is_valid

    def test_empty_rows_are_valid(self):
        result = self.validator.validate([], ["id"])
        assert result.is_valid
        assert result.total_rows == 0

    def test_empty_key_columns_rejected(self):
        with pytest.raises(KeyValidationError):
            self.validator.validate([{"id": "1"}], [])

    def test_duplicate_examples(self):
        rows = [{"id": "1"}, {"id": "2"}, {"id": "2"}, {"id": "3"}, {"id": "3"}, {"id": "3"}]

        examples = self.validator.get_duplicate_examples(rows, ["id"], limit=5)

        assert examples == [
            {"id": "3", "duplicate_count": 3},
            {"id": "2", "duplicate_count": 2},
        ]

    def test_query_failure_wrapped(self):
        con = Mock()
        con.execute.side_effect = duckdb.Error("boom")
        validator = SortKeyValidator(con)

        with pytest.raises(KeyValidationError) as exc_info:
            validator.validate([{"id": "1"}], ["id"])

        assert "boom" in str(exc_info.value)
        con.unregister.assert_called_once()


def test_qident_escapes_quotes():
    assert qident('a "b"') == '"a ""b"""'
