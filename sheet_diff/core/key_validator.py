"""
Sort key uniqueness validation using DuckDB.
Single responsibility: tell whether the sort columns order every row unambiguously.

Positional comparison pairs rows by index after sorting. When several rows
share the same sort key their relative order is whatever the input had, so
logically identical datasets can still produce positional diffs. This check
finds those duplicate key groups so they can be reported up front.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, List, Mapping, Optional, Sequence

import duckdb
import pandas as pd

from ..utils.logger import get_logger
from .dataset import cell_value


logger = get_logger()

_table_ids = count()


class KeyValidationError(Exception):
    """Exception raised when key validation fails or encounters errors."""
    pass


@dataclass
class KeyValidationResult:
    """Results from key uniqueness validation."""

    is_valid: bool
    total_rows: int
    unique_values: int
    duplicate_count: int
    key_columns: List[str] = field(default_factory=list)
    duplicate_groups: int = 0
    error_message: Optional[str] = None


def qident(name: str) -> str:
    """
    Quote an identifier for DuckDB.

    Args:
        name: Column or table name (any characters)

    Returns:
        Double-quoted identifier with embedded quotes doubled
    """
    return '"' + name.replace('"', '""') + '"'


class SortKeyValidator:
    """
    Validates sort key uniqueness with DuckDB queries over in-memory rows.
    """

    def __init__(self, con: Optional[duckdb.DuckDBPyConnection] = None):
        """
        Initialize key validator.

        Args:
            con: DuckDB connection (a private in-memory one when omitted)
        """
        self.con = con if con is not None else duckdb.connect(":memory:")

    def _register(self, rows: Sequence[Mapping[str, str]], key_columns: List[str]) -> str:
        """Register the key cells of ``rows`` as a DuckDB view; returns its name."""
        frame = pd.DataFrame(
            [[cell_value(row, col) for col in key_columns] for row in rows],
            columns=key_columns,
            dtype=str,
        )
        table_name = f"sort_keys_{next(_table_ids)}"
        self.con.register(table_name, frame)
        return table_name

    def _validate_inputs(self, key_columns: List[str]) -> None:
        if not key_columns:
            raise KeyValidationError(
                "[KEY VALIDATION ERROR] key_columns cannot be empty. "
                "Suggestion: Provide at least one sort column."
            )
        if len(set(key_columns)) != len(key_columns):
            raise KeyValidationError(
                f"[KEY VALIDATION ERROR] key_columns has repeated names: {key_columns}. "
                "Suggestion: List each sort column once."
            )

    def validate(self, rows: Sequence[Mapping[str, str]], key_columns: List[str],
                 dataset_name: str = "dataset") -> KeyValidationResult:
        """
        Check that the key columns identify every row.

        Blank cells count as a value, so two rows with blank keys collide.

        Args:
            rows: Rows to check
            key_columns: Sort columns, primary first
            dataset_name: Name used in messages and logs

        Returns:
            KeyValidationResult with validation status and statistics

        Raises:
            KeyValidationError: If inputs are invalid or the query fails
        """
        key_columns = list(key_columns)
        self._validate_inputs(key_columns)

        logger.info("key_validator.validate_start",
                    dataset=dataset_name,
                    key_columns=key_columns,
                    rows=len(rows))

        if not rows:
            return KeyValidationResult(is_valid=True, total_rows=0, unique_values=0,
                                       duplicate_count=0, key_columns=key_columns)

        table_name = self._register(rows, key_columns)
        columns_str = ", ".join(qident(col) for col in key_columns)

        try:
            total_rows, unique_values = self.con.execute(f"""
                SELECT (SELECT COUNT(*) FROM {table_name}) AS total_rows,
                       (SELECT COUNT(*) FROM (SELECT DISTINCT {columns_str} FROM {table_name})) AS unique_values
            """).fetchone()

            duplicate_groups = self.con.execute(f"""
                SELECT COUNT(*) AS duplicate_groups
                FROM (
                    SELECT {columns_str}, COUNT(*) AS group_count
                    FROM {table_name}
                    GROUP BY {columns_str}
                    HAVING COUNT(*) > 1
                )
            """).fetchone()[0]
        except duckdb.Error as e:
            logger.error("key_validator.validate_failed",
                         dataset=dataset_name,
                         error=str(e))
            raise KeyValidationError(
                f"[KEY VALIDATION ERROR] Failed to validate sort key of '{dataset_name}': {e}. "
                f"Suggestion: Verify columns {key_columns} are valid."
            ) from e
        finally:
            self.con.unregister(table_name)

        duplicate_count = total_rows - unique_values
        is_valid = duplicate_groups == 0

        error_message = None
        if not is_valid:
            error_message = (f"{duplicate_groups} duplicate key groups ({duplicate_count} extra rows) "
                             f"in '{dataset_name}' for sort key [{', '.join(key_columns)}]. "
                             f"Rows sharing a key are paired by input order.")
            logger.warning("key_validator.duplicates_found",
                           dataset=dataset_name,
                           duplicate_groups=duplicate_groups,
                           duplicate_rows=duplicate_count)

        logger.info("key_validator.validate_complete",
                    dataset=dataset_name,
                    is_valid=is_valid,
                    duplicates=duplicate_count)

        return KeyValidationResult(
            is_valid=is_valid,
            total_rows=total_rows,
            unique_values=unique_values,
            duplicate_count=duplicate_count,
            key_columns=key_columns,
            duplicate_groups=duplicate_groups,
            error_message=error_message,
        )

    def get_duplicate_examples(self, rows: Sequence[Mapping[str, str]],
                               key_columns: List[str], limit: int = 10) -> List[Dict[str, Any]]:
        """
        Get examples of duplicate key values for user inspection.

        Args:
            rows: Rows to analyze
            key_columns: Key columns to check for duplicates
            limit: Maximum number of examples to return

        Returns:
            List of dictionaries with the key values and ``duplicate_count``
        """
        key_columns = list(key_columns)
        self._validate_inputs(key_columns)
        if not rows:
            return []

        table_name = self._register(rows, key_columns)
        columns_str = ", ".join(qident(col) for col in key_columns)

        try:
            results = self.con.execute(f"""
                SELECT {columns_str}, COUNT(*) AS duplicate_count
                FROM {table_name}
                GROUP BY {columns_str}
                HAVING COUNT(*) > 1
                ORDER BY duplicate_count DESC, {columns_str}
                LIMIT {int(limit)}
            """).fetchall()
        finally:
            self.con.unregister(table_name)

        examples = []
        for row in results:
            example = {col: row[i] for i, col in enumerate(key_columns)}
            example["duplicate_count"] = row[-1]
            examples.append(example)

        return examples
