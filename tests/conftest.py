"""
Shared fixtures for the test suite.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sheet_diff.core.dataset import Dataset


HEADERS = ["City", "Name", "Qty"]

LEFT_ROWS = [
    {"City": "Haifa", "Name": "Avi", "Qty": "3"},
    {"City": "Eilat", "Name": "Dana", "Qty": "10"},
    {"City": "Acre", "Name": "Noa", "Qty": "7"},
]

RIGHT_ROWS = [
    {"City": "Acre", "Name": "Noa", "Qty": "7"},
    {"City": "Eilat", "Name": "Dana", "Qty": "10.0"},
    {"City": "Haifa", "Name": "Avi", "Qty": "3"},
]


def write_csv(path: Path, headers, rows, encoding="utf-8"):
    lines = [",".join(headers)]
    lines += [",".join(row.get(h, "") for h in headers) for row in rows]
    path.write_bytes(("\n".join(lines) + "\n").encode(encoding))
    return path


@pytest.fixture
def left_dataset():
    return Dataset.from_records("left.csv", HEADERS, LEFT_ROWS)


@pytest.fixture
def right_dataset():
    return Dataset.from_records("right.csv", HEADERS, RIGHT_ROWS)


@pytest.fixture
def csv_pair(tmp_path):
    """Left/right CSV files that differ in one cell after sorting by City."""
    left = write_csv(tmp_path / "left.csv", HEADERS, LEFT_ROWS)
    right = write_csv(tmp_path / "right.csv", HEADERS, RIGHT_ROWS)
    return left, right


@pytest.fixture
def equal_csv_pair(tmp_path):
    """Same rows in a different order."""
    left = write_csv(tmp_path / "left.csv", HEADERS, LEFT_ROWS)
    right = write_csv(tmp_path / "right.csv", HEADERS, list(reversed(LEFT_ROWS)))
    return left, right
