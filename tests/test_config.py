"""
Tests for YAML configuration loading and saving.
"""

import pytest
from pathlib import Path
import sys

import yaml

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sheet_diff.config.manager import (
    ConfigManager,
    ReportConfig,
    SessionConfig,
    SourceConfig,
)
from sheet_diff.core.sorting import InvalidSortSpecificationError, SortDirection


FULL_CONFIG = """
comparison:
  left:
    path: data/raw/orders_2023.xlsx
    sheet: Orders
    name: Orders 2023
  right: data/raw/orders_2024.csv
  sort:
    - column: City
    - column: Name
      direction: desc
    - "Qty:desc"
  locale: en-US
  type_check: true
  report:
    path: data/reports/orders.xlsx
    format: excel
"""


class TestConfigManager:

    def test_load_full_config(self, tmp_path):
        path = tmp_path / "comparison.yaml"
        path.write_text(FULL_CONFIG, encoding="utf-8")

        config = ConfigManager(path).load()

        assert config.left == SourceConfig(path="data/raw/orders_2023.xlsx", sheet="Orders",
                                           name="Orders 2023")
        assert config.right == SourceConfig(path="data/raw/orders_2024.csv")
        assert config.sort == [
            {"column": "City"},
            {"column": "Name", "direction": "desc"},
            {"column": "Qty", "direction": "desc"},
        ]
        assert config.locale == "en-US"
        assert config.type_check is True
        assert config.report == ReportConfig(path="data/reports/orders.xlsx", format="excel")

    def test_sort_specification_defaults_to_ascending(self, tmp_path):
        path = tmp_path / "comparison.yaml"
        path.write_text(FULL_CONFIG, encoding="utf-8")

        spec = ConfigManager(path).load().sort_specification()

        assert spec.columns == ["City", "Name", "Qty"]
        assert [c.direction for c in spec] == [SortDirection.ASC, SortDirection.DESC,
                                               SortDirection.DESC]

    def test_defaults_for_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        config = ConfigManager(path).load()

        assert config.left is None
        assert config.sort == []
        assert config.locale == "he"
        assert config.type_check is False
        assert config.report.format == "excel"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "nope.yaml").load()

    def test_invalid_report_format(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("comparison:\n  report:\n    format: pdf\n", encoding="utf-8")

        with pytest.raises(ValueError, match="pdf"):
            ConfigManager(path).load()

    def test_sort_entry_without_column(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("comparison:\n  sort:\n    - direction: asc\n", encoding="utf-8")

        with pytest.raises(ValueError):
            ConfigManager(path).load()

    def test_invalid_direction_surfaces_on_use(self):
        config = SessionConfig(sort=[{"column": "City", "direction": "sideways"}])

        with pytest.raises(InvalidSortSpecificationError):
            config.sort_specification()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("comparison: [unclosed\n", encoding="utf-8")

        with pytest.raises(yaml.YAMLError):
            ConfigManager(path).load()

    def test_save_and_reload(self, tmp_path):
        source = tmp_path / "comparison.yaml"
        source.write_text(FULL_CONFIG, encoding="utf-8")
        manager = ConfigManager(source)
        original = manager.load()

        target = tmp_path / "saved.yaml"
        manager.save(target)
        reloaded = ConfigManager(target).load()

        assert reloaded.left == original.left
        assert reloaded.right.path == original.right.path
        assert reloaded.sort == original.sort
        assert reloaded.locale == original.locale
        assert reloaded.report == original.report

    def test_save_keeps_hebrew_readable(self, tmp_path):
        manager = ConfigManager(tmp_path / "c.yaml")
        manager.session = SessionConfig(sort=[{"column": "עיר", "direction": "asc"}])

        manager.save()

        assert "עיר" in (tmp_path / "c.yaml").read_text(encoding="utf-8")


class TestSourceConfig:

    def test_path_required(self):
        with pytest.raises(ValueError):
            SourceConfig(path="")
