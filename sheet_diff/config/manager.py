"""
Configuration management.
Single responsibility: load, validate, and manage configuration.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
from dataclasses import dataclass, field

from ..core.collation import DEFAULT_LOCALE
from ..core.sorting import SortSpecification, SortDirection
from ..utils.logger import get_logger


logger = get_logger()

REPORT_FORMATS = ("excel", "csv")


@dataclass
class SourceConfig:
    """Where one side's data comes from."""

    path: str
    sheet: Union[int, str] = 0
    name: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.path:
            raise ValueError("Source path is required")


@dataclass
class ReportConfig:
    """Report export settings."""

    path: Optional[str] = None
    format: str = "excel"

    def __post_init__(self):
        if self.format not in REPORT_FORMATS:
            raise ValueError(f"Unknown report format: {self.format} (expected one of {REPORT_FORMATS})")


@dataclass
class SessionConfig:
    """Configuration for one left/right comparison."""

    left: Optional[SourceConfig] = None
    right: Optional[SourceConfig] = None
    sort: List[Dict[str, str]] = field(default_factory=list)
    locale: str = DEFAULT_LOCALE
    type_check: bool = False
    report: ReportConfig = field(default_factory=ReportConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.locale:
            raise ValueError("Locale is required")
        for i, criterion in enumerate(self.sort):
            if not isinstance(criterion, dict) or "column" not in criterion:
                raise ValueError(f"Sort criterion {i} needs a 'column' entry: {criterion!r}")

    def sort_specification(self) -> SortSpecification:
        """
        Sort criteria as a SortSpecification.

        Raises:
            InvalidSortSpecificationError: If a criterion is malformed
        """
        return SortSpecification(
            (c.get("column"), c.get("direction", SortDirection.ASC.value))
            for c in self.sort
        )


class ConfigManager:
    """
    Manage application configuration.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path) if config_path else Path("comparison.yaml")
        self.config: Dict[str, Any] = {}
        self.session: SessionConfig = SessionConfig()

    def load(self) -> SessionConfig:
        """
        Load configuration from file.

        Returns:
            Session configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If config is invalid YAML
            ValueError: If a value fails validation
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        logger.info("config.loading", file=str(self.config_path))

        with open(self.config_path, encoding="utf-8") as f:
            self.config = yaml.safe_load(f) or {}

        self._parse_session()

        logger.info("config.loaded",
                   left=self.session.left.path if self.session.left else None,
                   right=self.session.right.path if self.session.right else None,
                   sort_criteria=len(self.session.sort))

        return self.session

    @staticmethod
    def _parse_source(cfg: Any) -> Optional[SourceConfig]:
        if cfg is None:
            return None
        if isinstance(cfg, str):
            return SourceConfig(path=cfg)
        return SourceConfig(
            path=cfg.get("path", ""),
            sheet=cfg.get("sheet", 0),
            name=cfg.get("name")
        )

    def _parse_session(self):
        """Parse the comparison section."""
        cmp = self.config.get("comparison", {}) or {}

        try:
            report_cfg = cmp.get("report", {}) or {}
            sort_cfg = cmp.get("sort", []) or []
            # Allow the short form "City:desc" next to mappings
            sort = [
                c if isinstance(c, dict) else self._sort_token(c)
                for c in sort_cfg
            ]
            self.session = SessionConfig(
                left=self._parse_source(cmp.get("left")),
                right=self._parse_source(cmp.get("right")),
                sort=sort,
                locale=cmp.get("locale", DEFAULT_LOCALE),
                type_check=bool(cmp.get("type_check", False)),
                report=ReportConfig(
                    path=report_cfg.get("path"),
                    format=report_cfg.get("format", "excel")
                )
            )
        except Exception as e:
            logger.error("config.comparison.invalid",
                       comparison=cmp,
                       error=str(e))
            raise

    @staticmethod
    def _sort_token(token: str) -> Dict[str, str]:
        spec = SortSpecification.parse([str(token)])
        criterion = spec.criteria[0]
        return {"column": criterion.column, "direction": criterion.direction.value}

    def save(self, path: Optional[Path] = None):
        """
        Save configuration to file.

        Args:
            path: Output path (uses original path if not specified)
        """
        output_path = Path(path) if path else self.config_path

        logger.info("config.saving", file=str(output_path))

        def source_dict(src: Optional[SourceConfig]):
            if src is None:
                return None
            data = {"path": src.path, "sheet": src.sheet}
            if src.name:
                data["name"] = src.name
            return data

        config_dict = {
            "comparison": {
                "left": source_dict(self.session.left),
                "right": source_dict(self.session.right),
                "sort": [dict(c) for c in self.session.sort],
                "locale": self.session.locale,
                "type_check": self.session.type_check,
                "report": {
                    "path": self.session.report.path,
                    "format": self.session.report.format
                }
            }
        }

        with open(output_path, 'w', encoding="utf-8") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False,
                           allow_unicode=True, sort_keys=False)

        logger.info("config.saved", file=str(output_path))
