"""
Command line entry point.
Compare two spreadsheets after sorting both by the same columns.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from rich.console import Console

from . import __version__
from .adapters.file_reader import UniversalFileReader
from .adapters.report_writer import ExcelReportWriter
from .config.manager import ConfigManager, ReportConfig, SessionConfig, SourceConfig
from .core.key_validator import KeyValidationError
from .core.session import ComparisonSession, parse_diff_key
from .core.sorting import InvalidSortSpecificationError, SortSpecification
from .ui.console import ResultsView
from .utils.logger import get_logger


logger = get_logger()

EXIT_EQUAL = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


class ComparisonRunner:
    """
    One non-interactive comparison: load, sort, diff, render, export.
    """

    def __init__(self, config: SessionConfig,
                 suppress: Optional[List[str]] = None,
                 console: Optional[Console] = None,
                 reader: Optional[UniversalFileReader] = None,
                 limit: int = 50):
        """
        Initialize runner.

        Args:
            config: Session configuration
            suppress: ``ROW:COLUMN`` tokens to accept before reporting
            console: Rich console for output
            reader: File reader
            limit: Maximum diff rows rendered in the terminal
        """
        self.config = config
        self.suppress = suppress or []
        self.view = ResultsView(console)
        self.reader = reader or UniversalFileReader()
        self.limit = limit
        self.session: Optional[ComparisonSession] = None

    def run(self) -> int:
        """
        Run the comparison.

        Returns:
            Exit code: 0 equal, 1 differences remain, 2 error
        """
        cfg = self.config
        try:
            if cfg.left is None or cfg.right is None:
                raise ValueError("Both a left and a right source are required")

            spec = cfg.sort_specification()
            session = ComparisonSession(locale=cfg.locale, type_check=cfg.type_check)
            if spec:
                session.set_sort(spec)

            session.load_left(self.reader.read(cfg.left.path, sheet=cfg.left.sheet, name=cfg.left.name))
            session.load_right(self.reader.read(cfg.right.path, sheet=cfg.right.sheet, name=cfg.right.name))
            self.session = session

            for token in self.suppress:
                key = parse_diff_key(token)
                problem = session.suppression_problem(key)
                if problem:
                    logger.warning("cli.suppress_ignored", key=token, reason=problem)
                    self.view.log_warning(f"Ignoring --suppress {token}: {problem}")
                    continue
                if not session.suppressions.is_suppressed(key):
                    session.toggle(key)

            self.view.show_key_warnings(session.check_sort_keys())
            self.view.render(session, limit=self.limit)

            if cfg.report.path:
                writer = ExcelReportWriter()
                if cfg.report.format == "csv":
                    path = writer.write_csv(session, cfg.report.path)
                else:
                    path = writer.write(session, cfg.report.path)
                self.view.log_success(f"Report written to {path}")

        except InvalidSortSpecificationError as e:
            logger.error("cli.invalid_sort", error=str(e), index=e.index)
            self.view.log_error(str(e))
            return EXIT_ERROR
        except (OSError, ValueError, KeyValidationError) as e:
            logger.error("cli.failed", error=str(e))
            self.view.log_error(str(e))
            return EXIT_ERROR

        return EXIT_EQUAL if not session.effective_diffs() else EXIT_DIFFERENT


def build_config(args: argparse.Namespace) -> SessionConfig:
    """
    Merge a config file (if any) with command line arguments.

    Command line values win over the file.
    """
    if args.config:
        config = ConfigManager(Path(args.config)).load()
    else:
        config = SessionConfig()

    if args.left:
        config.left = SourceConfig(path=args.left, sheet=args.sheet_left)
    if args.right:
        config.right = SourceConfig(path=args.right, sheet=args.sheet_right)
    if args.sort:
        spec = SortSpecification.parse(args.sort)
        config.sort = [{"column": c.column, "direction": c.direction.value} for c in spec]
    if args.locale:
        config.locale = args.locale
    if args.type_check:
        config.type_check = True
    if args.export:
        config.report = ReportConfig(path=args.export, format=args.format or config.report.format)
    elif args.format:
        config.report = ReportConfig(path=config.report.path, format=args.format)

    return config


def _sheet(value: str):
    return int(value) if value.isdigit() else value


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sheet Diff - compare two spreadsheets after sorting them by the same columns"
    )

    parser.add_argument("left", nargs="?", help="Left file or sheet export URL")
    parser.add_argument("right", nargs="?", help="Right file or sheet export URL")

    parser.add_argument(
        "--sort", "-s",
        action="append",
        metavar="COLUMN[:asc|desc]",
        help="Sort criterion; repeat for tie-breakers (default: first column ascending)"
    )
    parser.add_argument("--locale", help="Collation language tag (default: he)")
    parser.add_argument(
        "--type-check",
        action="store_true",
        help="Also flag cells whose values classify as different types"
    )
    parser.add_argument(
        "--suppress",
        action="append",
        metavar="ROW:COLUMN",
        help="Accept the difference at a displayed row number and column; repeatable"
    )
    parser.add_argument("--export", "-o", help="Write a report to this path")
    parser.add_argument("--format", choices=["excel", "csv"], help="Report format (default: excel)")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--sheet-left", type=_sheet, default=0, help="Left workbook sheet (index or name)")
    parser.add_argument("--sheet-right", type=_sheet, default=0, help="Right workbook sheet (index or name)")
    parser.add_argument("--limit", type=int, default=50, help="Maximum diff rows shown")
    parser.add_argument("--log-file", help="Append JSON log lines to this file")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Sheet Diff v{__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logger.set_level("DEBUG" if args.verbose else "WARN")
    if args.log_file:
        logger.set_log_file(Path(args.log_file))

    try:
        config = build_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return ComparisonRunner(config, suppress=args.suppress, limit=args.limit).run()


if __name__ == "__main__":
    sys.exit(main())
