"""
Interactive menu interface for data comparison.
Single responsibility: Handle user interaction, file selection and session edits.
"""

from pathlib import Path
from typing import List, Tuple, Optional

from ..adapters.file_reader import UniversalFileReader, SUPPORTED_EXTENSIONS
from ..adapters.report_writer import ExcelReportWriter
from ..core.session import ComparisonSession, parse_diff_key
from ..core.sorting import InvalidSortSpecificationError, SortSpecification
from ..utils.logger import get_logger
from .console import ResultsView


logger = get_logger()


class MenuInterface:
    """
    Interactive terminal menu for comparing two spreadsheets.
    """

    def __init__(self, data_dir: Path = None, reports_dir: Path = None,
                 session: Optional[ComparisonSession] = None,
                 reader: Optional[UniversalFileReader] = None,
                 view: Optional[ResultsView] = None):
        """
        Initialize menu interface.

        Args:
            data_dir: Directory containing data files (default: data/raw)
            reports_dir: Where exports are written (default: data/reports)
            session: Comparison session to drive (a new one by default)
            reader: File reader
            view: Results view
        """
        if data_dir is None:
            data_dir = Path("data/raw")
        self.data_dir = Path(data_dir)
        self.reports_dir = Path(reports_dir) if reports_dir else Path("data/reports")
        self.session = session or ComparisonSession()
        self.reader = reader or UniversalFileReader()
        self.view = view or ResultsView()
        self.available_files = self._scan_data_files()

    def _scan_data_files(self) -> List[Path]:
        """
        Scan data directory for supported files.

        Returns:
            List of available data files
        """
        if not self.data_dir.exists():
            return []

        files = []

        for file_path in self.data_dir.iterdir():
            if file_path.is_file() and file_path.suffix.lower() in SUPPORTED_EXTENSIONS:
                files.append(file_path)

        return sorted(files, key=lambda x: x.name.lower())

    def show_main_menu(self) -> str:
        """
        Show main menu and get user choice.

        Returns:
            User's menu choice
        """
        print("\n" + "="*60)
        print("       SHEET COMPARISON")
        print("="*60)
        print("1. Change sort columns")
        print(f"2. Toggle type check (now {'on' if self.session.type_check else 'off'})")
        print("3. Accept / restore a difference")
        print("4. Reload left file")
        print("5. Reload right file")
        print("6. Export report")
        print("7. Exit")
        print("="*60)

        while True:
            try:
                choice = input("\nSelect option (1-7): ").strip()
                if choice in ['1', '2', '3', '4', '5', '6', '7']:
                    return choice
                else:
                    print("Please enter a number from 1 to 7")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...")
                return '7'

    def show_file_list(self) -> None:
        """Display available files in data directory."""
        if not self.available_files:
            print(f"\nNo data files found in {self.data_dir}")
            print("Supported formats: CSV, Excel (.xlsx/.xls), Parquet")
            return

        print(f"\nAvailable files in {self.data_dir}:")
        print("-" * 50)
        for i, file_path in enumerate(self.available_files, 1):
            file_size = self._get_file_size(file_path)
            print(f"{i:2d}. {file_path.name:<35} ({file_size})")

    def select_files(self) -> Optional[Tuple[Path, Path]]:
        """
        Let user select two files for comparison.

        Returns:
            Tuple of (left_file, right_file) or None if cancelled
        """
        if len(self.available_files) < 2:
            print("\nNeed at least 2 files for comparison.")
            print(f"Found {len(self.available_files)} files in {self.data_dir}")
            return None

        print("\n" + "="*60)
        print("SELECT FILES FOR COMPARISON")
        print("="*60)

        self.show_file_list()

        left_file = self._select_single_file("left file")
        if not left_file:
            return None

        print(f"\nSelected left file: {left_file.name}")
        right_file = self._select_single_file("right file")
        if not right_file:
            return None

        print(f"\nComparison selected:")
        print(f"  Left:  {left_file.name}")
        print(f"  Right: {right_file.name}")

        return left_file, right_file

    def _select_single_file(self, purpose: str) -> Optional[Path]:
        """
        Select a single file from the list.

        Args:
            purpose: Description of what file is for

        Returns:
            Selected file path or None
        """
        if not self.available_files:
            print(f"No files available for {purpose}")
            return None

        while True:
            try:
                choice = input(f"\nSelect {purpose} (0 to cancel): ").strip()

                if choice == '0':
                    return None

                choice_num = int(choice)
                if 1 <= choice_num <= len(self.available_files):
                    return self.available_files[choice_num - 1]
                else:
                    print(f"Please enter a number between 1 and {len(self.available_files)}")

            except ValueError:
                print("Please enter a valid number")
            except (KeyboardInterrupt, EOFError):
                print("\nCancelled")
                return None

    def _get_file_size(self, file_path: Path) -> str:
        """
        Get human-readable file size.

        Args:
            file_path: Path to file

        Returns:
            Formatted file size
        """
        try:
            size_bytes = file_path.stat().st_size
        except OSError:
            return "Unknown"

        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024**2:
            return f"{size_bytes/1024:.1f} KB"
        elif size_bytes < 1024**3:
            return f"{size_bytes/(1024**2):.1f} MB"
        else:
            return f"{size_bytes/(1024**3):.1f} GB"

    def load_side(self, side: str, file_path: Path) -> bool:
        """
        Read a file into one side of the session.

        Args:
            side: ``left`` or ``right``
            file_path: File to read

        Returns:
            True if loaded
        """
        try:
            dataset = self.reader.read(file_path)
        except (OSError, ValueError) as e:
            logger.error("menu.load_failed", side=side, file=str(file_path), error=str(e))
            self.view.log_error(f"Could not read {file_path.name}: {e}")
            return False

        if side == "left":
            self.session.load_left(dataset)
        else:
            self.session.load_right(dataset)
        return True

    def change_sort(self) -> bool:
        """
        Ask for sort criteria such as ``City:asc, Name:desc``.

        Returns:
            True if the specification changed
        """
        headers = self.session.headers
        if headers:
            print("\nColumns: " + ", ".join(headers))

        try:
            raw = input("Sort by (e.g. City:asc, Name:desc): ").strip()
        except (KeyboardInterrupt, EOFError):
            return False
        if not raw:
            return False

        tokens = [t.strip() for t in raw.split(",") if t.strip()]
        try:
            spec = SortSpecification.parse(tokens)
        except InvalidSortSpecificationError as e:
            self.view.log_error(str(e))
            return False

        unknown = [c for c in spec.columns if c not in headers]
        if unknown:
            self.view.log_warning(f"Not a column of either file: {', '.join(unknown)} (compared as blank)")

        self.session.set_sort(spec)
        self.view.show_key_warnings(self.session.check_sort_keys())
        return True

    def toggle_suppression(self) -> bool:
        """
        Ask for ``ROW:COLUMN`` and flip its suppression.

        Returns:
            True if a suppression was toggled
        """
        try:
            raw = input("Difference to accept/restore (ROW:COLUMN): ").strip()
        except (KeyboardInterrupt, EOFError):
            return False
        if not raw:
            return False

        try:
            key = parse_diff_key(raw)
        except ValueError as e:
            self.view.log_error(str(e))
            return False

        problem = self.session.suppression_problem(key)
        if problem:
            self.view.log_warning(problem)
            return False

        suppressed = self.session.toggle(key)
        self.view.log_success(
            f"{'Accepted' if suppressed else 'Restored'} row {key.row_index + 1}, column '{key.column}'"
        )
        return True

    def export_report(self) -> Optional[Path]:
        """Write the Excel report into the reports directory."""
        if not self.session.is_ready:
            self.view.log_warning("Nothing to export yet")
            return None

        name = f"{Path(self.session.left.name).stem}_vs_{Path(self.session.right.name).stem}.xlsx"
        try:
            path = ExcelReportWriter().write(self.session, self.reports_dir / name)
        except OSError as e:
            logger.error("menu.export_failed", file=str(self.reports_dir / name), error=str(e))
            self.view.log_error(f"Could not write report: {e}")
            return None
        self.view.log_success(f"Report written to {path}")
        return path

    def run_interactive_mode(self) -> bool:
        """
        Run the interactive menu system.

        Returns:
            True if a comparison was shown, False if cancelled
        """
        files = self.select_files()
        if not files:
            return False

        if not (self.load_side("left", files[0]) and self.load_side("right", files[1])):
            return False

        self.view.show_key_warnings(self.session.check_sort_keys())

        while True:
            self.view.render(self.session)
            choice = self.show_main_menu()

            if choice == '1':
                self.change_sort()
            elif choice == '2':
                self.session.set_type_check(not self.session.type_check)
            elif choice == '3':
                self.toggle_suppression()
            elif choice in ('4', '5'):
                side = "left" if choice == '4' else "right"
                self.show_file_list()
                file_path = self._select_single_file(f"{side} file")
                if file_path:
                    self.load_side(side, file_path)
            elif choice == '6':
                self.export_report()
            elif choice == '7':
                print("Goodbye!")
                return True
