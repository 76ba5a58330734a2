"""
Test suite for the menu-driven interface.
"""

import io
import pytest
from pathlib import Path
from unittest.mock import patch
import sys

from rich.console import Console

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sheet_diff.core.session import ComparisonSession
from sheet_diff.core.suppression import DiffKey
from sheet_diff.ui.console import ResultsView
from sheet_diff.ui.menu import MenuInterface


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def menu(csv_pair, tmp_path, output):
    data_dir = csv_pair[0].parent
    (data_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    return MenuInterface(
        data_dir=data_dir,
        reports_dir=tmp_path / "reports",
        view=ResultsView(Console(file=output, width=120)),
    )


@pytest.fixture
def loaded_menu(menu, csv_pair):
    menu.load_side("left", csv_pair[0])
    menu.load_side("right", csv_pair[1])
    return menu


class TestMenuInterface:

    def test_scans_supported_files_only(self, menu):
        assert [p.name for p in menu.available_files] == ["left.csv", "right.csv"]

    def test_missing_data_dir(self, tmp_path):
        menu = MenuInterface(data_dir=tmp_path / "absent")
        assert menu.available_files == []
        assert menu.select_files() is None

    def test_main_menu_options(self):
        menu = MenuInterface(data_dir=Path("does-not-exist"))
        with patch("builtins.input", side_effect=["9", "3"]):
            with patch("builtins.print") as mock_print:
                choice = menu.show_main_menu()

        assert choice == "3"
        calls = [str(call) for call in mock_print.call_args_list]
        assert any("1. Change sort columns" in call for call in calls)
        assert any("7. Exit" in call for call in calls)
        assert any("Please enter a number from 1 to 7" in call for call in calls)

    def test_main_menu_eof_exits(self):
        menu = MenuInterface(data_dir=Path("does-not-exist"))
        with patch("builtins.input", side_effect=EOFError):
            assert menu.show_main_menu() == "7"

    def test_select_files(self, menu):
        with patch("builtins.input", side_effect=["abc", "1", "2"]):
            left, right = menu.select_files()

        assert left.name == "left.csv"
        assert right.name == "right.csv"

    def test_select_files_cancel(self, menu):
        with patch("builtins.input", side_effect=["0"]):
            assert menu.select_files() is None

    def test_load_side_reports_errors(self, menu, tmp_path, output):
        assert not menu.load_side("left", tmp_path / "missing.csv")
        assert "Could not read missing.csv" in output.getvalue()
        assert menu.session.left is None

    def test_change_sort(self, loaded_menu):
        with patch("builtins.input", return_value="Name:desc, City"):
            assert loaded_menu.change_sort()

        assert loaded_menu.session.sort_spec.columns == ["Name", "City"]

    def test_change_sort_unknown_column_warns(self, loaded_menu, output):
        with patch("builtins.input", return_value="Country"):
            assert loaded_menu.change_sort()

        assert "Not a column of either file: Country" in output.getvalue()

    def test_change_sort_invalid(self, loaded_menu, output):
        with patch("builtins.input", return_value=":desc"):
            assert not loaded_menu.change_sort()

        assert loaded_menu.session.sort_spec.columns == ["City"]

    def test_toggle_suppression(self, loaded_menu):
        with patch("builtins.input", return_value="2:Qty"):
            assert loaded_menu.toggle_suppression()

        assert DiffKey(1, "Qty") in loaded_menu.session.suppressions
        assert loaded_menu.session.effective_diffs() == []

        with patch("builtins.input", return_value="2:Qty"):
            assert loaded_menu.toggle_suppression()

        assert len(loaded_menu.session.suppressions) == 0

    @pytest.mark.parametrize("token", ["1:Qty", "2:Name", "oops"])
    def test_toggle_suppression_rejects_non_diff_cells(self, loaded_menu, token):
        with patch("builtins.input", return_value=token):
            assert not loaded_menu.toggle_suppression()

        assert len(loaded_menu.session.suppressions) == 0

    def test_export_report(self, loaded_menu, tmp_path):
        path = loaded_menu.export_report()

        assert path == tmp_path / "reports" / "left_vs_right.xlsx"
        assert path.exists()

    def test_export_failure_keeps_session(self, loaded_menu, tmp_path, output):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        loaded_menu.reports_dir = blocker
        loaded_menu.session.toggle(DiffKey(1, "Qty"))

        assert loaded_menu.export_report() is None

        assert "Could not write report" in output.getvalue()
        assert DiffKey(1, "Qty") in loaded_menu.session.suppressions

    def test_export_before_loading(self, menu, output):
        assert menu.export_report() is None
        assert "Nothing to export yet" in output.getvalue()

    def test_interactive_flow(self, menu, output):
        inputs = [
            "1", "2",       # choose files
            "3", "2:Qty",   # accept the only difference
            "2",            # type check on
            "7",            # exit
        ]
        with patch("builtins.input", side_effect=inputs):
            with patch("builtins.print"):
                assert menu.run_interactive_mode()

        text = output.getvalue()
        assert "The files differ after sorting by" in text
        assert "Accepted row 2, column 'Qty'" in text
        assert menu.session.type_check is True
        assert not menu.session.effective_diffs()

    def test_interactive_cancel(self, menu):
        with patch("builtins.input", side_effect=["0"]):
            with patch("builtins.print"):
                assert not menu.run_interactive_mode()


class TestResultsView:

    def test_not_ready_message(self, output):
        ResultsView(Console(file=output)).render(ComparisonSession())

        assert "Load both files and choose a sort column to compare." in output.getvalue()

    def test_equal_verdict(self, output, left_dataset):
        session = ComparisonSession()
        session.load_left(left_dataset)
        session.load_right(left_dataset)

        ResultsView(Console(file=output, width=120)).render(session)

        text = output.getvalue()
        assert 'The files are equal after sorting by "City"' in text
        assert "Differences (" not in text

    def test_difference_table(self, output, left_dataset, right_dataset):
        session = ComparisonSession()
        session.load_left(left_dataset)
        session.load_right(right_dataset)

        ResultsView(Console(file=output, width=120)).render(session)

        text = output.getvalue()
        assert "Comparison Results" in text
        assert "Differences (1)" in text
        assert "10.0" in text

    def test_markup_in_messages_is_escaped(self, output):
        ResultsView(Console(file=output, width=120)).log_warning("[bold]not markup[/bold]")

        assert "[bold]not markup[/bold]" in output.getvalue()
