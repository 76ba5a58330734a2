"""
Difference report export.
Single responsibility: write a session's effective diffs to a workbook or CSV.
"""

from datetime import datetime, timezone
from importlib.metadata import version, PackageNotFoundError
from pathlib import Path
from typing import List, Union
import pandas as pd

from ..core.session import ComparisonSession
from ..utils.logger import get_logger


logger = get_logger()

SIGNIFICANT_COLOR = "#FFF3CD"  # yellow
TYPE_MISMATCH_COLOR = "#FFD8A8"  # orange
MISSING_ROW_COLOR = "#FFC7CE"  # red
SUPPRESSED_COLOR = "#E7E6E6"  # grey


def _ver(package: str) -> str:
    try:
        return version(package)
    except PackageNotFoundError:
        return "n/a"


class ExcelReportWriter:
    """
    Export the current state of a comparison session.
    """

    def _summary_frame(self, session: ComparisonSession) -> pd.DataFrame:
        result = session.result()
        rows = [
            ["left", session.left.name if session.left else ""],
            ["right", session.right.name if session.right else ""],
            ["sort", ", ".join(str(c) for c in session.sort_spec)],
            ["locale", session.locale],
            ["type_check", session.type_check],
            ["equal", result.is_equal],
            ["total_left", result.total_left],
            ["total_right", result.total_right],
            ["matched_rows", result.matched_rows],
            ["only_in_left", result.only_in_left],
            ["only_in_right", result.only_in_right],
            ["value_differences", result.value_differences],
            ["effective_differences", result.effective_differences],
            ["suppressed_cells", result.suppressed_cells],
            ["timestamp_utc", datetime.now(timezone.utc).isoformat()],
        ]
        return pd.DataFrame(rows, columns=["Metric", "Value"])

    def _lineage_frame(self, session: ComparisonSession) -> pd.DataFrame:
        rows = [
            ["left_source", session.left.source if session.left else ""],
            ["right_source", session.right.source if session.right else ""],
            ["sort", ", ".join(str(c) for c in session.sort_spec)],
            ["locale", session.locale],
            ["pandas", _ver("pandas")],
            ["XlsxWriter", _ver("XlsxWriter")],
            ["pyuca", _ver("pyuca")],
            ["duckdb", _ver("duckdb")],
        ]
        return pd.DataFrame(rows, columns=["Key", "Value"])

    def long_format_frame(self, session: ComparisonSession) -> pd.DataFrame:
        """
        One line per differing cell.

        ``status`` is ``missing_left``/``missing_right`` for row-presence
        mismatches, ``suppressed`` for accepted cells, ``type_mismatch`` or
        ``value_mismatch`` otherwise. Rows are numbered from 1.
        """
        lines = []
        for diff in session.effective_diffs():
            for cell in diff.cells:
                if not cell.differs:
                    continue
                if diff.record.left is None:
                    status = "missing_left"
                elif diff.record.right is None:
                    status = "missing_right"
                elif cell.suppressed:
                    status = "suppressed"
                elif cell.type_mismatch:
                    status = "type_mismatch"
                else:
                    status = "value_mismatch"
                lines.append({
                    "row": diff.index + 1,
                    "column": cell.column,
                    "left": cell.left_value,
                    "right": cell.right_value,
                    "left_type": cell.left_type.value if cell.left_type else "",
                    "right_type": cell.right_type.value if cell.right_type else "",
                    "status": status,
                })
        return pd.DataFrame(lines, columns=["row", "column", "left", "right",
                                            "left_type", "right_type", "status"])

    def write_csv(self, session: ComparisonSession, path: Union[Path, str]) -> Path:
        """Write the long-format diff to CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame = self.long_format_frame(session)
        frame.to_csv(path, index=False, encoding="utf-8-sig")
        logger.info("report.csv_written", file=str(path), lines=len(frame))
        return path

    def write(self, session: ComparisonSession, path: Union[Path, str]) -> Path:
        """
        Write the Excel report.

        Args:
            session: Ready comparison session
            path: Output ``.xlsx`` path

        Returns:
            Path written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        headers: List[str] = session.headers
        effective = session.effective_diffs()

        with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
            self._summary_frame(session).to_excel(writer, sheet_name="Summary", index=False)

            workbook = writer.book
            header_fmt = workbook.add_format({"bold": True, "bottom": 1})
            formats = {
                "plain": workbook.add_format({}),
                "significant": workbook.add_format({"bg_color": SIGNIFICANT_COLOR}),
                "type_mismatch": workbook.add_format({"bg_color": TYPE_MISMATCH_COLOR}),
                "missing": workbook.add_format({"bg_color": MISSING_ROW_COLOR}),
                "suppressed": workbook.add_format({"bg_color": SUPPRESSED_COLOR, "italic": True}),
            }

            ws = workbook.add_worksheet("Differences")
            writer.sheets["Differences"] = ws

            for col, title in enumerate(["#", "Side"] + headers):
                ws.write_string(0, col, title, header_fmt)

            line = 1
            for diff in effective:
                record = diff.record
                for side, row in (("left", record.left), ("right", record.right)):
                    ws.write_number(line, 0, diff.index + 1)
                    ws.write_string(line, 1, side)
                    for col, header in enumerate(headers, start=2):
                        cell = diff.cell(header)
                        if cell is None:
                            value = ""
                        else:
                            value = cell.left_value if side == "left" else cell.right_value
                        if diff.is_row_presence_mismatch:
                            fmt = formats["missing"]
                        elif cell is None or not cell.differs:
                            fmt = formats["plain"]
                        elif cell.suppressed:
                            fmt = formats["suppressed"]
                        elif cell.type_mismatch:
                            fmt = formats["type_mismatch"]
                        else:
                            fmt = formats["significant"]
                        ws.write_string(line, col, value, fmt)
                    line += 1

            ws.freeze_panes(1, 2)
            ws.autofilter(0, 0, max(line - 1, 1), len(headers) + 1)

            suppressed = pd.DataFrame(session.suppressed_cells(),
                                      columns=["row_index", "column", "left", "right"])
            suppressed.insert(0, "row", suppressed.pop("row_index") + 1)
            suppressed.to_excel(writer, sheet_name="Suppressed", index=False)

            self._lineage_frame(session).to_excel(writer, sheet_name="Data_Lineage", index=False)

        logger.info("report.excel_written",
                    file=str(path),
                    differences=len(effective),
                    suppressed=len(session.suppressions))
        return path
