"""Input readers and report writers."""

from .file_reader import UniversalFileReader, dataset_from_frame, export_url_for, is_remote
from .report_writer import ExcelReportWriter

__all__ = [
    "UniversalFileReader",
    "dataset_from_frame",
    "export_url_for",
    "is_remote",
    "ExcelReportWriter",
]
