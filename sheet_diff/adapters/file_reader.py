"""
Universal tabular reader.
Single responsibility: read spreadsheet files and sheet exports into Datasets.
"""

import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse
import pandas as pd

from ..core.dataset import Dataset
from ..utils.logger import get_logger
from ..utils.normalizers import clean_headers, to_cell_text


logger = get_logger()

SUPPORTED_EXTENSIONS = {'.csv', '.xlsx', '.xls', '.parquet'}

_GOOGLE_SHEET_RE = re.compile(r"https?://docs\.google\.com/spreadsheets/d/([A-Za-z0-9_-]+)")
_GID_RE = re.compile(r"[#&?]gid=(\d+)")


def is_remote(source: Union[str, Path]) -> bool:
    """True for http(s) URLs."""
    return urlparse(str(source)).scheme in ("http", "https")


def export_url_for(url: str) -> str:
    """
    CSV export URL for a shared sheet link.

    Google Sheets ``/edit`` links become their ``export?format=csv`` form,
    keeping the tab (``gid``). Other URLs are returned unchanged.

    Examples:
        >>> export_url_for("https://docs.google.com/spreadsheets/d/abc/edit#gid=7")
        'https://docs.google.com/spreadsheets/d/abc/export?format=csv&gid=7'
    """
    match = _GOOGLE_SHEET_RE.match(url)
    if not match or "export?format=" in url:
        return url

    sheet_id = match.group(1)
    gid_match = _GID_RE.search(url)
    export = f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"
    if gid_match:
        export += f"&gid={gid_match.group(1)}"
    return export


def dataset_from_frame(df: pd.DataFrame, name: str, source: Optional[str] = None) -> Dataset:
    """
    Convert a DataFrame to a Dataset of text cells.

    Every header of the frame is supplied for every row, so blank cells are
    blank rather than absent.

    Args:
        df: Frame as read (any dtypes)
        name: Dataset display name
        source: Path or URL the frame came from

    Returns:
        Dataset
    """
    headers = clean_headers(list(df.columns))
    records = [
        {header: to_cell_text(value) for header, value in zip(headers, values)}
        for values in df.itertuples(index=False, name=None)
    ]
    return Dataset.from_records(name, headers, records, source=source)


class UniversalFileReader:
    """
    Handles reading of various tabular formats as text.
    """

    def __init__(self, encodings: Optional[list] = None):
        """
        Initialize file reader.

        Args:
            encodings: CSV encodings to try in order
        """
        # cp1255 covers Hebrew spreadsheets saved by older Excel versions
        self.encodings = encodings or ['utf-8', 'utf-8-sig', 'cp1255', 'latin-1']

    def read_excel(self, file_path: Path, sheet_name: Union[int, str] = 0) -> pd.DataFrame:
        """
        Read Excel file.

        Args:
            file_path: Path to Excel file
            sheet_name: Sheet to read (first sheet by default)

        Returns:
            DataFrame of strings
        """
        logger.info("file_reader.excel.reading",
                   file=str(file_path),
                   sheet=sheet_name)

        df = pd.read_excel(file_path, sheet_name=sheet_name, dtype=str,
                           keep_default_na=False, na_filter=False)

        logger.info("file_reader.excel.loaded",
                   rows=len(df),
                   columns=len(df.columns))

        return df

    def read_csv(self, file_path: Union[Path, str]) -> pd.DataFrame:
        """
        Read CSV with automatic encoding detection.

        Args:
            file_path: Path or URL of CSV data

        Returns:
            DataFrame of strings
        """
        logger.info("file_reader.csv.reading", file=str(file_path))

        df = None
        successful_encoding = None

        for encoding in self.encodings:
            try:
                df = pd.read_csv(file_path, encoding=encoding, dtype=str,
                                 keep_default_na=False, na_filter=False)
                successful_encoding = encoding
                break
            except (UnicodeDecodeError, UnicodeError):
                logger.debug("file_reader.csv.encoding_failed",
                            file=str(file_path),
                            encoding=encoding)
                continue

        if df is None:
            # Last resort: replace undecodable bytes
            logger.warning("file_reader.csv.encoding_fallback", file=str(file_path))
            df = pd.read_csv(file_path, encoding='utf-8', encoding_errors='replace',
                             dtype=str, keep_default_na=False, na_filter=False)
            successful_encoding = 'utf-8 (with replacements)'

        logger.info("file_reader.csv.loaded",
                   rows=len(df),
                   columns=len(df.columns),
                   encoding=successful_encoding)

        return df

    def read_parquet(self, file_path: Path) -> pd.DataFrame:
        """
        Read Parquet file.

        Args:
            file_path: Path to Parquet file

        Returns:
            DataFrame (typed; converted to text by ``dataset_from_frame``)
        """
        logger.info("file_reader.parquet.reading", file=str(file_path))

        df = pd.read_parquet(file_path)

        logger.info("file_reader.parquet.loaded",
                   rows=len(df),
                   columns=len(df.columns))

        return df

    def read_remote(self, url: str) -> pd.DataFrame:
        """
        Read a remote sheet export as CSV.

        Args:
            url: Sheet share link or direct CSV URL

        Returns:
            DataFrame of strings
        """
        export_url = export_url_for(url)
        logger.info("file_reader.remote.reading", url=url, export_url=export_url)
        return self.read_csv(export_url)

    def read(self, source: Union[Path, str], sheet: Union[int, str] = 0,
             name: Optional[str] = None) -> Dataset:
        """
        Read any supported source into a Dataset.

        Args:
            source: File path or http(s) URL
            sheet: Sheet index or name for Excel files
            name: Dataset name (defaults to the file name)

        Returns:
            Dataset with text cells

        Raises:
            FileNotFoundError: If a local file does not exist
            ValueError: If the file type is not supported
        """
        if is_remote(source):
            url = str(source)
            df = self.read_remote(url)
            dataset_name = name or Path(urlparse(url).path).name or url
            return dataset_from_frame(df, dataset_name, source=url)

        file_path = Path(source)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = file_path.suffix.lower()

        if suffix in ['.xlsx', '.xls']:
            df = self.read_excel(file_path, sheet_name=sheet)
        elif suffix == '.csv':
            df = self.read_csv(file_path)
        elif suffix == '.parquet':
            df = self.read_parquet(file_path)
        else:
            raise ValueError(f"Unsupported file type: {suffix}")

        return dataset_from_frame(df, name or file_path.name, source=str(file_path))
