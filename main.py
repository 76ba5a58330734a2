#!/usr/bin/env python3
"""
Sheet Diff - Main Entry Point
Compare two spreadsheets after sorting them by the same columns.

Usage:
    python main.py left.xlsx right.xlsx --sort City:asc --sort Name:desc
    python main.py --config comparison.yaml --export data/reports/report.xlsx
"""

import sys

from sheet_diff.cli import main


if __name__ == "__main__":
    sys.exit(main())
