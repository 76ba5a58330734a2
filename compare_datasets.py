#!/usr/bin/env python3
"""
Interactive menu-driven spreadsheet comparison.
Pick two files from data/raw, then adjust sorting and accepted differences.
"""

import sys

from sheet_diff.ui.menu import MenuInterface


def main():
    """Main entry point for menu-driven interface."""
    try:
        print("Sheet Diff")
        print("=" * 60)

        menu = MenuInterface()

        if not menu.available_files:
            print(f"\n❌ No data files found in {menu.data_dir}")
            print("Please add CSV, Excel, or Parquet files to the data/raw directory")
            return 1

        print(f"✅ Found {len(menu.available_files)} data files")

        success = menu.run_interactive_mode()

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
