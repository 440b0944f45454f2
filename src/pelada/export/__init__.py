"""Export helpers for stats, game history and drafted teams."""

from .sheets import (
    ExportError,
    ExportSheet,
    build_export_sheets,
    export_sheet_to_csv,
    export_sheets_to_dir,
    find_sheet,
)

__all__ = [
    "ExportError",
    "ExportSheet",
    "build_export_sheets",
    "export_sheet_to_csv",
    "export_sheets_to_dir",
    "find_sheet",
]
