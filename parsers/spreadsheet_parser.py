"""
Spreadsheet reader for catalog exports.

First sheet only; the first row is the header row. Rows come back as
plain dicts (header → raw value) with NaN replaced by None, ready for
the field extractor.
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Optional, Union
import structlog

import pandas as pd

from exceptions import SpreadsheetParseError, SourceFileNotFoundError

logger = structlog.get_logger(__name__)

SPREADSHEET_EXTENSIONS = (".xlsx", ".csv")

SpreadsheetSource = Union[str, Path, BytesIO]


@dataclass
class SpreadsheetPreview:
    """Header row and first rows of a spreadsheet, for inspection."""
    sheet_name: str
    headers: list[str]
    row_count: int
    sample_rows: list[dict[str, Any]] = field(default_factory=list)


def _is_csv(source: SpreadsheetSource, filename: Optional[str]) -> bool:
    name = filename or (str(source) if isinstance(source, (str, Path)) else "")
    return name.lower().endswith(".csv")


def _read_frame(
    source: SpreadsheetSource,
    filename: Optional[str] = None
) -> tuple[pd.DataFrame, str]:
    """Load the first sheet as a DataFrame of raw objects."""
    if isinstance(source, (str, Path)) and not Path(source).is_file():
        raise SourceFileNotFoundError(str(source))

    try:
        if _is_csv(source, filename):
            return pd.read_csv(source, dtype=object, encoding="utf-8-sig"), "csv"

        excel = pd.ExcelFile(source, engine="openpyxl")
        sheet_name = excel.sheet_names[0]
        return excel.parse(sheet_name, dtype=object), sheet_name

    except SourceFileNotFoundError:
        raise
    except Exception as e:
        logger.error("spreadsheet_read_failed", error=str(e), error_type=type(e).__name__)
        raise SpreadsheetParseError(
            message="Failed to read spreadsheet",
            details={"original_error": str(e)}
        )


def _frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return [
        {str(header).strip(): value for header, value in record.items()}
        for record in df.to_dict(orient="records")
    ]


def read_spreadsheet_rows(
    source: SpreadsheetSource,
    filename: Optional[str] = None
) -> list[dict[str, Any]]:
    """
    Read all data rows from the first sheet.

    Args:
        source: File path or in-memory upload
        filename: Original name for uploads (decides CSV vs Excel)

    Returns:
        List of header → raw value dicts; fully empty rows dropped

    Raises:
        SourceFileNotFoundError: If a path does not exist
        SpreadsheetParseError: If the file cannot be read
    """
    logger.info("reading_spreadsheet", source=filename or str(source)[:80])

    df, sheet_name = _read_frame(source, filename)
    rows = _frame_to_rows(df)

    logger.info(
        "spreadsheet_read",
        sheet=sheet_name,
        headers=[str(h) for h in df.columns],
        row_count=len(rows)
    )
    return rows


def describe_spreadsheet(
    source: SpreadsheetSource,
    sample_size: int = 3,
    filename: Optional[str] = None
) -> SpreadsheetPreview:
    """Header list and first rows, used to tune the synonym table."""
    df, sheet_name = _read_frame(source, filename)
    rows = _frame_to_rows(df)
    return SpreadsheetPreview(
        sheet_name=sheet_name,
        headers=[str(h).strip() for h in df.columns],
        row_count=len(rows),
        sample_rows=rows[:sample_size],
    )


def find_latest_spreadsheet(directory: Union[str, Path]) -> Optional[Path]:
    """
    Newest spreadsheet in a directory.

    On equal modification time .xlsx wins over .csv.

    Returns:
        Path, or None when the directory has no spreadsheet
    """
    base = Path(directory)
    if not base.is_dir():
        return None

    candidates = [
        p for p in base.iterdir()
        if p.is_file() and p.suffix.lower() in SPREADSHEET_EXTENSIONS
    ]
    if not candidates:
        return None

    preference = {".xlsx": 0, ".csv": 1}
    candidates.sort(key=lambda p: (-p.stat().st_mtime, preference[p.suffix.lower()]))
    return candidates[0]
