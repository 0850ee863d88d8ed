"""Turn an uploaded CSV / XLS / XLSX export into header -> value rows."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field

import pandas as pd

from riadops.importing.errors import ImportFileError, UnsupportedFileError

SUPPORTED_EXTENSIONS = (".csv", ".xls", ".xlsx")


@dataclass
class ParsedFile:
    """Headers in file order plus one ``dict`` per data row."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _frame_to_parsed(df: pd.DataFrame) -> ParsedFile:
    df = df.fillna("").astype(str)
    df.columns = [str(c).strip() for c in df.columns]
    for column in df.columns:
        df[column] = df[column].str.strip()
    # drop rows where every cell is blank
    df = df[(df != "").any(axis=1)]
    return ParsedFile(headers=list(df.columns), rows=df.to_dict(orient="records"))


def parse_csv(text: str) -> ParsedFile:
    """Parse CSV text; Booking.com exports use ``;``, Airbnb uses ``,``."""
    first_line = text.split("\n", 1)[0]
    delimiter = ";" if ";" in first_line else ","
    if not text.strip():
        return ParsedFile()

    df = pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        skipinitialspace=True,
    )
    return _frame_to_parsed(df)


def parse_excel(content: bytes, filename: str) -> ParsedFile:
    """Read the first worksheet with every cell as a string."""
    engine = "xlrd" if filename.lower().endswith(".xls") else "openpyxl"
    df = pd.read_excel(
        io.BytesIO(content),
        sheet_name=0,
        dtype=str,
        keep_default_na=False,
        engine=engine,
    )
    return _frame_to_parsed(df)


def parse_upload(filename: str, content: bytes) -> ParsedFile:
    """Dispatch on the file extension.

    Raises:
        UnsupportedFileError: for anything but ``.csv``, ``.xls`` and ``.xlsx``.
        ImportFileError: when pandas cannot read the content.
    """
    name = (filename or "").lower()
    if not name.endswith(SUPPORTED_EXTENSIONS):
        raise UnsupportedFileError("Unsupported file format. Use CSV, XLS, or XLSX.")

    try:
        if name.endswith(".csv"):
            return parse_csv(_decode(content))
        return parse_excel(content, name)
    except (ValueError, zipfile.BadZipFile) as exc:
        # pandas parser errors subclass ValueError
        raise ImportFileError(f"Could not read {filename}: {exc}") from exc
