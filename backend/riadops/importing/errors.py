"""Errors raised while reading an uploaded export.

Each carries the HTTP status the upload endpoint answers with.
"""


class ImportFileError(Exception):
    """Base class for input-format problems with an uploaded file."""

    status_code = 400

    def __init__(self, message: str, detected_headers: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detected_headers = detected_headers


class UnsupportedFileError(ImportFileError):
    """The file extension is not CSV, XLS or XLSX."""


class EmptyFileError(ImportFileError):
    """The file parsed to zero data rows."""


class UnknownSourceError(ImportFileError):
    """No channel marker matched the file headers."""
