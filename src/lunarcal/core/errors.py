# src/lunarcal/core/errors.py
from __future__ import annotations

from typing import Optional


class LunarCalError(Exception):
    """Base error."""


class DateNotFoundError(LunarCalError, LookupError):
    """Raised when a date is not present in the scanned calendar files."""


class FileFormatError(LunarCalError, ValueError):
    """
    A calendar text file could not be parsed.

    file_year / line_no / line are filled in when known (line_no is 1-based,
    counted from the top of the file including header lines).
    """

    def __init__(
        self,
        message: str,
        *,
        file_year: Optional[int] = None,
        line_no: Optional[int] = None,
        line: Optional[str] = None,
    ) -> None:
        self.reason = message
        self.file_year = file_year
        self.line_no = line_no
        self.line = line
        where = []
        if file_year is not None:
            where.append(f"file_year={file_year}")
        if line_no is not None:
            where.append(f"line={line_no}")
        if where:
            message = f"{message} ({' '.join(where)})"
        super().__init__(message)


class FileSourceError(LunarCalError, OSError):
    """A calendar file could not be fetched (network failure, bad status)."""
