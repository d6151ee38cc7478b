# SPDX-License-Identifier: MIT
# src/cblm/errors.py
"""
Error taxonomy for building Coded BLMs.

Fatal conditions are exceptions. An unmatched node name is not: it is a
per-row record (see `cblm.annotate.annotator.UnmatchedNode`) that gets
logged and collected while the run carries on.
"""
from typing import Optional


class CBLMError(Exception):
    """Base class for every fatal error raised by cblm."""


class InvalidGroupingFile(CBLMError):
    """Grouping file is missing, unreadable, or not valid JSON."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid grouping file {path}: {reason}")


class MalformedGroupingData(CBLMError):
    """Decoded grouping JSON does not have either accepted shape."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        if code is not None:
            message = f"code {code!r}: {message}"
        super().__init__(message)


class MalformedTable(CBLMError):
    """Input table lacks a header row or the minimum number of columns."""

    def __init__(self, message: str, source: Optional[str] = None, row: Optional[int] = None):
        self.source = source
        self.row = row
        where = []
        if source:
            where.append(str(source))
        if row is not None:
            where.append(f"row {row}")
        prefix = f"{', '.join(where)}: " if where else ""
        super().__init__(prefix + message)
