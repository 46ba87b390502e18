"""
Exception hierarchy for eda-sexp.

Every error carries a message, a context dictionary (file, line, offending
text, ...) and an optional list of suggestions, all rendered into ``str(err)``.

Example::

    from eda_sexp.exceptions import FileParseError

    raise FileParseError(
        "Not a valid integer.",
        file_path="board.lp",
        text="4a",
        suggestions=["Check the value of the (layers) node"],
    )

Navigation errors (:class:`StructureError`, :class:`NotFoundError`) signal a
wrong expectation of the caller about the tree shape. Decode errors
(:class:`FormatError`) are raised by the value codec and re-wrapped into
:class:`FileParseError` by the tree accessors so the user always learns which
file was at fault.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class SExpError(Exception):
    """
    Base exception for all eda-sexp errors.

    Attributes:
        context: Dictionary of contextual information (file, line, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class StructureError(SExpError):
    """
    Wrong node kind or shape for the requested operation.

    Example::

        raise StructureError(
            "Index out of range.",
            context={"index": 5, "count": 2},
        )
    """

    pass


class NotFoundError(SExpError):
    """
    A path could not be resolved in the tree.

    Attributes:
        path: The requested path
    """

    def __init__(
        self,
        message: str,
        path: str = "",
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.path = path
        ctx = context or {}
        if path and "path" not in ctx:
            ctx["path"] = path
        super().__init__(message, ctx, suggestions)


class FormatError(SExpError):
    """
    Text does not match the grammar of the requested value type.

    Raised by :mod:`eda_sexp.sexp.codec`. Tree accessors never let it escape;
    they re-raise it as :class:`FileParseError`.
    """

    pass


class FileParseError(SExpError):
    """
    A file (or a location inside a file) could not be decoded.

    Attributes:
        file_path: File the offending node came from, if known
        text: Offending raw text, if available
        line: 1-based line number, if known
        column: 1-based column number, if known
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Union[str, Path]] = None,
        text: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.file_path = Path(file_path) if file_path else None
        self.text = text
        self.line = line
        self.column = column

        # Build context from convenience parameters
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if line is not None and "line" not in ctx:
            ctx["line"] = line
        if column is not None and "column" not in ctx:
            ctx["column"] = column
        if text is not None and "text" not in ctx:
            ctx["text"] = repr(text)

        super().__init__(message, ctx, suggestions)


class EmptyValueError(FileParseError):
    """A node value is empty although a non-empty value is required."""

    pass


class SExpFileNotFoundError(SExpError):
    """
    A document file to load does not exist.

    Example::

        raise SExpFileNotFoundError(
            "Document not found",
            context={"file": "missing.lp"},
            suggestions=["Check that the file path is correct"],
        )
    """

    pass


class ConfigError(SExpError):
    """Configuration file is invalid or unreadable."""

    pass


__all__ = [
    "SExpError",
    "StructureError",
    "NotFoundError",
    "FormatError",
    "FileParseError",
    "EmptyValueError",
    "SExpFileNotFoundError",
    "ConfigError",
]
