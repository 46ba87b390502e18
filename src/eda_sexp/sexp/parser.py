"""
Parsing and persisting S-expression documents.

Usage:
    from eda_sexp.sexp import parse, parse_file, save_file

    root = parse('(board (name "Main"))', file_path=Path("main.lp"))
    root = parse_file("project/boards/main.lp")
    save_file(root, "project/boards/main.lp")

The raw lexing is done by :mod:`eda_sexp.sexp.lexer`; this module decides
what each raw form is: quoted atoms become strings, unquoted atoms tokens and
parenthesized forms lists named by their first atom. Every node produced is
stamped with the file it came from.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import FileParseError, SExpFileNotFoundError, StructureError
from .lexer import LexError, RawAtom, RawBreak, RawExpr, RawList, lex
from .node import SExpression
from .render import DEFAULT_INDENT

logger = logging.getLogger(__name__)

__all__ = ["parse", "parse_file", "save_file", "DEFAULT_SNIPPET_LENGTH"]

# Characters of offending text quoted in parse errors
DEFAULT_SNIPPET_LENGTH = 40

# A run of newlines is kept as at most this many line breaks (one blank line)
MAX_CONSECUTIVE_BREAKS = 2


class _Builder:
    """Classifies a raw tree into SExpression nodes."""

    def __init__(self, text: str, file_path: Optional[Path], snippet_length: int):
        self.text = text
        self.file_path = file_path
        self.snippet_length = snippet_length
        self.count = 0

    def build(self, raw: RawExpr) -> SExpression:
        if isinstance(raw, RawList):
            return self._build_list(raw)
        if isinstance(raw, RawAtom):
            return self._build_atom(raw)
        return SExpression.create_line_break(self.file_path)

    def _build_list(self, raw: RawList) -> SExpression:
        items = list(raw.items)
        while items and isinstance(items[0], RawBreak):
            items.pop(0)

        if not items:
            raise self.error("Empty list", raw.pos)
        first = items[0]
        if not isinstance(first, RawAtom) or first.quoted:
            raise self.error("List does not start with a name", first.pos)

        try:
            node = SExpression.create_list(first.text, self.file_path)
        except StructureError as e:
            raise self.error(e.message, first.pos) from e
        self.count += 1

        for item in items[1:]:
            if isinstance(item, RawBreak):
                for _ in range(min(item.count, MAX_CONSECUTIVE_BREAKS)):
                    node.children.append(self.build(item))
            else:
                node.children.append(self.build(item))
        return node

    def _build_atom(self, raw: RawAtom) -> SExpression:
        self.count += 1
        if raw.quoted:
            return SExpression.create_string(raw.text, self.file_path)
        try:
            return SExpression.create_token(raw.text, self.file_path)
        except StructureError as e:
            raise self.error(e.message, raw.pos) from e

    def error(self, message: str, pos: int) -> FileParseError:
        err = LexError(message, self.text, pos)
        return FileParseError(
            message,
            file_path=self.file_path,
            text=self.text[pos : pos + self.snippet_length],
            line=err.line,
            column=err.column,
        )


def parse(
    text: str,
    file_path: Optional[Union[str, Path]] = None,
    keep_line_breaks: bool = False,
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> SExpression:
    """
    Parse a document.

    Args:
        text: Document text; must contain exactly one list
        file_path: File the text was read from, stamped on every node
        keep_line_breaks: Turn newlines between list items into line break
            nodes (a blank line becomes two), so re-rendering keeps the
            original line layout
        snippet_length: Characters of offending text quoted in errors

    Raises:
        FileParseError: If the text is malformed
    """
    path = Path(file_path) if file_path else None

    try:
        raw = lex(text, line_breaks=keep_line_breaks)
    except LexError as e:
        raise FileParseError(
            e.message,
            file_path=path,
            text=text[e.pos : e.pos + snippet_length],
            line=e.line,
            column=e.column,
            suggestions=["Check for unbalanced parentheses or unterminated strings"],
        ) from e
    except RecursionError as e:
        raise _too_deep(path) from e

    builder = _Builder(text, path, snippet_length)
    if not isinstance(raw, RawList):
        raise builder.error("Document does not start with a list", raw.pos)

    try:
        root = builder.build(raw)
    except RecursionError as e:
        raise _too_deep(path) from e

    logger.debug("Parsed %d nodes from %s", builder.count, path or "<string>")
    return root


def _too_deep(path: Optional[Path]) -> FileParseError:
    return FileParseError(
        "Document is nested too deeply",
        file_path=path,
        suggestions=["Reduce the nesting depth of the document"],
    )


def parse_file(
    path: Union[str, Path],
    keep_line_breaks: bool = False,
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> SExpression:
    """
    Read and parse a UTF-8 document file.

    Raises:
        SExpFileNotFoundError: If the file does not exist
        FileParseError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise SExpFileNotFoundError(
            "Document file not found",
            context={"file": str(path)},
            suggestions=["Check that the file path is correct"],
        )

    text = path.read_text(encoding="utf-8")
    return parse(text, path, keep_line_breaks=keep_line_breaks, snippet_length=snippet_length)


def save_file(
    root: SExpression,
    path: Union[str, Path],
    indent_unit: str = DEFAULT_INDENT,
    trailing_newline: bool = True,
) -> None:
    """Render ``root`` canonically and write it to ``path`` as UTF-8."""
    path = Path(path)
    text = root.to_string(indent_unit=indent_unit)
    if trailing_newline:
        text += "\n"
    path.write_text(text, encoding="utf-8")
    logger.debug("Saved %s (%d bytes)", path, len(text))
