"""
Generic S-expression lexer.

Turns text into a raw tree of parenthesized lists and atoms. The only thing it
knows about an atom is whether it was quoted; deciding what an atom or a list
means is left to :mod:`eda_sexp.sexp.parser`.

    lex('(net 3 "GND")')
    -> RawList([RawAtom("net"), RawAtom("3"), RawAtom("GND", quoted=True)])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .grammar import decode_hex_escape, unescape_char

__all__ = ["RawAtom", "RawBreak", "RawList", "RawExpr", "LexError", "Lexer", "lex"]


@dataclass
class RawAtom:
    """Atom as found in the text; ``text`` is already unescaped."""

    text: str
    quoted: bool = False
    pos: int = 0


@dataclass
class RawBreak:
    """One or more newlines between two items of a list."""

    count: int = 1
    pos: int = 0


@dataclass
class RawList:
    """Parenthesized form; items in source order."""

    items: list[RawExpr] = field(default_factory=list)
    pos: int = 0


RawExpr = Union[RawAtom, RawBreak, RawList]


class LexError(Exception):
    """Malformed input: unbalanced parentheses, unterminated string, ..."""

    def __init__(self, message: str, text: str, pos: int):
        self.message = message
        self.pos = pos
        self.line = text.count("\n", 0, pos) + 1
        self.column = pos - (text.rfind("\n", 0, pos) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class Lexer:
    """Recursive-descent lexer over a single text."""

    def __init__(self, text: str, line_breaks: bool = False):
        self.text = text
        self.line_breaks = line_breaks
        self.pos = 0
        self.length = len(text)

    def lex(self) -> RawExpr:
        """Lex the whole text, which must contain exactly one expression."""
        self._skip_whitespace()
        if self.pos >= self.length:
            raise LexError("Document is empty", self.text, self.pos)
        result = self._lex_expr()
        self._skip_whitespace()
        if self.pos < self.length:
            raise LexError("Unexpected content after expression", self.text, self.pos)
        return result

    def _lex_expr(self) -> RawExpr:
        self._skip_whitespace()

        if self.pos >= self.length:
            raise LexError("Unexpected end of input", self.text, self.pos)

        char = self.text[self.pos]
        if char == "(":
            return self._lex_list()
        if char == ")":
            raise LexError("Unbalanced ')'", self.text, self.pos)
        if char == '"':
            start = self.pos
            return RawAtom(self._lex_string(), quoted=True, pos=start)
        return self._lex_atom()

    def _lex_list(self) -> RawList:
        node = RawList(pos=self.pos)
        self.pos += 1

        while True:
            start = self.pos
            newlines = self._skip_whitespace()
            if newlines and self.line_breaks:
                node.items.append(RawBreak(newlines, pos=start))

            if self.pos >= self.length:
                raise LexError("Unexpected end of input, expected ')'", self.text, node.pos)

            if self.text[self.pos] == ")":
                self.pos += 1
                return node

            node.items.append(self._lex_expr())

    def _lex_string(self) -> str:
        start = self.pos
        self.pos += 1

        result = []
        while self.pos < self.length:
            char = self.text[self.pos]

            if char == '"':
                self.pos += 1
                return "".join(result)
            if char == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                char = self.text[self.pos]
                decoded = None
                if char == "x":
                    decoded = decode_hex_escape(self.text[self.pos + 1 : self.pos + 3])
                if decoded is not None:
                    result.append(decoded)
                    self.pos += 2
                else:
                    result.append(unescape_char(char))
            else:
                result.append(char)

            self.pos += 1

        raise LexError("Unterminated string", self.text, start)

    def _lex_atom(self) -> RawAtom:
        start = self.pos

        while self.pos < self.length:
            char = self.text[self.pos]
            if char.isspace() or char in '()"':
                break
            self.pos += 1

        return RawAtom(self.text[start : self.pos], pos=start)

    def _skip_whitespace(self) -> int:
        """Skip whitespace, returning the number of newlines skipped."""
        newlines = 0
        while self.pos < self.length and self.text[self.pos].isspace():
            if self.text[self.pos] == "\n":
                newlines += 1
            self.pos += 1
        return newlines


def lex(text: str, line_breaks: bool = False) -> RawExpr:
    """
    Lex an S-expression string into a raw tree.

    Args:
        text: Text containing exactly one expression
        line_breaks: Report newlines between list items as :class:`RawBreak`
    """
    return Lexer(text, line_breaks).lex()
