"""
S-expression document tree.

A document is a tree of :class:`SExpression` nodes of four kinds:

    List       (name child child ...)
    Token      unquoted value, e.g. -12.34 or true
    String     quoted value, e.g. "Foo!"
    LineBreak  rendering hint that forces a new line inside a List

Building a document::

    root = SExpression.create_list("board")
    root.append_token(uuid4())
    root.append_line_break()
    root.append_string_child("name", "Main Board", force_break_after=True)
    root.append_list("grid").append_token("0.635").append_token("mm")

    print(root.to_string())
    (board 1b8f...
     (name "Main Board")
     (grid 0.635 mm)
    )

Reading typed values back::

    root.get_value_by_path("name")                 -> "Main Board"
    root.get_child_by_path("grid").get_value_of_first_child(str)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from ..exceptions import EmptyValueError, FileParseError, FormatError, StructureError
from . import codec
from .grammar import NodeType, is_valid_list_name, is_valid_token
from .path import get_child_by_path, try_get_child_by_path
from .render import DEFAULT_INDENT, render

__all__ = ["SExpression"]


@dataclass(frozen=True)
class SExpression:
    """
    A node of an S-expression document.

    Nodes compare structurally (kind, value and children); ``file_path`` is
    provenance for error messages only and does not take part in equality.

    Use the ``create_*`` factories instead of the constructor; they validate
    list names and tokens.

    Attributes:
        kind: Node kind
        value: List name, token text or string text (empty for line breaks)
        children: Child nodes (lists only)
        file_path: File the node was parsed from, if any
    """

    kind: NodeType
    value: str = ""
    children: list[SExpression] = field(default_factory=list)
    file_path: Optional[Path] = field(default=None, compare=False, repr=False)

    # Children are mutable in place
    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Factories
    # =========================================================================

    @staticmethod
    def create_list(name: str, file_path: Optional[Path] = None) -> SExpression:
        """Create an empty list node."""
        if not is_valid_list_name(name):
            raise StructureError("Invalid S-expression list name.", context={"name": repr(name)})
        return SExpression(NodeType.LIST, name, file_path=file_path)

    @staticmethod
    def create_token(token: str, file_path: Optional[Path] = None) -> SExpression:
        """Create a token node; ``token`` must be a valid unquoted atom."""
        if not is_valid_token(token):
            raise StructureError("Invalid S-expression token.", context={"token": repr(token)})
        return SExpression(NodeType.TOKEN, token, file_path=file_path)

    @staticmethod
    def create_string(string: str, file_path: Optional[Path] = None) -> SExpression:
        """Create a string node; any text is allowed."""
        return SExpression(NodeType.STRING, string, file_path=file_path)

    @staticmethod
    def create_line_break(file_path: Optional[Path] = None) -> SExpression:
        """Create a line break node."""
        return SExpression(NodeType.LINE_BREAK, file_path=file_path)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_list(self) -> bool:
        return self.kind is NodeType.LIST

    @property
    def is_token(self) -> bool:
        return self.kind is NodeType.TOKEN

    @property
    def is_string(self) -> bool:
        return self.kind is NodeType.STRING

    @property
    def is_line_break(self) -> bool:
        return self.kind is NodeType.LINE_BREAK

    @property
    def is_multi_line_list(self) -> bool:
        """True if this is a list directly containing a line break."""
        return self.is_list and any(c.is_line_break for c in self.children)

    @property
    def name(self) -> str:
        """Name of a list node."""
        if not self.is_list:
            raise StructureError("Node is not a list.", context=self._location())
        return self.value

    # =========================================================================
    # Child access
    # =========================================================================

    def get_children(self, name: Optional[str] = None) -> list[SExpression]:
        """
        Get child nodes.

        Args:
            name: If given, only lists with this name and tokens/strings with
                this value are returned

        Returns:
            New list holding the (shared) child nodes
        """
        if name is None:
            return list(self.children)
        return [c for c in self.children if not c.is_line_break and c.value == name]

    def get_child_by_index(self, index: int) -> SExpression:
        """
        Get the child at ``index``.

        Raises:
            StructureError: If index is not in ``[0, len(children))``
        """
        if not 0 <= index < len(self.children):
            raise StructureError(
                "Child index out of range.",
                context={"index": index, "count": len(self.children), **self._location()},
            )
        return self.children[index]

    def try_get_child_by_path(self, path: str) -> Optional[SExpression]:
        """Resolve ``path`` (e.g. ``"layers/layer[2]"``), or return None."""
        return try_get_child_by_path(self, path)

    def get_child_by_path(self, path: str) -> SExpression:
        """
        Resolve ``path`` (e.g. ``"layers/layer[2]"``).

        Raises:
            NotFoundError: If the path does not resolve
        """
        return get_child_by_path(self, path)

    # =========================================================================
    # Typed values
    # =========================================================================

    def get_value(self, target_type: Any = str, reject_empty: bool = False) -> Any:
        """
        Decode the value of this token or string node.

        Args:
            target_type: Type to decode to, e.g. ``int`` or ``Optional[Color]``
            reject_empty: Raise EmptyValueError for an empty value

        Raises:
            StructureError: If the node is not a token or string
            EmptyValueError: If the value is empty and ``reject_empty`` is set
            FileParseError: If the value does not match the type's grammar
        """
        if not (self.is_token or self.is_string):
            raise StructureError("Node is not a token or string.", context=self._location())
        if reject_empty and not self.value:
            raise EmptyValueError("Node value is empty.", file_path=self.file_path, text=self.value)
        try:
            return codec.deserialize(self.value, target_type)
        except FormatError as e:
            raise FileParseError(
                e.message,
                file_path=self.file_path,
                text=self.value,
            ) from e

    def get_value_of_first_child(self, target_type: Any = str, reject_empty: bool = False) -> Any:
        """
        Decode the value of the first child, e.g. ``42`` of ``(width 42)``.

        Raises:
            StructureError: If the node has no children
        """
        if not self.children:
            raise StructureError("Node does not have children.", context=self._location())
        return self.children[0].get_value(target_type, reject_empty)

    def get_value_by_path(
        self, path: str, target_type: Any = str, reject_empty: bool = False
    ) -> Any:
        """Resolve ``path`` and decode the value of the first child there."""
        child = self.get_child_by_path(path)
        return child.get_value_of_first_child(target_type, reject_empty)

    # =========================================================================
    # Mutation
    # =========================================================================

    def append_child(self, child: SExpression, force_break_after: bool = False) -> SExpression:
        """
        Append a copy of ``child``.

        Args:
            child: Node to append; it is deep-copied so no two parents share it
            force_break_after: Insert a line break after the child

        Returns:
            self, for chaining
        """
        self._require_list()
        self.children.append(copy.deepcopy(child))
        if force_break_after:
            self.children.append(SExpression.create_line_break())
        return self

    def append_list(self, name: str, force_break_after: bool = False) -> SExpression:
        """
        Append an empty list named ``name``.

        Returns:
            The new child list (not self), to append to it
        """
        self._require_list()
        child = SExpression.create_list(name)
        self.children.append(child)
        if force_break_after:
            self.children.append(SExpression.create_line_break())
        return child

    def append_token(self, value: Any, value_type: Any = None) -> SExpression:
        """Append ``value`` serialized as a token. Returns self."""
        self._require_list()
        self.children.append(SExpression.create_token(codec.serialize(value, value_type)))
        return self

    def append_string(self, value: Any, value_type: Any = None) -> SExpression:
        """Append ``value`` serialized as a quoted string. Returns self."""
        self._require_list()
        self.children.append(SExpression.create_string(codec.serialize(value, value_type)))
        return self

    def append_line_break(self) -> SExpression:
        """Append a line break. Returns self."""
        self._require_list()
        self.children.append(SExpression.create_line_break())
        return self

    def append_token_child(
        self, name: str, value: Any, force_break_after: bool = False, value_type: Any = None
    ) -> SExpression:
        """Append ``(name value)`` with value as token. Returns the new child."""
        return self.append_list(name, force_break_after).append_token(value, value_type)

    def append_string_child(
        self, name: str, value: Any, force_break_after: bool = False, value_type: Any = None
    ) -> SExpression:
        """Append ``(name "value")``. Returns the new child."""
        return self.append_list(name, force_break_after).append_string(value, value_type)

    def remove_line_breaks(self) -> None:
        """Recursively remove all line breaks."""
        self.children[:] = [c for c in self.children if not c.is_line_break]
        for child in self.children:
            child.remove_line_breaks()

    # =========================================================================
    # Output
    # =========================================================================

    def to_string(self, indent: int = 0, indent_unit: str = DEFAULT_INDENT) -> str:
        """Render in canonical form (see :func:`eda_sexp.sexp.render.render`)."""
        return render(self, indent, indent_unit)

    def copy(self) -> SExpression:
        """Return an independent deep copy."""
        return copy.deepcopy(self)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_list(self) -> None:
        if not self.is_list:
            raise StructureError(
                "Cannot append children to a non-list node.", context=self._location()
            )

    def _location(self) -> dict[str, Any]:
        ctx: dict[str, Any] = {"node": self._describe()}
        if self.file_path:
            ctx["file"] = str(self.file_path)
        return ctx

    def _describe(self) -> str:
        if self.is_list:
            return f"({self.value} ...)"
        if self.is_line_break:
            return "line break"
        return f"{self.kind.value} {self.value!r}"

    def __iter__(self) -> Iterator[SExpression]:
        return iter(self.children)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        if self.is_list:
            return f"SExpression(list={self.value!r}, children=[{len(self.children)} items])"
        if self.is_line_break:
            return "SExpression(line_break)"
        return f"SExpression({self.kind.value}={self.value!r})"
