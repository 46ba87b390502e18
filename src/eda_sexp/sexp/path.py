"""
Path-based lookup of nested list nodes.

A path is a ``/``-separated sequence of list names. Each segment may carry an
occurrence index in brackets selecting the n-th list of that name among its
siblings (default 0, the first one)::

    (board
     (layer "top") (layer "bottom")
     (grid (interval 0.635))
    )

    "grid/interval"   -> (interval 0.635)
    "layer[1]"        -> (layer "bottom")

Only list children are matched; tokens and strings with the same text are
ignored. The empty path resolves to the node itself.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..exceptions import NotFoundError, StructureError

if TYPE_CHECKING:
    from .node import SExpression

__all__ = ["PATH_SEPARATOR", "parse_path", "try_get_child_by_path", "get_child_by_path"]

PATH_SEPARATOR = "/"

_SEGMENT_RE = re.compile(r"(?P<name>[^\[\]/]+)(?:\[(?P<index>[0-9]+)\])?")


def parse_path(path: str) -> list[tuple[str, int]]:
    """
    Split a path into ``(name, occurrence)`` segments.

    Raises:
        StructureError: If a segment is empty or its index is malformed
    """
    if not path:
        return []

    segments = []
    for segment in path.split(PATH_SEPARATOR):
        match = _SEGMENT_RE.fullmatch(segment)
        if not match:
            raise StructureError(
                "Malformed path segment.",
                context={"path": path, "segment": repr(segment)},
                suggestions=["Use segments like 'name' or 'name[2]' separated by '/'"],
            )
        index = match.group("index")
        segments.append((match.group("name"), int(index) if index else 0))
    return segments


def _resolve(
    node: SExpression, segments: list[tuple[str, int]]
) -> tuple[Optional[SExpression], int]:
    """Walk ``segments``; returns the node found and the number of segments resolved."""
    current = node
    for depth, (name, occurrence) in enumerate(segments):
        matches = [c for c in current.children if c.is_list and c.value == name]
        if occurrence >= len(matches):
            return None, depth
        current = matches[occurrence]
    return current, len(segments)


def try_get_child_by_path(node: SExpression, path: str) -> Optional[SExpression]:
    """Resolve ``path`` below ``node``, or return None (also for a malformed path)."""
    try:
        segments = parse_path(path)
    except StructureError:
        return None
    found, _ = _resolve(node, segments)
    return found


def get_child_by_path(node: SExpression, path: str) -> SExpression:
    """
    Resolve ``path`` below ``node``.

    Raises:
        NotFoundError: If a segment has no match
    """
    segments = parse_path(path)
    found, depth = _resolve(node, segments)
    if found is None:
        name, occurrence = segments[depth]
        ctx = {"segment": f"{name}[{occurrence}]", "in": node.value}
        if node.file_path:
            ctx["file"] = str(node.file_path)
        raise NotFoundError("Child not found.", path=path, context=ctx)
    return found
