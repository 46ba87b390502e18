"""
Canonical text rendering of S-expression trees.

Layout rules:

- A list without line break children renders on one line::

      (at 1.27 -2.54 90)

- A list with line break children starts a new line at each break; the
  content between two breaks shares a line, indented one level deeper than
  the list itself. Two or more consecutive breaks produce one blank line. The
  closing parenthesis of such a list gets its own line::

      (symbol 8f8f...
       (name "R")
       (pin 1 (at 0 2.54)) (pin 2 (at 0 -2.54))
      )

- Tokens are written as is, strings in double quotes with escapes.

The output always parses back to the same tree (apart from line breaks, which
only the ``keep_line_breaks`` parser mode reproduces).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .grammar import NodeType, escape_string

if TYPE_CHECKING:
    from .node import SExpression

__all__ = ["DEFAULT_INDENT", "render"]

# One space per nesting level
DEFAULT_INDENT = " "


def render(node: SExpression, indent: int = 0, indent_unit: str = DEFAULT_INDENT) -> str:
    """
    Render ``node`` in canonical form.

    Args:
        node: Node to render
        indent: Nesting level of the line the node starts on
        indent_unit: Text inserted once per nesting level
    """
    if node.kind is NodeType.LIST:
        return _render_list(node, indent, indent_unit)
    if node.kind is NodeType.TOKEN:
        return node.value
    if node.kind is NodeType.STRING:
        return f'"{escape_string(node.value)}"'
    return ""


def _render_list(node: SExpression, indent: int, indent_unit: str) -> str:
    if not node.is_multi_line_list:
        parts = [node.value]
        parts.extend(render(c, indent + 1, indent_unit) for c in node.children)
        return "(" + " ".join(parts) + ")"

    child_indent = indent_unit * (indent + 1)
    lines = ["(" + node.value]
    pending_breaks = 0

    for child in node.children:
        if child.is_line_break:
            pending_breaks += 1
            continue

        text = render(child, indent + 1, indent_unit)
        if pending_breaks:
            if pending_breaks > 1:
                lines.append("")
            lines.append(child_indent + text)
            pending_breaks = 0
        else:
            lines[-1] += " " + text

    lines.append(indent_unit * indent + ")")
    return "\n".join(lines)
