"""
S-expression document tree and textual codec.

Usage:
    from eda_sexp.sexp import SExpression, parse, parse_file, save_file

    root = parse_file("project/boards/main.lp")
    width = root.get_value_by_path("default_width", int)

    root.append_token_child("version", 2, force_break_after=True)
    save_file(root, "project/boards/main.lp")
"""

from .codec import Serializable, deserialize, null_representation, register_codec, serialize
from .grammar import NodeType, escape_string, is_valid_list_name, is_valid_token
from .node import SExpression
from .parser import parse, parse_file, save_file
from .path import PATH_SEPARATOR
from .render import DEFAULT_INDENT, render

__all__ = [
    # Tree
    "SExpression",
    "NodeType",
    # Codec
    "Serializable",
    "serialize",
    "deserialize",
    "register_codec",
    "null_representation",
    # Text
    "parse",
    "parse_file",
    "save_file",
    "render",
    "DEFAULT_INDENT",
    "PATH_SEPARATOR",
    # Grammar
    "escape_string",
    "is_valid_list_name",
    "is_valid_token",
]
