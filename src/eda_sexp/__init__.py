"""
eda-sexp: typed S-expression documents for EDA project files.

Schematics, boards and libraries are stored as Lisp-like S-expressions.
This package reads them into a tree of typed nodes, converts atoms to and
from Python values and writes the tree back in a canonical layout.

Modules:
    sexp: Document tree, value codec, parser and renderer
    types: Value types stored as atoms (UInt, Color)
    exceptions: Error hierarchy
    config: TOML configuration
    cli: The ``eda-sexp`` command

Quick Start::

    from eda_sexp import SExpression, parse_file

    root = parse_file("library/pkg.lp")
    name = root.get_value_by_path("name", reject_empty=True)
"""

__version__ = "0.1.0"

import logging

from .exceptions import (
    EmptyValueError,
    FileParseError,
    FormatError,
    NotFoundError,
    SExpError,
    StructureError,
)
from .sexp import NodeType, SExpression, deserialize, parse, parse_file, save_file, serialize
from .types import Color, UInt

# Library default: no output unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "SExpression",
    "NodeType",
    "parse",
    "parse_file",
    "save_file",
    "serialize",
    "deserialize",
    "Color",
    "UInt",
    "SExpError",
    "StructureError",
    "NotFoundError",
    "FormatError",
    "FileParseError",
    "EmptyValueError",
]
