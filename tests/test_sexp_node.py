"""Tests for the S-expression document tree."""

from collections.abc import Hashable
from pathlib import Path

import pytest

from eda_sexp.exceptions import (
    EmptyValueError,
    FileParseError,
    FormatError,
    NotFoundError,
    StructureError,
)
from eda_sexp.sexp import NodeType, SExpression


def kinds(node):
    return [c.kind for c in node.children]


class TestFactories:
    """Tests for node creation and validation."""

    def test_create_list(self):
        """Create an empty list."""
        node = SExpression.create_list("board")
        assert node.is_list
        assert node.name == "board"
        assert node.children == []

    @pytest.mark.parametrize("name", ["", "1abc", "-x", "has space", "a(b", 'a"b'])
    def test_invalid_list_name(self, name):
        """Invalid list names are rejected."""
        with pytest.raises(StructureError, match="list name"):
            SExpression.create_list(name)

    def test_create_token(self):
        """Create a token."""
        node = SExpression.create_token("-12.34")
        assert node.is_token
        assert node.value == "-12.34"

    @pytest.mark.parametrize("token", ["", "a b", "a(b", "a)b", 'a"b', "tab\there", "nl\n"])
    def test_invalid_token(self, token):
        """Tokens must be non-empty without whitespace, parentheses or quotes."""
        with pytest.raises(StructureError, match="token"):
            SExpression.create_token(token)

    def test_create_string_allows_anything(self):
        """Strings may be empty or contain special characters."""
        assert SExpression.create_string("").value == ""
        assert SExpression.create_string('a "b" (c)\n').value == 'a "b" (c)\n'

    def test_create_line_break(self):
        """Line breaks have no value and no children."""
        node = SExpression.create_line_break()
        assert node.is_line_break
        assert node.value == ""
        assert node.children == []

    def test_name_of_non_list_raises(self):
        """Only lists have a name."""
        with pytest.raises(StructureError, match="not a list"):
            _ = SExpression.create_token("x").name

    def test_name_is_read_only(self):
        """A list name cannot be changed once set."""
        node = SExpression.create_list("board")
        with pytest.raises(AttributeError):
            node.value = "other"


class TestEquality:
    """Tests for structural equality."""

    def test_equal_trees(self):
        """Trees built the same way compare equal."""
        a = SExpression.create_list("a").append_token("1").append_string("x")
        b = SExpression.create_list("a").append_token("1").append_string("x")
        assert a == b

    def test_file_path_ignored(self):
        """Provenance does not take part in equality."""
        assert SExpression.create_token("a", Path("one.lp")) == SExpression.create_token("a")

    def test_kind_matters(self):
        """A token and a string with the same text differ."""
        assert SExpression.create_token("a") != SExpression.create_string("a")

    def test_unhashable(self):
        """Nodes are mutable in place and therefore not hashable."""
        node = SExpression.create_list("a")
        assert not isinstance(node, Hashable)
        with pytest.raises(TypeError, match="unhashable"):
            hash(node)

    def test_child_order_matters(self):
        """Children are compared in order."""
        a = SExpression.create_list("a").append_token("1").append_token("2")
        b = SExpression.create_list("a").append_token("2").append_token("1")
        assert a != b


class TestAppend:
    """Tests for mutation operations."""

    def test_append_child_returns_self(self):
        """append_child is chainable on the parent."""
        root = SExpression.create_list("root")
        result = root.append_child(SExpression.create_token("a"))
        assert result is root

    def test_append_child_copies(self):
        """The parent owns a copy; later changes to the original do not leak in."""
        root = SExpression.create_list("root")
        child = SExpression.create_list("child")
        root.append_child(child)
        child.append_token("late")
        assert root.children[0].children == []

    def test_same_child_twice_is_independent(self):
        """Appending one node twice yields two independent children."""
        root = SExpression.create_list("root")
        child = SExpression.create_list("child")
        root.append_child(child).append_child(child)
        root.children[0].append_token("only_first")
        assert root.children[1].children == []

    def test_force_break_after(self):
        """A forced break inserts a line break right after the child."""
        root = SExpression.create_list("root")
        root.append_child(SExpression.create_token("a"), force_break_after=True)
        root.append_token("b")
        assert kinds(root) == [NodeType.TOKEN, NodeType.LINE_BREAK, NodeType.TOKEN]

    def test_append_list_returns_child(self):
        """append_list returns the new child for chaining into it."""
        root = SExpression.create_list("root")
        child = root.append_list("grid")
        child.append_token("0.635").append_token("mm")
        assert child is root.children[0]
        assert root.to_string() == "(root (grid 0.635 mm))"

    def test_append_list_force_break(self):
        """append_list with a forced break."""
        root = SExpression.create_list("root")
        root.append_list("a", force_break_after=True)
        assert kinds(root) == [NodeType.LIST, NodeType.LINE_BREAK]

    def test_append_token_serializes(self):
        """Values are serialized by the codec before being appended."""
        root = SExpression.create_list("root")
        root.append_token(True).append_token(-7)
        assert [c.value for c in root.children] == ["true", "-7"]

    def test_append_string_serializes(self):
        """Strings are stored unescaped."""
        root = SExpression.create_list("root")
        root.append_string('say "hi"')
        assert root.children[0].is_string
        assert root.children[0].value == 'say "hi"'

    def test_append_invalid_token(self):
        """A value that is not a valid token is rejected."""
        root = SExpression.create_list("root")
        with pytest.raises(StructureError):
            root.append_token("two words")

    def test_append_to_non_list(self):
        """Tokens and strings cannot have children."""
        token = SExpression.create_token("a")
        with pytest.raises(StructureError, match="non-list"):
            token.append_token("b")
        with pytest.raises(StructureError):
            token.append_line_break()

    def test_append_token_child(self):
        """append_token_child appends (name value) and returns it."""
        root = SExpression.create_list("root")
        child = root.append_token_child("width", 42, force_break_after=True)
        assert child.name == "width"
        assert root.to_string() == "(root (width 42)\n)"

    def test_append_string_child(self):
        """append_string_child appends (name "value")."""
        root = SExpression.create_list("root")
        root.append_string_child("name", "Main Board")
        assert root.to_string() == '(root (name "Main Board"))'

    def test_remove_line_breaks_recursive(self):
        """Line breaks are removed at every depth."""
        root = SExpression.create_list("root")
        root.append_line_break()
        root.append_list("a", force_break_after=True).append_token("x").append_line_break()
        root.remove_line_breaks()
        assert kinds(root) == [NodeType.LIST]
        assert kinds(root.children[0]) == [NodeType.TOKEN]


class TestChildAccess:
    """Tests for reading children."""

    @pytest.fixture
    def root(self):
        root = SExpression.create_list("root")
        root.append_list("item").append_token("a")
        root.append_token("item")
        root.append_line_break()
        root.append_list("other")
        root.append_string("item")
        root.append_list("item").append_token("b")
        return root

    def test_get_children(self, root):
        """All children including line breaks."""
        assert len(root.get_children()) == 6

    def test_get_children_by_name(self, root):
        """Named lists and tokens/strings with that text."""
        matches = root.get_children("item")
        assert [m.kind for m in matches] == [
            NodeType.LIST,
            NodeType.TOKEN,
            NodeType.STRING,
            NodeType.LIST,
        ]

    def test_get_children_no_match(self, root):
        """No match returns an empty list."""
        assert root.get_children("missing") == []

    def test_get_child_by_index(self, root):
        """Index access."""
        assert root.get_child_by_index(1).value == "item"

    @pytest.mark.parametrize("index", [5, 2, -1])
    def test_get_child_by_index_out_of_range(self, index):
        """Out of range index raises StructureError."""
        node = SExpression.create_list("pair").append_token("a").append_token("b")
        with pytest.raises(StructureError, match="out of range"):
            node.get_child_by_index(index)

    def test_is_multi_line_list(self, root):
        """A list is multi-line only with a direct line break child."""
        assert root.is_multi_line_list
        assert not root.children[0].is_multi_line_list
        assert not SExpression.create_token("x").is_multi_line_list
        assert not SExpression.create_line_break().is_multi_line_list

    def test_iter(self, root):
        """Iterating a node yields its children."""
        assert list(root) == root.children


class TestTypedValues:
    """Tests for typed accessors."""

    def test_get_value_token(self):
        """Decode a token."""
        assert SExpression.create_token("42").get_value(int) == 42

    def test_get_value_string_default_type(self):
        """Default target type is str."""
        assert SExpression.create_string("hello").get_value() == "hello"

    def test_get_value_on_list(self):
        """Lists have no value."""
        with pytest.raises(StructureError, match="not a token or string"):
            SExpression.create_list("a").get_value()

    def test_get_value_on_line_break(self):
        """Line breaks have no value."""
        with pytest.raises(StructureError, match="not a token or string"):
            SExpression.create_line_break().get_value()

    def test_empty_value_rejected(self):
        """An empty value fails when a non-empty one is required."""
        node = SExpression(NodeType.TOKEN, "")
        with pytest.raises(EmptyValueError):
            node.get_value(str, reject_empty=True)

    def test_empty_value_allowed(self):
        """An empty value is returned when allowed."""
        node = SExpression(NodeType.TOKEN, "")
        assert node.get_value(str, reject_empty=False) == ""

    def test_empty_string_rejected(self):
        """Empty strings are rejected too, with file context."""
        node = SExpression.create_string("", Path("lib/pkg.lp"))
        with pytest.raises(EmptyValueError) as exc:
            node.get_value(str, reject_empty=True)
        assert exc.value.file_path == Path("lib/pkg.lp")

    def test_format_error_rewrapped(self):
        """Codec errors surface as FileParseError with file and text."""
        node = SExpression.create_token("4a", Path("board.lp"))
        with pytest.raises(FileParseError) as exc:
            node.get_value(int)
        err = exc.value
        assert not isinstance(err, FormatError)
        assert isinstance(err.__cause__, FormatError)
        assert err.file_path == Path("board.lp")
        assert err.text == "4a"
        assert "Not a valid integer" in str(err)
        assert "board.lp" in str(err)

    def test_get_value_of_first_child(self):
        """Decode the first child of a list."""
        node = SExpression.create_list("width").append_token("42").append_token("7")
        assert node.get_value_of_first_child(int) == 42

    def test_get_value_of_first_child_without_children(self):
        """A list without children has no first value."""
        with pytest.raises(StructureError, match="does not have children"):
            SExpression.create_list("empty").get_value_of_first_child()

    def test_get_value_by_path(self):
        """Resolve a path and decode the first child there."""
        root = SExpression.create_list("root")
        root.append_list("grid").append_token_child("interval", 635)
        assert root.get_value_by_path("grid/interval", int) == 635

    def test_get_value_by_path_missing(self):
        """Unresolved paths propagate NotFoundError unchanged."""
        root = SExpression.create_list("root")
        with pytest.raises(NotFoundError):
            root.get_value_by_path("missing")


class TestCopy:
    """Tests for deep copies."""

    def test_copy_is_independent(self):
        """Mutating a copy leaves the original intact."""
        root = SExpression.create_list("root")
        root.append_list("a").append_token("1")
        clone = root.copy()
        assert clone == root
        clone.children[0].append_token("2")
        assert clone != root
        assert len(root.children[0].children) == 1

    def test_copy_keeps_file_path(self):
        """Provenance is copied along."""
        node = SExpression.create_token("a", Path("x.lp"))
        assert node.copy().file_path == Path("x.lp")

    def test_str_is_rendering(self):
        """str() renders the node."""
        node = SExpression.create_list("a").append_string("b")
        assert str(node) == '(a "b")'

    def test_repr(self):
        """repr() names the kind."""
        assert "list='a'" in repr(SExpression.create_list("a"))
        assert "token='x'" in repr(SExpression.create_token("x"))
