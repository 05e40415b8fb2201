"""
Tests for splitting templates into literal and command atoms.
"""

from ppm.core.issues import NO_END, UNMATCHED_CLOSING_DELIM
from ppm.core.span import Span
from ppm.parsing.parser import (
    CommandAtom,
    LiteralAtom,
    parse_source,
    split_command,
    unescape_literal,
    unescape_name,
)


class TestParseSource:
    """Tests for parse_source."""

    def test_plain_text(self):
        """Text without delimiters is a single literal."""
        issues = []
        assert parse_source("hello", issues) == [LiteralAtom("hello", Span(0, 5))]
        assert issues == []

    def test_empty_source(self):
        """An empty template has no atoms."""
        assert parse_source("", []) == []

    def test_literals_and_command(self):
        """Command atoms exclude their delimiters."""
        atoms = parse_source("abc(%x%)def", [])
        assert atoms == [
            LiteralAtom("abc", Span(0, 3)),
            CommandAtom("x", Span(5, 1)),
            LiteralAtom("def", Span(8, 3)),
        ]

    def test_cmd_span_includes_delimiters(self):
        """cmd_span covers the whole invocation."""
        (atom,) = parse_source("(%x y%)", [])
        assert atom.cmd_span == Span(0, 7)

    def test_nested_commands_stay_in_outer_atom(self):
        """Only the outermost invocation becomes an atom."""
        atoms = parse_source("(%a (%b%)%)", [])
        assert atoms == [CommandAtom("a (%b%)", Span(2, 7))]

    def test_adjacent_commands(self):
        """Commands right after each other are separate atoms."""
        atoms = parse_source("(%a%)(%b%)", [])
        assert atoms == [CommandAtom("a", Span(2, 1)), CommandAtom("b", Span(7, 1))]

    def test_escaped_delimiters_are_literal(self):
        """Escaped delimiters do not open or close commands."""
        issues = []
        atoms = parse_source("\\(%b\\%)", issues)
        assert atoms == [LiteralAtom("\\(%b\\%)", Span(0, 7))]
        assert issues == []

    def test_unmatched_closing_delimiter(self):
        """A stray `%)` is reported and dropped from the output."""
        issues = []
        atoms = parse_source("ab%)cd", issues)
        assert atoms == [LiteralAtom("ab", Span(0, 2)), LiteralAtom("cd", Span(4, 2))]
        assert [(i.id, i.span) for i in issues] == [(UNMATCHED_CLOSING_DELIM, Span(2, 2))]

    def test_missing_end(self):
        """An unclosed command is reported and kept as an unterminated atom."""
        issues = []
        atoms = parse_source("ab(%x", issues)
        assert atoms == [
            LiteralAtom("ab", Span(0, 2)),
            CommandAtom("x", Span(4, 1), terminated=False),
        ]
        assert [(i.id, i.span) for i in issues] == [(NO_END, Span(2, 3))]
        assert atoms[1].cmd_span == Span(2, 3)

    def test_missing_end_with_nesting(self):
        """An unclosed outer command swallows the rest of the source."""
        issues = []
        atoms = parse_source("(%a (%b%) c", issues)
        assert atoms == [CommandAtom("a (%b%) c", Span(2, 9), terminated=False)]
        assert issues[0].id == NO_END


class TestUnescapeLiteral:
    """Tests for removing delimiter escapes from literal text."""

    def test_removes_delimiter_escapes(self):
        """Backslashes before delimiters are removed."""
        assert unescape_literal("\\(%b\\%)") == "(%b%)"

    def test_keeps_other_backslashes(self):
        """Other backslashes belong to the text."""
        assert unescape_literal("a\\nb\\\\c") == "a\\nb\\\\c"


class TestSplitCommand:
    """Tests for splitting an atom into name and body."""

    def test_name_and_body(self):
        """The name ends at the first whitespace."""
        parts = split_command("name body text")
        assert (parts.name, parts.body, parts.body_offset) == ("name", "body text", 5)

    def test_no_body(self):
        """Without whitespace the body is empty."""
        parts = split_command("name")
        assert (parts.name, parts.body, parts.body_offset) == ("name", "", 4)

    def test_newline_separates(self):
        """Any whitespace ends the name."""
        assert split_command("for\ni").name == "for"

    def test_escaped_whitespace_in_name(self):
        """Escaped whitespace is part of the name."""
        parts = split_command("na\\ me x")
        assert (parts.name, parts.raw_head, parts.body) == ("na me", "na\\ me", "x")

    def test_unescape_name_keeps_other_escapes(self):
        """Only delimiter characters and whitespace lose their backslash."""
        assert unescape_name("a\\%b\\x") == "a%b\\x"
