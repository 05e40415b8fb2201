"""
Tests for the context handed to command handlers.
"""

import pytest

from ppm import Engine
from ppm.core.issues import INVALID_ARGS, IO_ERROR, MISSING_ARGS, PARTIALLY_INVALID_ARGS
from ppm.core.span import Span
from ppm.engine.context import CommandContext
from ppm.exceptions import ContextConsumedError, SpanError


@pytest.fixture
def make_ctx(bare_engine):
    """Build a context for a body located at `body_start` in some source."""

    def factory(body, body_start=10, cmd_span=Span(2, 30)):
        return CommandContext(
            body=body,
            body_span=Span(body_start, len(body)),
            cmd_span=cmd_span,
            issues=[],
            engine=bare_engine,
        )

    return factory


class TestProcessing:
    """Tests for processing text through a context."""

    def test_process_body_replaces_body(self):
        """The processed body is returned and stored."""
        engine = Engine({}, commands=None)
        engine.add_command("x", lambda ctx: "X")
        ctx = CommandContext(
            body="a(%x%)b", body_span=Span(0, 7), cmd_span=Span(0, 7), issues=[], engine=engine
        )
        assert ctx.process_body() == "aXb"
        assert ctx.body == "aXb"

    def test_process_body_twice(self, make_ctx):
        """The body can only be processed once."""
        ctx = make_ctx("abc")
        ctx.process_body()
        with pytest.raises(ContextConsumedError):
            ctx.process_body()

    def test_body_issues_are_rebased(self, make_ctx):
        """Issues in the body are located in the outer source."""
        ctx = make_ctx("ab(%nope%)")
        ctx.process_body()
        assert [issue.span for issue in ctx.issues] == [Span(12, 8)]

    def test_subbody_issues_are_rebased(self, make_ctx):
        """Issues in a slice are shifted by the slice and the body offsets."""
        ctx = make_ctx("x:(%nope%)")
        ctx.process_subbody("(%nope%)", Span(2, 8))
        assert [issue.span for issue in ctx.issues] == [Span(12, 8)]

    def test_subbody_outside_body(self, make_ctx):
        """A slice reaching past the body is a SpanError."""
        ctx = make_ctx("abc")
        with pytest.raises(SpanError):
            ctx.process_subbody("abcd", Span(0, 4))

    def test_process_without_location(self, make_ctx):
        """Issues in unlocated text are pinned to the whole command."""
        ctx = make_ctx("")
        ctx.process("(%nope%) and more text")
        assert [issue.span for issue in ctx.issues] == [Span(2, 30)]


class TestIssueHelpers:
    """Tests for creating issues at the command's location."""

    def test_argument_issues(self, make_ctx):
        """Argument issues carry the command span and the right id."""
        ctx = make_ctx("")
        ctx.push_invalid_args("bad")
        ctx.push_missing_args("missing")
        ctx.push_issue(ctx.partial_args("partly"))
        assert [(i.id, i.msg, i.span) for i in ctx.issues] == [
            (INVALID_ARGS, "bad", Span(2, 30)),
            (MISSING_ARGS, "missing", Span(2, 30)),
            (PARTIALLY_INVALID_ARGS, "partly", Span(2, 30)),
        ]

    def test_io_error(self, make_ctx):
        """I/O errors are wrapped into issues."""
        ctx = make_ctx("")
        ctx.push_io_error(PermissionError("denied"), "while testing")
        assert ctx.issues[0].id == IO_ERROR
        assert ctx.issues[0].msg == "IO Error while testing: denied"
