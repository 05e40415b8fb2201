"""
The object a command handler receives for one invocation.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ppm.core.issues import (
    INVALID_ARGS,
    MISSING_ARGS,
    PARTIALLY_INVALID_ARGS,
    Issue,
    absorb_new_issues,
    anchor_issues,
)
from ppm.core.span import SourceOrigin, Span
from ppm.exceptions import ContextConsumedError

if TYPE_CHECKING:
    from ppm.engine.engine import Engine


@dataclass
class CommandContext:
    """
    Everything a handler may use while it runs.

    The engine handle is re-entrant: handlers call back into it (through
    `process` and friends) as often as they like, but must not keep
    `engine` or `issues` after returning.

    Params:
        body: Raw text after the command name (may be replaced by the handler)
        body_span: Location of the body in the processed source
        cmd_span: Location of the whole invocation, delimiters included
        issues: The issue list of the current `Engine.process` call
        engine: The engine running this command
        origin: Where the text containing the invocation sits in the outermost
            source, for locations named in messages
    """

    body: str
    body_span: Span
    cmd_span: Span
    issues: list[Issue]
    engine: "Engine"
    origin: SourceOrigin | None = None
    _body_processed: bool = field(default=False, repr=False)

    def process(self, text: str, span: Span | None = None) -> str:
        """
        Expand `text` recursively.

        Params:
            text: Template text to expand
            span: Location of `text` in the processed source. Without it the
                text has no location (a file's contents, a computed string) and
                its issues are pinned to the whole invocation.

        Returns:
            The expanded text
        """
        new_issues: list[Issue] = []
        origin = None
        if self.origin is not None and span is None:
            origin = self.origin.anchored(self.cmd_span)
        elif self.origin is not None:
            origin = self.origin.nested(span)
        result = self.engine.process(text, new_issues, origin)
        if span is None:
            anchor_issues(self.issues, self.cmd_span, new_issues)
        else:
            absorb_new_issues(self.issues, span, new_issues)
        return result

    def process_body(self) -> str:
        """
        Expand the body in place and return it.

        Raises:
            ContextConsumedError: If the body was already processed
        """
        if self._body_processed:
            raise ContextConsumedError(self.cmd_span)
        self._body_processed = True
        self.body = self.process(self.body, self.body_span)
        return self.body

    def process_subbody(self, text: str, relative_span: Span) -> str:
        """
        Expand a slice of the body.

        Params:
            text: The slice, possibly already unescaped
            relative_span: Where the raw slice sits inside the body
        """
        return self.process(text, relative_span.relative_to(self.body_span))

    def push_issue(self, issue: Issue) -> None:
        self.issues.append(issue)

    def invalid_args(self, msg: str) -> Issue:
        return Issue(id=INVALID_ARGS, msg=msg, span=self.cmd_span)

    def missing_args(self, msg: str) -> Issue:
        return Issue(id=MISSING_ARGS, msg=msg, span=self.cmd_span)

    def partial_args(self, msg: str) -> Issue:
        """An argument problem that does not stop the command from producing output."""
        return Issue(id=PARTIALLY_INVALID_ARGS, msg=msg, span=self.cmd_span)

    def push_invalid_args(self, msg: str) -> None:
        self.issues.append(self.invalid_args(msg))

    def push_missing_args(self, msg: str) -> None:
        self.issues.append(self.missing_args(msg))

    def push_io_error(self, error: OSError, extra: str | None = None) -> None:
        self.issues.append(Issue.io_error(error, self.cmd_span, extra))
