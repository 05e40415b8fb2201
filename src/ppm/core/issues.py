"""
Issues: the non-fatal diagnostics collected while processing a template.

ppm always produces an end result, even if it is empty or partial. Every
problem encountered on the way, error or warning alike, becomes an `Issue`
appended to the list passed to `Engine.process`.
"""

from attrs import evolve, frozen

from ppm.core.span import RowCol, Span
from ppm.exceptions import InternalConsistencyError

# Structural
UNMATCHED_CLOSING_DELIM = "command:unmatched_closing_delim"
NO_END = "command:no_end"
UNKNOWN_COMMAND = "command:unknown"

# Arguments
MISSING_ARGS = "command:missing_args"
INVALID_ARGS = "command:invalid_args"
PARTIALLY_INVALID_ARGS = "command:invalid_args:partial"

IO_ERROR = "io_error"
HANDLER_ERROR = "command:handler_error"


@frozen
class IssueDisplay:
    """An issue resolved against its source, ready for printing."""

    id: str
    msg: str
    start: RowCol
    end: RowCol

    def __str__(self) -> str:
        return f"[{self.id} at {self.start}...{self.end}] {self.msg}"


@frozen
class Issue:
    """
    A problem encountered while processing.

    Params:
        id: Non-unique identifier such as `command:missing_args`
        msg: Human readable description
        span: Region of the processed source the issue refers to
    """

    id: str
    msg: str
    span: Span

    @classmethod
    def io_error(cls, error: OSError, span: Span, extra: str | None = None) -> "Issue":
        """Create an issue from an I/O error, optionally saying what was attempted."""
        extra = f" {extra}" if extra else ""
        return cls(id=IO_ERROR, msg=f"IO Error{extra}: {error}", span=span)

    def shifted(self, offset: int) -> "Issue":
        return evolve(self, span=Span(self.span.start + offset, self.span.length))

    def display(self, source: str) -> IssueDisplay:
        """Resolve the span to rows and columns of `source`."""
        start, end = self.span.start_end_loc(source)
        return IssueDisplay(id=self.id, msg=self.msg, start=start, end=end)


def absorb_new_issues(issues: list[Issue], subspan: Span, new_issues: list[Issue]) -> None:
    """
    Move issues found in a substring into the parent's issue list.

    `new_issues` were produced while processing text that sits at `subspan`
    inside the parent. Their spans are shifted by `subspan.start`; this is
    how diagnostics stay accurate through any depth of reprocessing.

    Params:
        issues: The parent's issue list (extended in place)
        subspan: Location of the substring inside the parent
        new_issues: Issues with spans relative to the substring

    Raises:
        InternalConsistencyError: If a shifted span leaves `subspan`
    """
    for issue in new_issues:
        issue = issue.shifted(subspan.start)
        if issue.span.end > subspan.end:
            raise InternalConsistencyError(
                f"issue {issue.id!r} at {issue.span} escapes its subspan {subspan}"
            )
        issues.append(issue)


def anchor_issues(issues: list[Issue], span: Span, new_issues: list[Issue]) -> None:
    """Append issues from text without a source location, pinned to `span`."""
    issues.extend(evolve(issue, span=span) for issue in new_issues)
