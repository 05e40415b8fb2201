"""
Source regions and locations.

A `Span` always refers to one specific string instance. Whenever text is cut
out of a template and processed on its own (a command body, a list item, a
loop body), spans produced for the cut-out text have to be re-based onto the
parent before they are reported.
"""

from attrs import evolve, frozen

from ppm.exceptions import SpanError


@frozen
class RowCol:
    """Zero-based row and column of a position in a string.

    Displayed one-based as `row:col`.
    """

    row: int
    col: int

    @classmethod
    def from_index(cls, index: int, source: str) -> "RowCol":
        """
        Locate a string index.

        The cursor sits right before the character at `index`, so only the text
        strictly before it is considered. Linear in `index`; only used when
        formatting diagnostics.

        Params:
            index: Position in `source` (may equal `len(source)`)
            source: The string the index points into

        Returns:
            The row/column of the position
        """
        row = source.count("\n", 0, index)
        col = index - (source.rfind("\n", 0, index) + 1)
        return cls(row=row, col=col)

    def __str__(self) -> str:
        return f"{self.row + 1}:{self.col + 1}"


@frozen
class Span:
    """A region of `length` characters starting at `start`."""

    start: int
    length: int

    @property
    def end(self) -> int:
        """Position right after the last character of the span."""
        return self.start + self.length

    def start_end_loc(self, source: str) -> tuple[RowCol, RowCol]:
        return RowCol.from_index(self.start, source), RowCol.from_index(self.end, source)

    def relative_to(self, parent: "Span") -> "Span":
        """
        Reinterpret a span computed over a substring as a span in the parent.

        `self` is measured from the start of the substring that `parent`
        covers; the result is measured in the same string as `parent`.

        Params:
            parent: Location of the substring in its parent string

        Returns:
            The absolute span

        Raises:
            SpanError: If the result would extend past `parent`
        """
        absolute = Span(parent.start + self.start, self.length)
        if absolute.end > parent.end:
            raise SpanError(self, parent)
        return absolute

    def __str__(self) -> str:
        return f"[{self.start}..{self.end})"


@frozen
class SourceOrigin:
    """
    Where a processed string sits inside the outermost processed source.

    Command bodies, loop bodies and alternatives are processed on their own,
    but messages should name locations in the text the user wrote. Text
    without a location (a file's contents, a computed string) is anchored:
    every location inside it is reported as the start of the invocation
    that produced it.

    Params:
        root: The source given to the outermost `Engine.process` call
        offset: Start of the processed string inside `root`
        anchor: Fixed position in `root` for text without a location
    """

    root: str
    offset: int = 0
    anchor: int | None = None

    def locate(self, index: int) -> RowCol:
        """Row and column in `root` of an index into the processed string."""
        position = self.anchor if self.anchor is not None else self.offset + index
        return RowCol.from_index(position, self.root)

    def nested(self, span: Span) -> "SourceOrigin":
        """Origin of the substring at `span` of the processed string."""
        return evolve(self, offset=self.offset + span.start)

    def anchored(self, span: Span) -> "SourceOrigin":
        """Origin of text without a location, produced by the invocation at `span`."""
        if self.anchor is not None:
            return self
        return evolve(self, anchor=self.offset + span.start)
