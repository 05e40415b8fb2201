"""
Parser turning template text into literal and command atoms.

Commands are written as `(%name body%)`. Invocations nest, and a backslash
in front of the first character of a delimiter (`\\(%`, `\\%)`) makes it
ordinary text. The parser never fails: structural problems are recorded as
issues and parsing continues with a best-effort interpretation.
"""

from dataclasses import dataclass

from ppm.core.issues import NO_END, UNMATCHED_CLOSING_DELIM, Issue
from ppm.core.span import Span
from ppm.parsing.escape import ESCAPE, auto_escape, unescape

OPEN = "(%"
CLOSE = "%)"

# Characters that may never appear (unescaped) in a command name
DELIMITER_ALPHABET = "%(){}"


@dataclass(frozen=True)
class LiteralAtom:
    """Text outside of any command, still carrying its escapes."""

    text: str
    span: Span


@dataclass(frozen=True)
class CommandAtom:
    """
    The raw text between a command's delimiters.

    Params:
        text: Head, separator and body, delimiters excluded
        span: Location of `text` in the parsed source
        terminated: False when the source ended before the closing delimiter
    """

    text: str
    span: Span
    terminated: bool = True

    @property
    def cmd_span(self) -> Span:
        """Span of the whole invocation, delimiters included."""
        closing = len(CLOSE) if self.terminated else 0
        return Span(self.span.start - len(OPEN), self.span.length + len(OPEN) + closing)


SourceAtom = LiteralAtom | CommandAtom


@dataclass(frozen=True)
class CommandParts:
    """A command atom split into its name and body."""

    name: str
    raw_head: str
    body: str
    body_offset: int


def _is_escape(item: tuple[int, str]) -> bool:
    return item[1] == ESCAPE


def _starts_delimiter(text: str, index: int) -> bool:
    return text.startswith(OPEN, index) or text.startswith(CLOSE, index)


def parse_source(source: str, issues: list[Issue]) -> list[SourceAtom]:
    """
    Split a template into literal and command atoms.

    Params:
        source: Template text
        issues: Receives `command:unmatched_closing_delim` and
            `command:no_end` issues

    Returns:
        Atoms in source order
    """
    atoms: list[SourceAtom] = []
    pairs = list(auto_escape(enumerate(source), _is_escape))

    literal_start = 0
    command_start = 0
    level = 0
    k = 0
    while k < len(pairs):
        escaped, (index, _char) = pairs[k]
        if escaped:
            k += 1
        elif source.startswith(OPEN, index):
            if level == 0:
                _push_literal(atoms, source, literal_start, index)
                command_start = index + len(OPEN)
            level += 1
            # both delimiter characters are plain items, so skip two pairs
            k += 2
        elif source.startswith(CLOSE, index):
            if level == 0:
                issues.append(
                    Issue(
                        id=UNMATCHED_CLOSING_DELIM,
                        msg=f"unmatched closing delimiter `{CLOSE}` ignored",
                        span=Span(index, len(CLOSE)),
                    )
                )
                _push_literal(atoms, source, literal_start, index)
                literal_start = index + len(CLOSE)
            else:
                level -= 1
                if level == 0:
                    atoms.append(
                        CommandAtom(
                            text=source[command_start:index],
                            span=Span(command_start, index - command_start),
                        )
                    )
                    literal_start = index + len(CLOSE)
            k += 2
        else:
            k += 1

    if level > 0:
        opening = command_start - len(OPEN)
        issues.append(
            Issue(
                id=NO_END,
                msg=f"command is never closed (missing `{CLOSE}`)",
                span=Span(opening, len(source) - opening),
            )
        )
        atoms.append(
            CommandAtom(
                text=source[command_start:],
                span=Span(command_start, len(source) - command_start),
                terminated=False,
            )
        )
    else:
        _push_literal(atoms, source, literal_start, len(source))
    return atoms


def _push_literal(atoms: list[SourceAtom], source: str, start: int, end: int) -> None:
    if end > start:
        atoms.append(LiteralAtom(text=source[start:end], span=Span(start, end - start)))


def unescape_literal(text: str) -> str:
    """
    Remove the backslashes that escape a delimiter in literal text.

    Only a backslash directly in front of `(%` or `%)` is removed; every other
    backslash is part of the text.
    """
    result = []
    for escaped, (index, char) in auto_escape(enumerate(text), _is_escape):
        if escaped and not _starts_delimiter(text, index):
            result.append(ESCAPE)
        result.append(char)
    return "".join(result)


def _restore_in_name(char: str) -> tuple[str, ...]:
    if char in DELIMITER_ALPHABET or char.isspace():
        return ()
    return (ESCAPE,)


def unescape_name(raw_head: str) -> str:
    """Unescape a command name: `\\%`, `\\(` etc. and escaped whitespace lose their backslash."""
    return "".join(unescape(auto_escape(raw_head, lambda c: c == ESCAPE), _restore_in_name))


def split_command(text: str) -> CommandParts:
    """
    Split the raw text of a command atom at its first unescaped whitespace.

    Without whitespace the whole text is the head and the body is empty.
    """
    for escaped, (index, char) in auto_escape(enumerate(text), _is_escape):
        if not escaped and char.isspace():
            head = text[:index]
            return CommandParts(
                name=unescape_name(head),
                raw_head=head,
                body=text[index + 1 :],
                body_offset=index + 1,
            )
    return CommandParts(name=unescape_name(text), raw_head=text, body="", body_offset=len(text))
