"""
Splitting command bodies into arguments.

Most predefined commands take colon separated arguments. Separators inside
nested invocations (`a:(%cmd b:c%):d` has three parts) and escaped
separators (`\\:`) do not split. The `*_args` helpers also report the span of
every part relative to the split text so that issues found while processing
a part can be re-based onto the original template.
"""

from collections.abc import Callable, Iterator

from ppm.core.span import Span
from ppm.parsing.escape import (
    ESCAPE,
    auto_escape,
    is_escape_char,
    unescape,
    unescape_all_except,
)
from ppm.parsing.parser import CLOSE, OPEN

Restore = Callable[[str], tuple[str, ...]]


def _top_level(text: str) -> Iterator[tuple[bool, int, str]]:
    """
    Yield `(escaped, index, char)` for characters outside nested invocations.

    A nested invocation shows up once, as its opening delimiter.
    """
    pairs = list(auto_escape(enumerate(text), lambda item: item[1] == ESCAPE))
    level = 0
    k = 0
    while k < len(pairs):
        escaped, (index, char) = pairs[k]
        if not escaped and text.startswith(OPEN, index):
            if level == 0:
                yield False, index, OPEN
            level += 1
            k += 2
        elif not escaped and level and text.startswith(CLOSE, index):
            level -= 1
            k += 2
        else:
            if level == 0:
                yield escaped, index, char
            k += 1


def find_separators(text: str, sep: str) -> list[int]:
    """Indices of unescaped `sep` characters outside nested invocations."""
    return [index for escaped, index, char in _top_level(text) if not escaped and char == sep]


def find_separator(text: str, sep: str) -> int | None:
    """Index of the first top-level unescaped `sep`, or None."""
    separators = find_separators(text, sep)
    return separators[0] if separators else None


def unescape_part(raw: str, restore: Restore) -> str:
    return "".join(unescape(auto_escape(raw, is_escape_char), restore))


def _split_at(text: str, separators: list[int], restore: Restore) -> list[tuple[str, Span]]:
    bounds = [-1, *separators, len(text)]
    parts = []
    for previous, current in zip(bounds, bounds[1:]):
        start = previous + 1
        parts.append((unescape_part(text[start:current], restore), Span(start, current - start)))
    return parts


def split_args(
    text: str, sep: str = ":", restore: Restore | None = None
) -> list[tuple[str, Span]]:
    """
    Split at every top-level unescaped `sep`.

    By default `\\:` becomes `:` and `\\\\` becomes `\\`; other escapes are kept
    so that later processing still sees them.

    Examples:
        `"a:(%b c:d%):e"` gives `a`, `(%b c:d%)` and `e`
        `"a:\\:b:c"` gives `a`, `:b` and `c`

    Params:
        text: Text to split
        sep: Separator character
        restore: Escape restoring rule applied to every part

    Returns:
        `(part, span)` pairs; spans cover the raw parts within `text`
    """
    restore = restore or unescape_all_except(sep, ESCAPE)
    return _split_at(text, find_separators(text, sep), restore)


def splitn_args(
    n: int, text: str, sep: str = ":", restore: Restore | None = None
) -> list[tuple[str, Span]]:
    """
    Like `split_args` but produce at most `n` parts.

    When there are `n` parts, the last one is the raw remainder, separators
    and escapes included. With fewer parts all of them are unescaped.
    """
    if n <= 0:
        return []
    restore = restore or unescape_all_except(sep, ESCAPE)
    separators = find_separators(text, sep)[: n - 1]
    if len(separators) < n - 1:
        return _split_at(text, separators, restore)
    if not separators:
        return [(text, Span(0, len(text)))]
    parts = _split_at(text[: separators[-1]], separators[:-1], restore)
    tail_start = separators[-1] + 1
    parts.append((text[tail_start:], Span(tail_start, len(text) - tail_start)))
    return parts


def split_not_escaped(text: str, sep: str, maxsplit: int | None = None) -> list[str]:
    """
    Split at unescaped `sep` without looking at nesting.

    `\\<sep>` and `\\\\` lose their backslash, other escapes are kept.
    """
    parts: list[list[tuple[bool, str]]] = [[]]
    for escaped, char in auto_escape(text, is_escape_char):
        if not escaped and char == sep and (maxsplit is None or len(parts) <= maxsplit):
            parts.append([])
        else:
            parts[-1].append((escaped, char))
    restore = unescape_all_except(sep, ESCAPE)
    return ["".join(unescape(part, restore)) for part in parts]


def split_tokens(text: str) -> list[tuple[str, Span]]:
    """Split at top-level unescaped whitespace, dropping empty tokens. Tokens stay raw."""
    tokens = []
    start = None
    for escaped, index, char in _top_level(text):
        if not escaped and char.isspace():
            if start is not None:
                tokens.append((text[start:index], Span(start, index - start)))
                start = None
        elif start is None:
            # an escaped character starts at its backslash
            start = index - 1 if escaped else index
    if start is not None:
        tokens.append((text[start:], Span(start, len(text) - start)))
    return tokens


def split_words(text: str) -> list[str]:
    """
    Shell-like word splitting for process arguments.

    Whitespace separates words, double quotes group them and a backslash
    escapes the next character. Nested invocations are kept whole and raw so
    they can be processed afterwards.
    """
    pairs = list(auto_escape(enumerate(text), lambda item: item[1] == ESCAPE))
    words: list[str] = []
    current: list[str] = []
    in_word = False
    in_quotes = False
    level = 0
    k = 0
    while k < len(pairs):
        escaped, (index, char) = pairs[k]
        k += 1
        if not escaped and text.startswith(OPEN, index):
            level += 1
            current.append(OPEN)
            in_word = True
            k += 1
        elif not escaped and level and text.startswith(CLOSE, index):
            level -= 1
            current.append(CLOSE)
            k += 1
        elif level:
            current.append(ESCAPE + char if escaped else char)
        elif escaped:
            # keep escapes meant for the engine
            keep = text.startswith(OPEN, index) or text.startswith(CLOSE, index)
            if in_quotes and char not in ('"', ESCAPE):
                keep = True
            current.append(ESCAPE + char if keep else char)
            in_word = True
        elif char == '"':
            in_quotes = not in_quotes
            in_word = True
        elif char.isspace() and not in_quotes:
            if in_word:
                words.append("".join(current))
                current = []
                in_word = False
        else:
            current.append(char)
            in_word = True
    if in_word:
        words.append("".join(current))
    return words


def matches_pattern(name: str, pattern: str) -> bool:
    """
    Match a file name against a pattern with at most one `*`.

    The pattern is anchored at both ends; `*` matches any (possibly empty)
    run of characters. Characters after a second `*` are matched literally.
    """
    if "*" not in pattern:
        return name == pattern
    prefix, _, suffix = pattern.partition("*")
    return (
        len(name) >= len(prefix) + len(suffix)
        and name.startswith(prefix)
        and name.endswith(suffix)
    )
