"""
Escape-aware iteration primitives.

Everything in ppm that looks at template syntax works on `(escaped, item)`
pairs produced by `auto_escape`. Delimiter matching is done with
`take_while_level`, a single counter instead of a stack, and escapes are
put back selectively with `unescape` so that each syntactic context only
consumes the backslashes that were meant for it.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

T = TypeVar("T")

ESCAPE = "\\"

_END = object()


def auto_escape(
    items: Iterable[T], is_escape: Callable[[T], bool]
) -> Iterator[tuple[bool, T]]:
    """
    Tag every item with whether it was escaped.

    An item directly following an unescaped escape item is yielded as
    `(True, item)` and the escape item itself is dropped. An escape item at
    the very end is yielded unescaped, as itself.

    Params:
        items: Characters (or anything else) to scan
        is_escape: Predicate recognising the escape item

    Yields:
        `(was_escaped, item)` pairs
    """
    iterator = iter(items)
    for item in iterator:
        if is_escape(item):
            following = next(iterator, _END)
            if following is _END:
                yield False, item
                return
            yield True, following
        else:
            yield False, item


def take_while_level(
    items: Iterator[T],
    is_inc: Callable[[T], bool],
    is_dec: Callable[[T], bool],
    emit_final: bool = False,
) -> Iterator[T]:
    """
    Take items until the nesting level drops below zero.

    `items` should be a shared iterator: once this generator stops, the
    caller continues right after the terminating item.

    Params:
        items: Source iterator
        is_inc: Predicate for items opening a nesting level
        is_dec: Predicate for items closing a nesting level
        emit_final: Whether to yield the item that closed level zero

    Yields:
        Items up to (and depending on `emit_final` including) the terminator
    """
    level = 0
    for item in items:
        if is_inc(item):
            level += 1
        elif is_dec(item):
            if level == 0:
                if emit_final:
                    yield item
                return
            level -= 1
        yield item


def unescape(
    pairs: Iterable[tuple[bool, T]], restore: Callable[[T], Iterable[T]]
) -> Iterator[T]:
    """
    Undo `auto_escape`, restoring escapes where the context wants them.

    Params:
        pairs: `(was_escaped, item)` pairs
        restore: Returns the items to re-insert before an escaped item

    Yields:
        Plain items
    """
    for escaped, item in pairs:
        if escaped:
            yield from restore(item)
        yield item


def is_escape_char(item: str) -> bool:
    return item == ESCAPE


def unescape_all_except(*items: T, escape: T = ESCAPE) -> Callable[[T], tuple[T, ...]]:
    """Restore the escape before every escaped item except `items`."""
    excluded = frozenset(items)
    return lambda item: () if item in excluded else (escape,)


def escape_chars(text: str, chars: str) -> str:
    """Backslash-escape every occurrence of `chars` (and of the backslash itself)."""
    return "".join(ESCAPE + c if c == ESCAPE or c in chars else c for c in text)
