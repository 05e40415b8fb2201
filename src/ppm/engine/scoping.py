"""
Temporarily rebinding a variable while evaluating templates.

Commands that iterate (the `for` loop, sorted directory listings) bind one
variable to each element in turn and evaluate a template with it. The
variable's previous value, or its absence, is restored afterwards so nothing
leaks past the command.
"""

from collections.abc import Callable, Iterable, MutableMapping
from typing import TypeVar

T = TypeVar("T")

_UNBOUND = object()


class ShadowedVariable:
    """
    Context manager shadowing one variable of an engine's variable table.

    On enter any existing binding is saved and removed; `bind` sets the
    current value; on exit (also when an exception escapes) the saved value
    is put back, or the variable is removed if it was unbound before.

    Example:
        with ShadowedVariable(engine.vars, "i") as scope:
            for value in values:
                scope.bind(value)
                results.append(ctx.process(body, body_span))
    """

    def __init__(self, variables: MutableMapping[str, str], name: str):
        self.variables = variables
        self.name = name
        self._saved: object = _UNBOUND

    def __enter__(self) -> "ShadowedVariable":
        self._saved = self.variables.pop(self.name, _UNBOUND)
        return self

    def bind(self, value: str) -> None:
        self.variables[self.name] = value

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._saved is _UNBOUND:
            self.variables.pop(self.name, None)
        else:
            self.variables[self.name] = self._saved


def evaluate_each(
    items: Iterable[T],
    scope: ShadowedVariable,
    evaluate: Callable[[], str],
    to_value: Callable[[T], str] = str,
) -> list[str]:
    """Bind every item in order and collect the result of `evaluate`."""
    results = []
    for item in items:
        scope.bind(to_value(item))
        results.append(evaluate())
    return results


def sort_by_computed_key(
    items: Iterable[T],
    scope: ShadowedVariable,
    compute_key: Callable[[], str],
    descending: bool = False,
    to_value: Callable[[T], str] = str,
) -> list[T]:
    """
    Sort items by a key computed with the item bound in `scope`.

    The key of each item is computed exactly once. The sort is stable in both
    directions: items with equal keys keep their original order.
    """
    keyed = []
    for item in items:
        scope.bind(to_value(item))
        keyed.append((compute_key(), item))
    keyed.sort(key=lambda pair: pair[0], reverse=descending)
    return [item for _, item in keyed]
