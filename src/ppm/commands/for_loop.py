"""
The `for` loop command.

    (%for i from 1 to 3;<(%i%)>%)              -> <1><2><3>
    (%for x in a:b:c;(%x%)%)                   -> abc
    (%for x in.sorted((%x%):desc) b:c:a;(%x%)%) -> cba

The loop variable shadows any variable of the same name while the loop runs
and is restored afterwards.
"""

import re
from dataclasses import dataclass

from ppm.core.issues import Issue
from ppm.core.span import Span
from ppm.engine.context import CommandContext
from ppm.engine.scoping import ShadowedVariable, evaluate_each, sort_by_computed_key
from ppm.parsing.arguments import find_separator, split_not_escaped, split_tokens, splitn_args
from ppm.parsing.escape import auto_escape, take_while_level

SORTED_KIND = "in.sorted("

ASCENDING_KEYWORDS = frozenset({"asc", "ascending", "inc", "increasing", "+"})
DESCENDING_KEYWORDS = frozenset({"desc", "descending", "dec", "decreasing", "-"})

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1

_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_sort_order(word: str) -> bool | None:
    """True for a descending keyword, False for an ascending one, None otherwise."""
    if word in DESCENDING_KEYWORDS:
        return True
    if word in ASCENDING_KEYWORDS:
        return False
    return None


def parse_i128(text: str) -> int | None:
    """Parse a base-10 integer in the signed 128-bit range."""
    if not _DECIMAL_PATTERN.fullmatch(text):
        return None
    value = int(text)
    return value if I128_MIN <= value <= I128_MAX else None


@dataclass(frozen=True)
class RangeMode:
    """`from start to stop`, both ends included."""

    start: int
    stop: int


@dataclass(frozen=True)
class ListMode:
    """`in a:b:c`, optionally sorted by a key expression."""

    items: list[str]
    sort_key: str | None = None
    sort_key_span: Span | None = None
    descending: bool = False


@dataclass(frozen=True)
class ForConfig:
    """
    A parsed loop header.

    Params:
        variable: Name of the loop variable
        mode: What to iterate over
        body: Raw loop body
        body_span: Location of the loop body inside the command body
    """

    variable: str
    mode: RangeMode | ListMode
    body: str
    body_span: Span


class LoopConfigError(Exception):
    """Carries the issue that stops a loop header from being used."""

    def __init__(self, issue: Issue):
        self.issue = issue
        super().__init__(issue.msg)


def _parse_bound(
    ctx: CommandContext, tokens: list[tuple[str, Span]], index: int, which: str
) -> int:
    if index >= len(tokens):
        raise LoopConfigError(ctx.invalid_args(f"no {which} integer given"))
    raw, span = tokens[index]
    text = ctx.process_subbody(raw, span)
    value = parse_i128(text)
    if value is None:
        raise LoopConfigError(ctx.invalid_args(f"invalid {which} integer: {text}"))
    return value


def _parse_list(ctx: CommandContext, header: str, start: int) -> list[str]:
    """Process the list starting at `start` in the header and split it."""
    rest = header[start:]
    offset = start + len(rest) - len(rest.lstrip())
    raw = header[offset:]
    text = ctx.process_subbody(raw, Span(offset, len(raw)))
    return split_not_escaped(text, ":") if text else []


def _is_paren(char: str):
    return lambda pair: not pair[0] and pair[1][1] == char


def _parse_sorted(ctx: CommandContext, header: str, kind_span: Span) -> ListMode:
    spec_start = kind_span.start + len(SORTED_KIND)
    remainder = header[spec_start:]
    pairs = iter(auto_escape(enumerate(remainder), lambda item: item[1] == "\\"))
    inner = list(take_while_level(pairs, _is_paren("("), _is_paren(")")))
    spec_end = inner[-1][1][0] + 1 if inner else 0
    if spec_end >= len(remainder):
        raise LoopConfigError(ctx.invalid_args(f"unclosed sort specification: {SORTED_KIND}"))

    spec = remainder[:spec_end]
    parts = splitn_args(2, spec, ":")
    key, key_span = parts[0]
    descending = False
    if len(parts) > 1:
        raw_order, order_span = parts[1]
        order = ctx.process_subbody(
            raw_order.strip(), Span(spec_start + order_span.start, order_span.length)
        )
        parsed = parse_sort_order(order.strip())
        if parsed is None:
            raise LoopConfigError(ctx.invalid_args(f"unknown sorting order: {order}"))
        descending = parsed

    items = _parse_list(ctx, header, spec_start + spec_end + 1)
    return ListMode(
        items=items,
        sort_key=key,
        sort_key_span=Span(spec_start + key_span.start, key_span.length),
        descending=descending,
    )


def parse_for_config(ctx: CommandContext) -> ForConfig:
    """
    Parse `VAR MODE;BODY` from the command body.

    Bounds, lists and sort orders are processed here, before the loop
    variable is shadowed.

    Raises:
        LoopConfigError: If the header is missing parts or malformed
    """
    separator = find_separator(ctx.body, ";")
    if separator is None:
        header, body, body_start = ctx.body, "", len(ctx.body)
    else:
        header, body, body_start = ctx.body[:separator], ctx.body[separator + 1 :], separator + 1
    body_span = Span(body_start, len(body))

    tokens = split_tokens(header)
    if not tokens:
        raise LoopConfigError(ctx.invalid_args("no loop variable given"))
    variable = tokens[0][0]
    if len(tokens) < 2:
        raise LoopConfigError(ctx.missing_args("no repeat kind given"))
    kind, kind_span = tokens[1]

    if kind == "from":
        start = _parse_bound(ctx, tokens, 2, "starting")
        if len(tokens) < 4:
            raise LoopConfigError(ctx.invalid_args("no range end given"))
        if tokens[3][0] != "to":
            raise LoopConfigError(ctx.invalid_args(f"invalid range end: {tokens[3][0]}"))
        stop = _parse_bound(ctx, tokens, 4, "ending")
        if len(tokens) > 5:
            ctx.push_issue(ctx.partial_args("warning: ignoring arguments after the range end"))
        mode: RangeMode | ListMode = RangeMode(start, stop)
    elif kind == "in":
        mode = ListMode(items=_parse_list(ctx, header, kind_span.end))
    elif kind.startswith(SORTED_KIND):
        mode = _parse_sorted(ctx, header, kind_span)
    else:
        raise LoopConfigError(ctx.invalid_args(f"unknown repeat kind: {kind}"))

    return ForConfig(variable=variable, mode=mode, body=body, body_span=body_span)


def for_handler(ctx: CommandContext) -> str:
    """
    Repeat the loop body, updating the loop variable each time.

    - `(%for VAR from A to B;BODY%)`: integers A..B inclusive, nothing if A > B;
      A and B are processed before parsing
    - `(%for VAR in LIST;BODY%)`: LIST is processed, then split at unescaped colons
    - `(%for VAR in.sorted(KEY:ORDER) LIST;BODY%)`: like `in` but sorted by KEY,
      processed with VAR bound to each element; ORDER is `+`/`asc`/... or
      `-`/`desc`/... and defaults to ascending
    - BODY is processed once per element with VAR bound to it; the previous
      value of VAR (or its absence) is restored afterwards
    """
    try:
        config = parse_for_config(ctx)
    except LoopConfigError as e:
        ctx.push_issue(e.issue)
        return ""

    def run_body() -> str:
        return ctx.process_subbody(config.body, config.body_span)

    mode = config.mode
    with ShadowedVariable(ctx.engine.vars, config.variable) as scope:
        if isinstance(mode, RangeMode):
            results = evaluate_each(range(mode.start, mode.stop + 1), scope, run_body)
        else:
            items = mode.items
            if mode.sort_key is not None:
                key, key_span = mode.sort_key, mode.sort_key_span

                def compute_key() -> str:
                    return ctx.process_subbody(key, key_span)

                items = sort_by_computed_key(items, scope, compute_key, mode.descending)
            results = evaluate_each(items, scope, run_body)
    return "".join(results)
