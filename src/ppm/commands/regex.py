"""
Regular expression substitution command.
"""

import re

from ppm.engine.context import CommandContext
from ppm.parsing.arguments import splitn_args, unescape_part
from ppm.parsing.escape import unescape_all_except

_restore_colons = unescape_all_except(":")


class RegexSubstitution:
    """
    `(%re_sub pattern:replacement:text%)` using Python's `re` syntax.

    - arguments are separated by colons; `\\:` escapes a colon and every
      other backslash is left unchanged (so `\\d` and `\\1` work as usual)
    - the text is processed before the substitution, the result after it

    Params:
        flags: `re` flags every pattern is compiled with
    """

    def __init__(self, flags: int | re.RegexFlag = 0):
        self.flags = flags

    def __call__(self, ctx: CommandContext) -> str:
        parts = splitn_args(3, ctx.body, ":", restore=_restore_colons)
        pattern = parts[0][0]
        if not pattern:
            ctx.push_missing_args("empty regular expressions are not supported")
            return ""
        if len(parts) < 2:
            ctx.push_invalid_args("no substitution pattern given")
            return ""
        if len(parts) < 3:
            ctx.push_invalid_args("no string to substitute to")
            return ""
        replacement = parts[1][0]
        raw_text, text_span = parts[2]

        try:
            regex = re.compile(pattern, self.flags)
        except re.error as e:
            ctx.push_invalid_args(f"error compiling regex: {e}")
            return ""

        text = ctx.process_subbody(unescape_part(raw_text, _restore_colons), text_span)
        try:
            substituted = regex.sub(replacement, text)
        except re.error as e:
            ctx.push_invalid_args(f"invalid substitution pattern: {e}")
            return ""
        return ctx.process(substituted)

    def __repr__(self) -> str:
        return f"RegexSubstitution(flags={self.flags!r})"
