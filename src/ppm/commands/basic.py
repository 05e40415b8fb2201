"""
Basic predefined commands: variables, literals, evaluation and fallbacks.
"""

from ppm.engine.context import CommandContext
from ppm.parsing.arguments import split_args, splitn_args
from ppm.parsing.escape import unescape_all_except


def literal_handler(ctx: CommandContext) -> str:
    """Output the body literally, preventing it from being processed."""
    return ctx.body


def eval_handler(ctx: CommandContext) -> str:
    """Process the body."""
    return ctx.process_body()


def get_var_handler(ctx: CommandContext) -> str:
    """
    Substitute a variable stored in `engine.vars`.

    - argument: the variable name, processed before the lookup
    - the value is inserted as is, without processing it again
    """
    raw_name = ctx.body
    name = ctx.process_body()
    value = ctx.engine.vars.get(name)
    if value is None:
        ctx.push_invalid_args(f"unknown variable: {raw_name}")
        return ""
    return value


def set_var_handler(ctx: CommandContext) -> str:
    """
    Set a variable: `(%let name=value%)`.

    - the name ends at the first unescaped `=` outside nested commands
    - both name and value are processed before the assignment
    - outputs nothing
    """
    parts = splitn_args(2, ctx.body, "=", restore=unescape_all_except("="))
    (raw_name, name_span) = parts[0]
    name = ctx.process_subbody(raw_name, name_span)
    if len(parts) > 1:
        raw_value, value_span = parts[1]
        value = ctx.process_subbody(raw_value, value_span)
    else:
        value = ""
    if not name:
        ctx.push_missing_args("no variable name given")
        return ""
    ctx.engine.vars[name] = value
    return ""


def fallback_handler(ctx: CommandContext) -> str:
    """
    Output the first of the colon separated arguments that is not empty.

    - `\\:` escapes a colon, every other backslash is left unchanged
    - arguments are processed one after another until one is not empty
    - if all of them are empty the output is empty, which is not an issue
    """
    for value, span in split_args(ctx.body, ":", restore=unescape_all_except(":")):
        result = ctx.process_subbody(value, span)
        if result:
            return result
    return ""
