"""
Predefined ppm commands.

`default_commands` builds a fresh name -> handler mapping every time it is
called; `Engine.with_predefined_commands` installs it into a new engine.
"""

from ppm.commands.basic import (
    eval_handler,
    fallback_handler,
    get_var_handler,
    literal_handler,
    set_var_handler,
)
from ppm.commands.for_loop import for_handler
from ppm.commands.lsdir import lsdir_handler
from ppm.commands.regex import RegexSubstitution
from ppm.commands.tools import include_handler, include_literal_handler, run_process_handler
from ppm.engine.registry import BARE_VARIABLE_COMMAND, CommandHandler


def default_commands() -> dict[str, CommandHandler]:
    """
    Create a dict with all the predefined commands.

    Their assigned names are:
    - empty for `get_var_handler`, enabling its use as `(%variable%)`: the
      engine reads `(%cmd%)` as the command `cmd` if it exists and as the
      empty command with argument `cmd` otherwise
    - `var` for `get_var_handler`
    - `let` for `set_var_handler`
    - `lit` for `literal_handler`
    - `eval` for `eval_handler`
    - `alt` for `fallback_handler`
    - `run` for `run_process_handler`
    - `include` for `include_handler`
    - `include_lit` for `include_literal_handler`
    - `lsdir` for `lsdir_handler`
    - `re_sub` for `RegexSubstitution`
    - `for` for `for_handler`
    """
    return {
        BARE_VARIABLE_COMMAND: get_var_handler,
        "var": get_var_handler,
        "let": set_var_handler,
        "lit": literal_handler,
        "eval": eval_handler,
        "alt": fallback_handler,
        "run": run_process_handler,
        "include": include_handler,
        "include_lit": include_literal_handler,
        "lsdir": lsdir_handler,
        "re_sub": RegexSubstitution(),
        "for": for_handler,
    }


__all__ = [
    "RegexSubstitution",
    "default_commands",
    "eval_handler",
    "fallback_handler",
    "for_handler",
    "get_var_handler",
    "include_handler",
    "include_literal_handler",
    "literal_handler",
    "lsdir_handler",
    "run_process_handler",
    "set_var_handler",
]
