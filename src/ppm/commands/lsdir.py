"""
Directory listing command.
"""

from dataclasses import dataclass, field

from ppm.commands.for_loop import parse_sort_order
from ppm.commands.tools import make_absolute
from ppm.core.span import Span
from ppm.engine.context import CommandContext
from ppm.engine.scoping import ShadowedVariable, sort_by_computed_key
from ppm.parsing.arguments import matches_pattern, split_args, split_not_escaped
from ppm.parsing.escape import escape_chars

DEFAULT_ENTRY_VARIABLE = "entry"


@dataclass
class LsdirConfig:
    path: str = ""
    exclude_by_name: list[str] = field(default_factory=list)
    include_only_by_name: list[str] | None = None
    sort_key: str | None = None
    sort_key_span: Span | None = None
    sort_descending: bool = False
    variable: str = DEFAULT_ENTRY_VARIABLE

    def is_included(self, name: str) -> bool:
        if self.include_only_by_name is not None and not any(
            matches_pattern(name, pattern) for pattern in self.include_only_by_name
        ):
            return False
        return not any(matches_pattern(name, pattern) for pattern in self.exclude_by_name)


def parse_lsdir_config(ctx: CommandContext) -> LsdirConfig | None:
    """
    Read the path and the `verb object` arguments.

    Objects are processed, except the sort key which is evaluated per entry.
    Unknown verbs and sort orders are reported as warnings and skipped.

    Returns:
        The configuration, or None if no path was given (issue pushed)
    """
    config = LsdirConfig()
    args = split_args(ctx.body)
    path, path_span = args[0]
    config.path = ctx.process_subbody(path, path_span)
    if not config.path:
        ctx.push_missing_args("no path given")
        return None

    for arg, span in args[1:]:
        verb, separator, raw_object = arg.partition(" ")
        if not separator:
            continue
        object_span = Span(span.start + len(verb) + 1, len(raw_object))
        if verb == "sort_key":
            config.sort_key = raw_object
            config.sort_key_span = object_span
            continue

        obj = ctx.process_subbody(raw_object, object_span)
        if verb == "sort_order":
            descending = parse_sort_order(obj)
            if descending is None:
                ctx.push_issue(
                    ctx.partial_args(f"warning: unknown sort_order: `{obj}`. Try `+` or `-`")
                )
            else:
                config.sort_descending = descending
        elif verb == "exclude_names":
            config.exclude_by_name.extend(split_not_escaped(obj, " "))
        elif verb == "include_only_names":
            if config.include_only_by_name is None:
                config.include_only_by_name = []
            config.include_only_by_name.extend(split_not_escaped(obj, " "))
        elif verb == "with":
            config.variable = obj
        else:
            ctx.push_issue(ctx.partial_args(f"warning: ignoring unrecognised verb `{verb}`"))
    return config


def lsdir_handler(ctx: CommandContext) -> str:
    """
    Output a filtered list of the entries (as full paths) of a directory.

    - arguments: separated by colons, `\\:` escapes a colon
        - first argument: the directory to list, relative to the root path
        - remaining arguments have the form `<verb> <object>`:
            - `exclude_names`: space separated patterns (`\\ ` escapes a space);
              matching entries are not listed
            - `include_only_names`: space separated patterns; only matching
              entries are listed
            - `sort_key`: evaluated for each entry, with the entry's path bound
              to the `with` variable, to sort the entries by
            - `sort_order`: `+`/`asc`/... or `-`/`desc`/...
            - `with`: name of the variable used by `sort_key` (default `entry`)
        - patterns match by equality or with a single `*` wildcard
    - the output is a colon separated list with `:` and `\\` escaped, ready
      for `(%for x in ...%)`
    """
    config = parse_lsdir_config(ctx)
    if config is None:
        return ""

    try:
        directory = make_absolute(config.path, ctx.engine.root_path)
    except OSError as e:
        ctx.push_io_error(e, "while trying to get the current directory")
        return ""
    try:
        entries = [entry for entry in directory.iterdir() if config.is_included(entry.name)]
    except OSError as e:
        ctx.push_io_error(e, f"while trying to read the directory {directory}")
        return ""

    paths = sorted(str(entry) for entry in entries)
    if config.sort_key is not None:
        key, key_span = config.sort_key, config.sort_key_span

        def compute_key() -> str:
            return ctx.process_subbody(key, key_span)

        with ShadowedVariable(ctx.engine.vars, config.variable) as scope:
            paths = sort_by_computed_key(paths, scope, compute_key, config.sort_descending)
    elif config.sort_descending:
        paths.reverse()

    return ":".join(escape_chars(path, ":") for path in paths)
