"""
Predefined commands talking to the outside world: processes and files.
"""

import logging
import subprocess
from pathlib import Path

from ppm.engine.context import CommandContext
from ppm.parsing.arguments import split_words

logger = logging.getLogger(__name__)


def make_absolute(path: str | Path, root: Path | None) -> Path:
    """
    Resolve a path against the engine's root path.

    Raises:
        OSError: If there is no root path and the current directory is unavailable
    """
    path = Path(path)
    if path.is_absolute():
        return path
    return (root if root is not None else Path.cwd()) / path


def run_process_handler(ctx: CommandContext) -> str:
    """
    Run a process and insert what it writes to stdout.

    - argument: shell-like command line; double quotes group words, a
      backslash escapes the next character
    - every word is processed before the process is started
    - runs in the engine's root path if one is set
    """
    argv = [ctx.process(word) for word in split_words(ctx.body)]
    if not argv or not argv[0]:
        ctx.push_missing_args("no process to run given")
        return ""

    logger.debug("running %s", argv)
    try:
        completed = subprocess.run(
            argv, cwd=ctx.engine.root_path, capture_output=True, check=False
        )
    except OSError as e:
        ctx.push_io_error(e, "while trying to run process")
        return ""
    except ValueError as e:
        ctx.push_invalid_args(f"invalid process arguments: {e}")
        return ""
    return completed.stdout.decode("utf-8", errors="replace")


def _read_included_file(ctx: CommandContext) -> str | None:
    path_arg = ctx.process_body()
    if not path_arg:
        ctx.push_missing_args("no file to include given")
        return None
    try:
        path = make_absolute(path_arg, ctx.engine.root_path)
    except OSError as e:
        ctx.push_io_error(e, "while trying to get the current directory")
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        ctx.push_io_error(e, "while trying to read file")
        return None


def include_handler(ctx: CommandContext) -> str:
    """
    Include another file and process it.

    - argument: path, processed, relative to the engine's root path
    - issues inside the included file are reported on the include command
    """
    content = _read_included_file(ctx)
    if content is None:
        return ""
    return ctx.process(content)


def include_literal_handler(ctx: CommandContext) -> str:
    """Include another file without processing it."""
    content = _read_included_file(ctx)
    return content if content is not None else ""
