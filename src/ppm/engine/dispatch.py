"""
Resolving a command atom to its handler and invoking it.
"""

import logging
from typing import TYPE_CHECKING

from ppm.core.issues import HANDLER_ERROR, UNKNOWN_COMMAND, Issue
from ppm.core.span import SourceOrigin, Span
from ppm.engine.context import CommandContext
from ppm.engine.registry import BARE_VARIABLE_COMMAND, CommandHandler
from ppm.exceptions import PpmError
from ppm.parsing.parser import CommandAtom, split_command

if TYPE_CHECKING:
    from ppm.engine.engine import Engine

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 10


def resolve_command(
    engine: "Engine", atom: CommandAtom
) -> tuple[CommandHandler, str, Span] | None:
    """
    Find the handler for a command atom.

    `(%name body%)` calls the command `name`. When no such command exists and
    there is no body, the whole atom is handed to the empty-named command,
    which is how `(%variable%)` works.

    Returns:
        `(handler, body, body_span)`, or None if nothing matches
    """
    parts = split_command(atom.text)
    handler = engine.commands.get(parts.name)
    if handler is not None:
        body_span = Span(atom.span.start + parts.body_offset, len(parts.body))
        return handler, parts.body, body_span

    if not parts.body:
        handler = engine.commands.get(BARE_VARIABLE_COMMAND)
        if handler is not None:
            logger.debug("no command %r, using it as argument of the empty command", parts.name)
            return handler, atom.text, atom.span
    return None


def dispatch_command(
    engine: "Engine", atom: CommandAtom, origin: SourceOrigin, issues: list[Issue]
) -> str:
    """
    Run the command an atom invokes and return its output.

    Params:
        engine: Engine owning the command table
        atom: Parsed command atom
        origin: Where the text `atom` was parsed from sits in the outermost source
        issues: Issue list of the current `process` call

    Returns:
        The handler's output, or "" for unknown commands
    """
    cmd_span = atom.cmd_span
    resolved = resolve_command(engine, atom)
    if resolved is None:
        preview = atom.text[:PREVIEW_LENGTH]
        issues.append(
            Issue(
                id=UNKNOWN_COMMAND,
                msg=(
                    f"invalid or unknown command at {origin.locate(cmd_span.start)} "
                    f"(starting with {preview}...)"
                ),
                span=cmd_span,
            )
        )
        return ""

    handler, body, body_span = resolved
    ctx = CommandContext(
        body=body,
        body_span=body_span,
        cmd_span=cmd_span,
        issues=issues,
        engine=engine,
        origin=origin,
    )
    logger.debug("dispatching command at %s", cmd_span)
    try:
        return handler(ctx)
    except PpmError:
        raise
    except Exception as e:
        logger.warning(f"Command handler failed at {cmd_span}: {e!r}")
        issues.append(
            Issue(id=HANDLER_ERROR, msg=f"command handler failed: {e}", span=cmd_span)
        )
        return ""
