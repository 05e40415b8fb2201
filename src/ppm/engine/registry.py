"""
Registry mapping command names to their handlers.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Protocol

from ppm.exceptions import InvalidCommandNameError
from ppm.parsing.parser import DELIMITER_ALPHABET

if TYPE_CHECKING:
    from ppm.engine.context import CommandContext


class CommandHandler(Protocol):
    """Anything that turns a command invocation into its output.

    Handlers must not raise for any template input: problems are pushed onto
    `ctx.issues` and a best-effort (often empty) string is returned.
    """

    def __call__(self, ctx: "CommandContext") -> str: ...


# The empty name is looked up for `(%name%)` when no command `name` exists
BARE_VARIABLE_COMMAND = ""


def is_valid_command_name(name: str) -> bool:
    """Command names may not contain whitespace or any of the characters `%(){}`."""
    return not any(c.isspace() or c in DELIMITER_ALPHABET for c in name)


class CommandRegistry:
    """Mutable name -> handler mapping. Re-adding a name shadows the old handler."""

    def __init__(self, commands: Mapping[str, CommandHandler] | None = None):
        self._handlers: dict[str, CommandHandler] = {}
        if commands:
            self.update(commands.items())

    def add(self, name: str, handler: CommandHandler) -> CommandHandler | None:
        """
        Register a handler.

        Params:
            name: Command name
            handler: Handler to call for `(%name ...%)`

        Returns:
            The handler previously registered under `name`, if any

        Raises:
            InvalidCommandNameError: If the name contains whitespace or `%(){}`
        """
        if not is_valid_command_name(name):
            raise InvalidCommandNameError(name)
        previous = self._handlers.get(name)
        self._handlers[name] = handler
        return previous

    def update(self, commands: Iterable[tuple[str, CommandHandler]]) -> None:
        for name, handler in commands:
            self.add(name, handler)

    def remove(self, name: str) -> CommandHandler | None:
        return self._handlers.pop(name, None)

    def get(self, name: str) -> CommandHandler | None:
        return self._handlers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
