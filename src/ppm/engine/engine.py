"""
The ppm engine: variables, commands and the re-entrant `process` operation.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from ppm.core.issues import Issue
from ppm.core.span import SourceOrigin
from ppm.engine.dispatch import dispatch_command
from ppm.engine.registry import CommandHandler, CommandRegistry
from ppm.parsing.parser import LiteralAtom, parse_source, unescape_literal

if TYPE_CHECKING:
    from ppm.engine.config import EngineConfig


class Engine:
    """
    Expands `(% ... %)` command invocations in text.

    An engine owns a variable table, a command registry and an optional root
    path (the directory relative paths are resolved against; the current
    working directory when unset). Handlers receive the engine itself and may
    change variables and commands; those changes persist across `process`
    calls.

    Processing is synchronous and depth-first, so at any time there is a single
    chain of nested handler calls using the engine. Separate engines share
    nothing and can be used from different threads.

    Example:
        engine = Engine.with_predefined_commands({"name": "world"})
        output, issues = engine.process_new("hello (%name%)")
    """

    def __init__(
        self,
        variables: Mapping[str, str] | None = None,
        root_path: Path | None = None,
        commands: CommandRegistry | None = None,
    ):
        self.vars: dict[str, str] = dict(variables or {})
        self.root_path: Path | None = Path(root_path) if root_path is not None else None
        self.commands: CommandRegistry = commands if commands is not None else CommandRegistry()

    @classmethod
    def with_predefined_commands(cls, variables: Mapping[str, str] | None = None) -> "Engine":
        """Create an engine that knows the given variables and the predefined commands."""
        from ppm.commands import default_commands

        return cls(variables, commands=CommandRegistry(default_commands()))

    @classmethod
    def from_config(cls, config: "EngineConfig") -> "Engine":
        """Create an engine from a validated configuration."""
        if config.predefined_commands:
            engine = cls.with_predefined_commands(config.variables)
        else:
            engine = cls(config.variables)
        for name in config.disabled_commands:
            engine.commands.remove(name)
        return engine.with_root_path(config.root_path) if config.root_path else engine

    def with_root_path(self, path: str | Path) -> "Engine":
        self.root_path = Path(path)
        return self

    def without_root_path(self) -> "Engine":
        self.root_path = None
        return self

    def add_command(self, name: str, handler: CommandHandler) -> CommandHandler | None:
        """
        Make a command known to the engine.

        Returns:
            The handler previously registered under `name`, if any

        Raises:
            InvalidCommandNameError: If the name contains whitespace or `%(){}`
        """
        return self.commands.add(name, handler)

    def add_commands(
        self,
        commands: Mapping[str, CommandHandler] | Iterable[tuple[str, CommandHandler]],
    ) -> None:
        items = commands.items() if isinstance(commands, Mapping) else commands
        self.commands.update(items)

    def process(
        self, source: str, issues: list[Issue], origin: SourceOrigin | None = None
    ) -> str:
        """
        Expand every command invocation in `source`.

        Never raises for any template: problems are appended to `issues`
        (with spans relative to `source`) and a best-effort result is
        returned.

        Params:
            source: Template text
            issues: Receives all issues found, including those of nested commands
            origin: Where `source` sits in the outermost processed text, used
                for the locations named in messages (defaults to `source` itself)

        Returns:
            The expanded text
        """
        if origin is None:
            origin = SourceOrigin(source)
        fragments = []
        for atom in parse_source(source, issues):
            if isinstance(atom, LiteralAtom):
                fragments.append(unescape_literal(atom.text))
            else:
                fragments.append(dispatch_command(self, atom, origin, issues))
        return "".join(fragments)

    def process_new(self, source: str) -> tuple[str, list[Issue]]:
        """Like `process` but with a fresh issue list, returned alongside the output."""
        issues: list[Issue] = []
        return self.process(source, issues), issues
