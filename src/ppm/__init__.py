"""
ppm - a templating and macro engine

Commands are written as `(%name body%)` and may be nested. `(%name%)` calls
the command `name`, or looks up the variable `name` if no such command
exists. A backslash in front of a delimiter (`\\(%`) makes it plain text.

ppm always produces a result: problems are collected as issues instead of
being raised.
"""

from importlib.metadata import version

from ppm.core import Issue, RowCol, Span
from ppm.engine import CommandContext, CommandRegistry, Engine, EngineConfig

__version__ = version("ppm")

__all__ = [
    "__version__",
    "CommandContext",
    "CommandRegistry",
    "Engine",
    "EngineConfig",
    "Issue",
    "RowCol",
    "Span",
]
