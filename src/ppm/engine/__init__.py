"""
ppm engine components.

This package provides the engine, the command registry and dispatch, the
handler context and the variable scoping helpers used by iterating commands.
"""

from ppm.engine.config import EngineConfig
from ppm.engine.context import CommandContext
from ppm.engine.dispatch import dispatch_command, resolve_command
from ppm.engine.engine import Engine
from ppm.engine.registry import (
    BARE_VARIABLE_COMMAND,
    CommandHandler,
    CommandRegistry,
    is_valid_command_name,
)
from ppm.engine.scoping import ShadowedVariable, evaluate_each, sort_by_computed_key

__all__ = [
    "BARE_VARIABLE_COMMAND",
    "CommandContext",
    "CommandHandler",
    "CommandRegistry",
    "Engine",
    "EngineConfig",
    "ShadowedVariable",
    "dispatch_command",
    "evaluate_each",
    "is_valid_command_name",
    "resolve_command",
    "sort_by_computed_key",
]
