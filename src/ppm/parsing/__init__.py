"""
ppm template parsing components.

This package provides the escape-aware scanning primitives, the template
parser and the argument splitting helpers used by the predefined commands.
"""

from ppm.parsing.arguments import (
    find_separator,
    find_separators,
    matches_pattern,
    split_args,
    split_not_escaped,
    split_tokens,
    split_words,
    splitn_args,
)
from ppm.parsing.escape import (
    ESCAPE,
    auto_escape,
    take_while_level,
    unescape,
    unescape_all_except,
)
from ppm.parsing.parser import (
    CLOSE,
    DELIMITER_ALPHABET,
    OPEN,
    CommandAtom,
    CommandParts,
    LiteralAtom,
    SourceAtom,
    parse_source,
    split_command,
    unescape_literal,
)

__all__ = [
    "CLOSE",
    "DELIMITER_ALPHABET",
    "ESCAPE",
    "OPEN",
    "CommandAtom",
    "CommandParts",
    "LiteralAtom",
    "SourceAtom",
    "auto_escape",
    "find_separator",
    "find_separators",
    "matches_pattern",
    "parse_source",
    "split_args",
    "split_command",
    "split_not_escaped",
    "split_tokens",
    "split_words",
    "splitn_args",
    "take_while_level",
    "unescape",
    "unescape_all_except",
    "unescape_literal",
]
