"""
Exception classes for the ppm macro engine.

User input never raises: malformed templates are reported as issues and the
engine always produces a result. The exceptions below signal misuse of the
Python API (invalid command names, bad configuration) or internal bugs
(inconsistent spans, a handler reusing its context).
"""


class PpmError(Exception):
    """Base exception for all ppm errors."""

    pass


class InvalidCommandNameError(PpmError):
    """Raised when registering a command whose name is not allowed.

    Command names may not contain whitespace or any of the characters `%(){}`.
    """

    def __init__(self, name: str):
        """
        Initialize the exception.

        Params:
            name: The rejected command name
        """
        self.name = name
        super().__init__(
            f"Invalid command name {name!r}: names may not contain whitespace or any of '%(){{}}'"
        )


class SpanError(PpmError):
    """Raised when a span cannot be placed inside its parent span."""

    def __init__(self, span, parent):
        """
        Initialize the exception.

        Params:
            span: The span being re-based
            parent: The span it was expected to fit into
        """
        self.span = span
        self.parent = parent
        super().__init__(f"{span} does not fit inside {parent}")


class InternalConsistencyError(PpmError):
    """Raised when a parser or handler produced spans that contradict each other.

    This always indicates a bug in ppm or in a command handler, never a
    problem with the processed template.
    """

    pass


class ContextConsumedError(PpmError):
    """Raised when a command context's body is processed a second time."""

    def __init__(self, command_span):
        self.command_span = command_span
        super().__init__(f"Body of the command at {command_span} was already processed")


class ConfigError(PpmError):
    """Raised when an engine configuration cannot be loaded or validated."""

    def __init__(self, source: str, reason: str):
        """
        Initialize the exception.

        Params:
            source: Where the configuration came from (a path or "<dict>")
            reason: Why it was rejected
        """
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid engine configuration in {source}: {reason}")
