"""
Error taxonomy for syntax resolution, parsing and serialization.

Every error carries the context needed to act on it without consulting
logs: the offending identifier, the syntax tag and option, or the position
in the parsed document.

Hierarchy:
    DynSynError
    ├── UnknownSyntaxError
    │   └── UnsupportedSyntaxError
    ├── UnsupportedConfigError
    ├── BackendInitError
    ├── ParseError
    └── SerializeError
"""

from typing import Any, Optional


class DynSynError(Exception):
    """Base exception for all rdf-dynsyn errors."""
    pass


class UnknownSyntaxError(DynSynError):
    """Raised when an identifier matches no registered syntax.

    Attributes:
        identifier: The media type, file extension or value that failed
            to resolve.
    """

    def __init__(self, identifier: Any, message: str = ""):
        self.identifier = identifier
        super().__init__(message or f"Unknown RDF syntax: {identifier!s}")


class UnsupportedSyntaxError(UnknownSyntaxError):
    """Raised when a registered syntax has no parser or serializer backend."""

    def __init__(self, tag: Any, operation: str = "parse"):
        self.tag = tag
        self.operation = operation
        super().__init__(
            tag,
            f"No backend can {operation} syntax '{tag}'",
        )


class UnsupportedConfigError(DynSynError):
    """Raised when a config option is meaningless for the chosen syntax.

    Attributes:
        tag: Syntax tag the parser/serializer was requested for
        option: Name of the rejected option
        reason: Human-readable explanation
    """

    def __init__(self, tag: Any, option: str, reason: str):
        self.tag = tag
        self.option = option
        self.reason = reason
        super().__init__(f"Option '{option}' is not supported for '{tag}': {reason}")


class BackendInitError(DynSynError):
    """Raised when the backend for a syntax cannot be constructed."""

    def __init__(self, tag: Any, reason: str):
        self.tag = tag
        self.reason = reason
        super().__init__(f"Could not initialise backend for '{tag}': {reason}")


class ParseError(DynSynError):
    """Malformed input at a specific position.

    Parse errors are yielded inline by ``UniformParser.parse`` rather than
    raised, so consumers can keep reading when the backend recovers.

    Attributes:
        tag: Syntax tag of the parser that produced the error
        reason: Backend error message
        line: 1-based line number, when known
        column: 0-based column, when known
    """

    def __init__(
        self,
        tag: Any,
        reason: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.tag = tag
        self.reason = reason
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        position = ""
        if self.line is not None:
            position = f" at line {self.line}"
            if self.column is not None:
                position += f", column {self.column}"
        return f"Invalid {self.tag} document{position}: {self.reason}"


class SerializeError(DynSynError):
    """Raised on sink write failure or a term the target syntax cannot hold."""

    def __init__(self, tag: Any, reason: str):
        self.tag = tag
        self.reason = reason
        super().__init__(f"Could not serialize {tag} document: {reason}")
