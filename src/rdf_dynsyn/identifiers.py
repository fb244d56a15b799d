"""
External identifiers: media types and file extensions.

Callers usually learn a document's syntax from a ``Content-Type`` header or
a file name. These value types normalise both so the resolver can match
them case-insensitively:

    >>> MediaType.parse("Text/Turtle; charset=UTF-8")
    MediaType(type='text', subtype='turtle', parameters=(('charset', 'UTF-8'),))
    >>> FileExtension.from_path("data/Graph.TTL")
    FileExtension(value='ttl')
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class MediaType:
    """
    A parsed media type.

    Type and subtype are lower-cased. Parameters keep their order and value
    case but are ignored by ``essence``, which is what resolution matches on.
    """
    type: str
    subtype: str
    parameters: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        """
        Parse ``type/subtype[;name=value]*``.

        Raises:
            ValueError: If the value has no ``type/subtype`` part.
        """
        if not value or not value.strip():
            raise ValueError("Media type cannot be empty")

        essence, *raw_params = value.split(";")
        main, sep, sub = essence.strip().partition("/")
        main, sub = main.strip().lower(), sub.strip().lower()
        if not sep or not main or not sub or "/" in sub:
            raise ValueError(f"Invalid media type: '{value}'")

        parameters = []
        for raw in raw_params:
            name, _, param_value = raw.strip().partition("=")
            if name.strip():
                parameters.append((name.strip().lower(), param_value.strip().strip('"')))
        return cls(main, sub, tuple(parameters))

    @property
    def essence(self) -> str:
        """``type/subtype`` without parameters."""
        return f"{self.type}/{self.subtype}"

    def param(self, name: str) -> Optional[str]:
        """Return the value of a parameter, if present."""
        for key, value in self.parameters:
            if key == name.lower():
                return value
        return None

    def __str__(self) -> str:
        params = "".join(f"; {k}={v}" for k, v in self.parameters)
        return f"{self.essence}{params}"


@dataclass(frozen=True)
class FileExtension:
    """A lower-cased file extension without the leading dot."""
    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().lstrip(".").lower()
        if not normalized:
            raise ValueError("File extension cannot be empty")
        object.__setattr__(self, "value", normalized)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Optional["FileExtension"]:
        """Return the extension of a path, or None if it has none."""
        suffix = Path(path).suffix
        if not suffix or suffix == ".":
            return None
        return cls(suffix)

    def __str__(self) -> str:
        return self.value


ExternalIdentifier = Union[MediaType, FileExtension]


def parse_identifier(value: Union[str, MediaType, FileExtension]) -> ExternalIdentifier:
    """
    Interpret a caller-supplied identifier.

    Strings containing ``/`` are media types, anything else is a file
    extension (with or without the leading dot).

    Raises:
        ValueError: If the string is empty or not a valid media type.
    """
    if isinstance(value, (MediaType, FileExtension)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected a media type or file extension, got {type(value).__name__}")
    if "/" in value:
        return MediaType.parse(value)
    return FileExtension(value)
