"""
Parser/serializer configuration and JSON settings loading.

``ParserConfig`` and ``SerializerConfig`` are per-construction option sets.
Not every backend honours every option; the factories validate them per
syntax and raise ``UnsupportedConfigError`` instead of ignoring them.

``DynSynSettings`` holds per-syntax defaults, used when a factory is asked
for a parser or serializer without an explicit config, plus memory limits.
Settings are usually loaded from a JSON file:

    ```json
    {
        "parsers": {
            "text/turtle": {"base_iri": "http://example.org/", "strict": true}
        },
        "serializers": {
            "ttl": {"pretty_print": true, "prefixes": {"ex": "http://example.org/"}}
        },
        "memory": {"min_available_mb": 64, "large_document_mb": 100}
    }
    ```

Syntax keys may be tag names (``turtle``), media types or file extensions.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

from .correspondence import resolve
from .errors import UnknownSyntaxError
from .syntax import SyntaxTag

logger = logging.getLogger(__name__)


def is_absolute_iri(value: Any) -> bool:
    """Return True for an IRI with a scheme and no whitespace."""
    if not isinstance(value, str) or not value or any(c.isspace() for c in value):
        return False
    try:
        return bool(urlsplit(value).scheme)
    except ValueError:
        return False


@dataclass(frozen=True)
class ParserConfig:
    """
    Options for constructing a parser.

    Attributes:
        base_iri: Absolute IRI relative references are resolved against.
            Only meaningful for syntaxes that allow relative IRIs.
        strict: Reject ill-typed literals (lexical form not valid for the
            XSD datatype) instead of passing them through.
        default_graph_name: Quad syntaxes only. Attribute statements of the
            document's default graph to this named graph.
    """
    base_iri: Optional[str] = None
    strict: bool = False
    default_graph_name: Optional[str] = None


@dataclass(frozen=True)
class SerializerConfig:
    """
    Options for constructing a serializer.

    Attributes:
        pretty_print: Group statements by subject and abbreviate IRIs. The
            document is then built in memory before it is written.
        prefixes: Prefix name to namespace IRI, used when pretty printing.
    """
    pretty_print: bool = False
    prefixes: Dict[str, str] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash((self.pretty_print, tuple(sorted(self.prefixes.items()))))


@dataclass
class MemorySettings:
    """
    Memory limits used by the backend construction guard.

    Attributes:
        min_available_mb: Free memory required to construct a backend
        large_document_mb: Documents above this size are logged as large
    """
    min_available_mb: float = 64.0
    large_document_mb: float = 100.0


@dataclass
class DynSynSettings:
    """Per-syntax default configs and memory limits."""
    parsers: Dict[SyntaxTag, ParserConfig] = field(default_factory=dict)
    serializers: Dict[SyntaxTag, SerializerConfig] = field(default_factory=dict)
    memory: MemorySettings = field(default_factory=MemorySettings)

    def parser_config_for(self, tag: SyntaxTag) -> ParserConfig:
        """Return the default parser config for a syntax."""
        return self.parsers.get(tag, ParserConfig())

    def serializer_config_for(self, tag: SyntaxTag) -> SerializerConfig:
        """Return the default serializer config for a syntax."""
        return self.serializers.get(tag, SerializerConfig())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynSynSettings":
        """
        Build settings from a decoded JSON object.

        Raises:
            ValueError: On unknown sections, syntax keys or option names, or an
                option value of the wrong type.
        """
        unknown_sections = set(data) - {"parsers", "serializers", "memory"}
        if unknown_sections:
            raise ValueError(f"Unknown settings sections: {sorted(unknown_sections)}")

        parsers = {
            _syntax_key(key): _build(ParserConfig, options, f"parsers.{key}")
            for key, options in _section(data, "parsers").items()
        }
        serializers = {
            _syntax_key(key): _build(SerializerConfig, options, f"serializers.{key}")
            for key, options in _section(data, "serializers").items()
        }
        memory = _build(MemorySettings, _section(data, "memory"), "memory")
        return cls(parsers=parsers, serializers=serializers, memory=memory)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"Settings section '{name}' must be a JSON object, got {type(section).__name__}")
    return section


def _syntax_key(key: str) -> SyntaxTag:
    try:
        return SyntaxTag(key)
    except ValueError:
        pass
    try:
        return resolve(key).value
    except UnknownSyntaxError as e:
        raise ValueError(f"Unknown syntax in settings: '{key}'") from e


def _build(config_type: type, options: Any, where: str) -> Any:
    if not isinstance(options, dict):
        raise ValueError(f"Settings entry '{where}' must be a JSON object, got {type(options).__name__}")
    known = {f.name for f in fields(config_type)}
    unknown = set(options) - known
    if unknown:
        raise ValueError(
            f"Unknown option(s) {sorted(unknown)} in '{where}'. "
            f"Supported options: {sorted(known)}"
        )
    for name, value in options.items():
        _check_option_type(name, value, where)
    return config_type(**options)


# JSON value types accepted for each option
_OPTION_TYPES: Dict[str, Tuple[type, ...]] = {
    "base_iri": (str, type(None)),
    "strict": (bool,),
    "default_graph_name": (str, type(None)),
    "pretty_print": (bool,),
    "prefixes": (dict,),
    "min_available_mb": (int, float),
    "large_document_mb": (int, float),
}


def _check_option_type(name: str, value: Any, where: str) -> None:
    expected = _OPTION_TYPES[name]
    # bool is an int subclass; JSON true is not a size
    if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
        names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
        raise ValueError(
            f"Option '{name}' in '{where}' must be {names}, got {type(value).__name__}"
        )
    if name == "prefixes":
        for prefix, namespace in value.items():
            if not isinstance(namespace, str):
                raise ValueError(
                    f"Namespace of prefix '{prefix}' in '{where}' must be str, "
                    f"got {type(namespace).__name__}"
                )


def load_settings(settings_path: Union[str, Path]) -> DynSynSettings:
    """
    Load settings from a JSON file.

    Args:
        settings_path: Path to the settings file (``.json``).

    Returns:
        Parsed DynSynSettings.

    Raises:
        ValueError: If the path is empty, not a .json file, or the file
            contains invalid JSON or unknown options.
        FileNotFoundError: If the settings file doesn't exist.
    """
    if not settings_path:
        raise ValueError("settings_path cannot be empty")

    path = Path(settings_path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Settings file must have a .json extension: {settings_path}")
    if not path.is_file():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in settings file {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    except UnicodeDecodeError as e:
        raise ValueError(f"File encoding error in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object, got {type(data).__name__}")

    settings = DynSynSettings.from_dict(data)
    logger.info(
        f"Loaded settings from {path}: {len(settings.parsers)} parser default(s), "
        f"{len(settings.serializers)} serializer default(s)"
    )
    return settings
