"""
rdf-dynsyn: dynamic dispatch over RDF syntaxes.

Resolve a media type or file extension to a syntax tag, then build a
parser or serializer for that tag at runtime. Parsers yield one lazy
stream of triples/quads with inline parse errors; serializers consume
triples/quads and write them to a sink or a string.

Example:
    ```python
    from rdf_dynsyn import ParserFactory, SerializerFactory, resolve

    tag = resolve("text/turtle").value
    triples = list(ParserFactory().try_new_parser(tag).parse(data))

    out = SerializerFactory().try_new_stringifier(resolve("application/rdf+xml").value)
    out.serialize_graph(triples)
    print(out.as_string())
    ```
"""

from .config import (
    DynSynSettings,
    MemorySettings,
    ParserConfig,
    SerializerConfig,
    load_settings,
)
from .correspondence import (
    Correspondence,
    canonical_extension_of,
    canonical_identifier_of,
    resolve,
    resolve_hint,
    resolve_path,
)
from .errors import (
    BackendInitError,
    DynSynError,
    ParseError,
    SerializeError,
    UnknownSyntaxError,
    UnsupportedConfigError,
    UnsupportedSyntaxError,
)
from .identifiers import FileExtension, MediaType
from .parser import ParserFactory, UniformParser, raise_on_error
from .serializer import SerializerFactory, UniformSerializer, UniformStringifier
from .syntax import SyntaxMetadata, SyntaxTag, all_syntaxes, metadata_of, supported_syntaxes
from .terms import (
    PlainTermFactory,
    Quad,
    RDFLibTermFactory,
    TermFactory,
    Triple,
)

__version__ = "0.1.0"

__all__ = [
    # Registry and resolution
    "SyntaxTag",
    "SyntaxMetadata",
    "all_syntaxes",
    "supported_syntaxes",
    "metadata_of",
    "MediaType",
    "FileExtension",
    "Correspondence",
    "resolve",
    "resolve_hint",
    "resolve_path",
    "canonical_identifier_of",
    "canonical_extension_of",
    # Parsing and serialization
    "ParserFactory",
    "UniformParser",
    "raise_on_error",
    "SerializerFactory",
    "UniformSerializer",
    "UniformStringifier",
    # Terms
    "TermFactory",
    "RDFLibTermFactory",
    "PlainTermFactory",
    "Triple",
    "Quad",
    # Configuration
    "ParserConfig",
    "SerializerConfig",
    "DynSynSettings",
    "MemorySettings",
    "load_settings",
    # Errors
    "DynSynError",
    "UnknownSyntaxError",
    "UnsupportedSyntaxError",
    "UnsupportedConfigError",
    "BackendInitError",
    "ParseError",
    "SerializeError",
]
