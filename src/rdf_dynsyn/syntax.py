"""
Syntax Registry

The closed set of RDF syntaxes known to rdf-dynsyn and their static
metadata: canonical media type, alias media types, file extensions,
quad support and the backend family that handles them.

Adding a syntax is a single edit here: one ``SyntaxTag`` member and one
``_REGISTRY`` entry. Dispatch code outside the factories never branches on
individual tags.

Example:
    >>> metadata_of(SyntaxTag.TURTLE).canonical_media_type
    'text/turtle'
    >>> [t.value for t in supported_syntaxes()]
    ['turtle', 'trig', 'n-triples', 'n-quads', 'rdf-xml']
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .errors import UnknownSyntaxError

logger = logging.getLogger(__name__)


class SyntaxTag(str, Enum):
    """Stable names of the registered RDF syntaxes."""
    TURTLE = "turtle"
    TRIG = "trig"
    N_TRIPLES = "n-triples"
    N_QUADS = "n-quads"
    RDF_XML = "rdf-xml"
    N3 = "n3"
    JSON_LD = "json-ld"
    HTML_RDFA = "html-rdfa"
    XHTML_RDFA = "xhtml-rdfa"
    OWL2_XML = "owl2-xml"
    OWL2_MANCHESTER = "owl2-manchester"

    def __str__(self) -> str:
        return self.value


class BackendFamily(str, Enum):
    """
    Backend families wrapped by the parser and serializer factories.

    Each family drives a structurally different rdflib implementation:

    - LINES: the line-at-a-time N-Triples/N-Quads parsers
    - DOCUMENT: the notation3-based Turtle/TriG parser and serializers
    - RDF_XML: the SAX-based RDF/XML handler and XML serializers
    """
    LINES = "lines"
    DOCUMENT = "document"
    RDF_XML = "rdf-xml"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SyntaxMetadata:
    """
    Static metadata of one syntax.

    Attributes:
        display_name: Human-readable name
        canonical_media_type: Registered primary media type
        alias_media_types: Other media types that always mean this syntax
        file_extensions: Known extensions, canonical one first
        partial_identifiers: Media types or extensions that usually, but not
            always, mean this syntax (e.g. ``text/html``)
        supports_quads: True when the syntax can name graphs
        backend: Family that parses and serializes it, None when unsupported
    """
    display_name: str
    canonical_media_type: str
    alias_media_types: FrozenSet[str]
    file_extensions: Tuple[str, ...]
    partial_identifiers: FrozenSet[str] = frozenset()
    supports_quads: bool = False
    backend: Optional[BackendFamily] = None

    @property
    def canonical_extension(self) -> str:
        """Preferred file extension."""
        return self.file_extensions[0]

    @property
    def media_types(self) -> FrozenSet[str]:
        """Canonical and alias media types."""
        return self.alias_media_types | {self.canonical_media_type}


_REGISTRY: Dict[SyntaxTag, SyntaxMetadata] = {
    SyntaxTag.TURTLE: SyntaxMetadata(
        display_name="Turtle",
        canonical_media_type="text/turtle",
        alias_media_types=frozenset({
            "application/x-turtle",
            "application/turtle",
            "text/ttl",
        }),
        file_extensions=("ttl", "turtle"),
        backend=BackendFamily.DOCUMENT,
    ),
    SyntaxTag.TRIG: SyntaxMetadata(
        display_name="TriG",
        canonical_media_type="application/trig",
        alias_media_types=frozenset({"application/x-trig"}),
        file_extensions=("trig",),
        supports_quads=True,
        backend=BackendFamily.DOCUMENT,
    ),
    SyntaxTag.N_TRIPLES: SyntaxMetadata(
        display_name="N-Triples",
        canonical_media_type="application/n-triples",
        alias_media_types=frozenset({"text/ntriples", "text/n-triples"}),
        file_extensions=("nt", "ntriples"),
        partial_identifiers=frozenset({"text/plain"}),
        backend=BackendFamily.LINES,
    ),
    SyntaxTag.N_QUADS: SyntaxMetadata(
        display_name="N-Quads",
        canonical_media_type="application/n-quads",
        alias_media_types=frozenset({"text/x-nquads", "text/nquads"}),
        file_extensions=("nq", "nquads"),
        supports_quads=True,
        backend=BackendFamily.LINES,
    ),
    SyntaxTag.RDF_XML: SyntaxMetadata(
        display_name="RDF/XML",
        canonical_media_type="application/rdf+xml",
        alias_media_types=frozenset({"application/rdf", "text/rdf+xml"}),
        file_extensions=("rdf", "rdfxml"),
        backend=BackendFamily.RDF_XML,
    ),
    SyntaxTag.N3: SyntaxMetadata(
        display_name="Notation3",
        canonical_media_type="text/n3",
        alias_media_types=frozenset({"text/rdf+n3"}),
        file_extensions=("n3",),
    ),
    SyntaxTag.JSON_LD: SyntaxMetadata(
        display_name="JSON-LD",
        canonical_media_type="application/ld+json",
        alias_media_types=frozenset(),
        file_extensions=("jsonld",),
        partial_identifiers=frozenset({"application/json", "json"}),
        supports_quads=True,
    ),
    SyntaxTag.HTML_RDFA: SyntaxMetadata(
        display_name="HTML+RDFa",
        canonical_media_type="text/html",
        alias_media_types=frozenset(),
        file_extensions=("html",),
        partial_identifiers=frozenset({"text/html", "html", "htm"}),
    ),
    SyntaxTag.XHTML_RDFA: SyntaxMetadata(
        display_name="XHTML+RDFa",
        canonical_media_type="application/xhtml+xml",
        alias_media_types=frozenset(),
        file_extensions=("xhtml",),
        partial_identifiers=frozenset({"application/xhtml+xml", "xhtml"}),
    ),
    SyntaxTag.OWL2_XML: SyntaxMetadata(
        display_name="OWL 2 XML",
        canonical_media_type="application/owl+xml",
        alias_media_types=frozenset(),
        file_extensions=("owl", "owx"),
    ),
    SyntaxTag.OWL2_MANCHESTER: SyntaxMetadata(
        display_name="OWL 2 Manchester",
        canonical_media_type="text/owl-manchester",
        alias_media_types=frozenset(),
        file_extensions=("omn",),
    ),
}


def all_syntaxes() -> List[SyntaxTag]:
    """Return every registered syntax tag in declaration order."""
    return list(SyntaxTag)


def supported_syntaxes() -> List[SyntaxTag]:
    """Return the tags that have a parser and serializer backend."""
    return [tag for tag in SyntaxTag if _REGISTRY[tag].backend is not None]


def metadata_of(tag: SyntaxTag) -> SyntaxMetadata:
    """Return the static metadata of a syntax tag."""
    return _REGISTRY[SyntaxTag(tag)]


def tag_of(value: Any) -> SyntaxTag:
    """
    Coerce a tag or tag name (``"turtle"``) to a SyntaxTag.

    Raises:
        UnknownSyntaxError: If the value names no registered syntax.
    """
    if isinstance(value, SyntaxTag):
        return value
    try:
        return SyntaxTag(value)
    except ValueError as e:
        raise UnknownSyntaxError(value, f"Not a syntax tag: {value!r}") from e


def _check_registry(registry: Dict[SyntaxTag, SyntaxMetadata]) -> None:
    """
    Verify registry invariants.

    Raises:
        RuntimeError: If a tag lacks metadata, a canonical media type is
            claimed twice, alias or partial identifiers overlap, or a
            backend family is never used.
    """
    missing = set(SyntaxTag) - set(registry)
    if missing:
        raise RuntimeError(f"Syntax tags without metadata: {sorted(missing)}")

    claimed: Dict[str, SyntaxTag] = {}
    for tag, meta in registry.items():
        # Canonical media types of partially identified syntaxes are also
        # listed as partial identifiers; they are matched as partial.
        exclusive = meta.media_types - meta.partial_identifiers
        for identifier in exclusive | meta.partial_identifiers:
            owner = claimed.setdefault(identifier, tag)
            if owner != tag:
                raise RuntimeError(f"Identifier '{identifier}' claimed by both {owner} and {tag}")
        for extension in meta.file_extensions:
            owner = claimed.setdefault(f".{extension}", tag)
            if owner != tag:
                raise RuntimeError(f"Extension '{extension}' claimed by both {owner} and {tag}")

    used = {meta.backend for meta in registry.values()}
    unused = set(BackendFamily) - used
    if unused:
        raise RuntimeError(f"Backend families without syntaxes: {sorted(unused)}")


_check_registry(_REGISTRY)
