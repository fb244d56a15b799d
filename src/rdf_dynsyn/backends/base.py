"""
Backend adapter interfaces.

A backend adapter constructs and drives one rdflib implementation and
translates its native shapes into a common native statement shape:
``(subject, predicate, object, graph)`` of rdflib nodes, where ``graph`` is
None for the default graph. Translation into the caller's term type happens
in the uniform parser/serializer, at the boundary.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional, Tuple, Union

from rdflib.term import Literal, Node, URIRef

from ..config import ParserConfig, SerializerConfig
from ..errors import ParseError
from ..sources import Source
from ..syntax import BackendFamily, SyntaxTag, metadata_of

logger = logging.getLogger(__name__)

NativeStatement = Tuple[Node, Node, Node, Optional[Node]]
ParseItem = Union[NativeStatement, ParseError]
Writer = Callable[[str], None]

# Base handed to rdflib when none is configured. Relative IRIs resolve under
# it and are reported instead of depending on the working directory.
UNRESOLVED_BASE = "http://rdf-dynsyn.invalid/"


class ParserBackend(ABC):
    """
    Drives one native parser for one syntax.

    Subclasses declare their recovery policy in ``RECOVERS``: True when a
    malformed statement is reported and parsing continues, False when the
    first error ends the stream.
    """

    FAMILY: BackendFamily
    RECOVERS: bool = False

    def __init__(self, tag: SyntaxTag, config: ParserConfig):
        self.tag = tag
        self.config = config
        self.supports_quads = metadata_of(tag).supports_quads

    @abstractmethod
    def statements(self, source: Source) -> Iterator[ParseItem]:
        """
        Parse a document lazily.

        Yields native statements and inline ParseErrors, following the
        backend's recovery policy.
        """

    def ill_typed_reason(self, statement: NativeStatement) -> Optional[str]:
        """Return why a statement violates strict mode, or None."""
        if not self.config.strict:
            return None
        obj = statement[2]
        if isinstance(obj, Literal) and obj.ill_typed:
            return f"Ill-typed literal {str(obj)!r} for datatype <{obj.datatype}>"
        return None

    @property
    def base_iri(self) -> str:
        return self.config.base_iri or UNRESOLVED_BASE

    def unresolved_reason(self, statement: NativeStatement) -> Optional[str]:
        """Return the relative IRI a statement holds when no base is configured, or None."""
        if self.config.base_iri:
            return None
        for node in statement:
            if isinstance(node, Literal):
                node = node.datatype
            if isinstance(node, URIRef) and node.startswith(UNRESOLVED_BASE):
                relative = node[len(UNRESOLVED_BASE):]
                return f"Relative IRI <{relative}> cannot be resolved without a base IRI"
        return None

    def rejection_reason(self, statement: NativeStatement) -> Optional[str]:
        """Return why a statement ends the stream, or None."""
        return self.unresolved_reason(statement) or self.ill_typed_reason(statement)

    def close(self) -> None:
        """Release backend state. The default holds none."""


class SerializerBackend(ABC):
    """
    Drives one native serializer for one serialization session.

    ``write`` receives text as soon as the backend can produce it.
    """

    FAMILY: BackendFamily

    def __init__(self, tag: SyntaxTag, config: SerializerConfig, write: Writer):
        self.tag = tag
        self.config = config
        self.write = write
        self.supports_quads = metadata_of(tag).supports_quads

    def start(self) -> None:
        """Write any document header."""

    @abstractmethod
    def add(self, statement: NativeStatement) -> None:
        """
        Consume one statement.

        Raises:
            SerializeError: If the statement cannot be represented.
        """

    def finish(self) -> None:
        """Write buffered content and any document footer."""
