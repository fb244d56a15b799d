"""
Whole-document backend: Turtle and TriG.

rdflib's notation3-based Turtle/TriG parser reads the complete document
before it produces any statement, so this backend parses into an rdflib
``Graph`` (Turtle) or ``Dataset`` (TriG) and then yields its statements.

Recovery policy: terminate. A syntax error, an ill-typed literal in strict
mode, or a relative IRI when no base IRI is configured rejects the document:
the stream holds exactly one ParseError and no statements.

Serialization has two modes:

- flat (default): statements are streamed as they arrive, one per line,
  with named graphs of consecutive TriG statements wrapped in one block
- pretty: statements are collected and written by rdflib's Turtle/TriG
  serializers, with the configured prefixes bound
"""

import logging
from typing import Iterator, List, Optional, Union

from rdflib.graph import DATASET_DEFAULT_GRAPH_ID, Dataset, Graph
from rdflib.plugins.parsers.notation3 import BadSyntax
from rdflib.plugins.serializers.nt import _nt_row
from rdflib.term import Node, URIRef

from ..errors import ParseError, SerializeError
from ..sources import Source, read_document
from ..syntax import BackendFamily
from .base import NativeStatement, ParseItem, ParserBackend, SerializerBackend

logger = logging.getLogger(__name__)


class DocumentParserBackend(ParserBackend):
    """Terminate-on-error parser for Turtle and TriG."""

    FAMILY = BackendFamily.DOCUMENT
    RECOVERS = False

    @property
    def rdflib_format(self) -> str:
        return "trig" if self.supports_quads else "turtle"

    def statements(self, source: Source) -> Iterator[ParseItem]:
        data = read_document(source)
        if not data.strip():
            return

        container: Union[Graph, Dataset] = Dataset() if self.supports_quads else Graph()
        try:
            container.parse(data=data, format=self.rdflib_format, publicID=self.base_iri)
        except MemoryError:
            raise
        except BadSyntax as e:
            logger.warning(f"Rejected {self.tag} document: {e}")
            yield ParseError(self.tag, e.message, e.lines + 1)
            return
        except Exception as e:
            # rdflib's notation3 parser raises several unrelated exception types
            logger.warning(f"Rejected {self.tag} document: {e}")
            yield ParseError(self.tag, str(e))
            return

        statements = list(self._collect(container))
        for statement in statements:
            reason = self.rejection_reason(statement)
            if reason:
                logger.warning(f"Rejected {self.tag} document: {reason}")
                yield ParseError(self.tag, reason)
                return
        logger.debug(f"Parsed {len(statements)} statement(s) from {self.tag} document")
        yield from statements

    def _collect(self, container: Union[Graph, Dataset]) -> Iterator[NativeStatement]:
        if not isinstance(container, Dataset):
            for s, p, o in container:
                yield s, p, o, None
            return
        for graph in container.graphs():
            name: Optional[Node] = graph.identifier
            if name == DATASET_DEFAULT_GRAPH_ID:
                name = None
            for s, p, o in graph:
                yield s, p, o, name


class DocumentSerializerBackend(SerializerBackend):
    """Flat streaming or pretty buffered Turtle/TriG writer."""

    FAMILY = BackendFamily.DOCUMENT

    def start(self) -> None:
        self._open_graph: Optional[Node] = None
        self._buffer: Optional[Union[Graph, Dataset]] = None
        if self.config.pretty_print:
            self._buffer = Dataset() if self.supports_quads else Graph()
            for prefix, namespace in self.config.prefixes.items():
                self._buffer.bind(prefix, URIRef(namespace), override=True, replace=True)

    def add(self, statement: NativeStatement) -> None:
        s, p, o, g = statement
        if self._buffer is not None:
            if isinstance(self._buffer, Dataset) and g is not None:
                self._buffer.add((s, p, o, g))
            else:
                self._buffer.add((s, p, o))
            return

        try:
            row = _nt_row((s, p, o))
            lines: List[str] = []
            if g != self._open_graph:
                if self._open_graph is not None:
                    lines.append("}\n")
                if g is not None:
                    lines.append(f"{g.n3()} {{\n")
                self._open_graph = g
            lines.append(f"    {row}" if g is not None else row)
        except Exception as e:
            # rdflib raises bare Exception for invalid IRIs and literals
            raise SerializeError(self.tag, f"Cannot represent statement: {e}") from e
        self.write("".join(lines))

    def finish(self) -> None:
        if self._buffer is None:
            if self._open_graph is not None:
                self.write("}\n")
                self._open_graph = None
            return
        try:
            text = self._buffer.serialize(format="trig" if self.supports_quads else "turtle")
        except Exception as e:
            raise SerializeError(self.tag, f"rdflib serializer failed: {e}") from e
        self.write(text)
