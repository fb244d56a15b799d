"""
Line-oriented backend: N-Triples and N-Quads.

Parsing drives rdflib's ``W3CNTriplesParser``/``NQuadsParser`` one physical
line at a time, so memory use is bounded by the longest line.

Recovery policy: skip-and-report. A malformed line yields one ParseError
carrying its line number and parsing continues with the next line.

Serialization streams one row per statement through rdflib's N-Triples and
N-Quads row writers.
"""

import logging
from typing import Dict, Iterator, Optional

from rdflib.exceptions import ParserError as RDFLibParserError
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.plugins.parsers.nquads import NQuadsParser
from rdflib.plugins.parsers.ntriples import W3CNTriplesParser, r_literal, unquote, uriquote
from rdflib.plugins.serializers.nquads import _nq_row
from rdflib.plugins.serializers.nt import _nt_row
from rdflib.term import BNode, Literal, Node, URIRef

from ..errors import ParseError, SerializeError
from ..sources import Source, iter_lines
from ..syntax import BackendFamily
from .base import NativeStatement, ParseItem, ParserBackend, SerializerBackend

logger = logging.getLogger(__name__)


class _LexicalLiterals:
    """Builds literals without normalising their lexical form."""
    __slots__ = ()

    def literal(self):
        if self.peek('"'):
            lit, lang, dtype = self.eat(r_literal).groups()
            if dtype:
                dtype = URIRef(uriquote(unquote(dtype)))
            if lang and dtype:
                raise RDFLibParserError("Can't have both a language and a datatype")
            return Literal(unquote(lit), lang or None, dtype or None, normalize=False)
        return False


class _NTriplesLineParser(_LexicalLiterals, W3CNTriplesParser):
    __slots__ = ()


class _NQuadsLineParser(_LexicalLiterals, NQuadsParser):
    pass


class _GraphTarget:
    def __init__(self, sink: "_LineSink", graph: Optional[Node]):
        self._sink = sink
        self._graph = graph

    def add(self, triple) -> None:
        s, p, o = triple
        self._sink.statement = (s, p, o, self._graph)


class _LineSink:
    """
    Receives the statement of the current line.

    The N-Triples parser calls ``triple``; the N-Quads parser adds to
    ``get_context(name)`` or ``default_context``.
    """

    def __init__(self):
        self.statement: Optional[NativeStatement] = None
        self.default_context = _GraphTarget(self, None)

    def triple(self, s, p, o) -> None:
        self.statement = (s, p, o, None)

    def get_context(self, identifier: Node) -> _GraphTarget:
        return _GraphTarget(self, identifier)


class LineParserBackend(ParserBackend):
    """Skip-and-report parser for N-Triples and N-Quads."""

    FAMILY = BackendFamily.LINES
    RECOVERS = True

    def statements(self, source: Source) -> Iterator[ParseItem]:
        sink = _LineSink()
        native_type = _NQuadsLineParser if self.supports_quads else _NTriplesLineParser
        native = native_type(sink=sink)
        # Blank node labels are scoped to one document
        bnode_context: Dict[str, BNode] = {}
        errors = 0

        for number, raw in enumerate(iter_lines(source), start=1):
            try:
                line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            except UnicodeDecodeError as e:
                errors += 1
                yield ParseError(self.tag, f"Invalid UTF-8: {e.reason}", number, e.start)
                continue

            sink.statement = None
            native.line = line
            try:
                native.parseline(bnode_context=bnode_context)
            except (RDFLibParserError, ValueError) as e:
                errors += 1
                column = len(line) - len(native.line or "")
                logger.warning(f"Skipping malformed {self.tag} line {number}: {e}")
                yield ParseError(self.tag, str(e), number, column)
                continue

            if sink.statement is None:
                continue  # blank line or comment
            reason = self.ill_typed_reason(sink.statement)
            if reason:
                errors += 1
                logger.warning(f"Skipping {self.tag} line {number}: {reason}")
                yield ParseError(self.tag, reason, number)
                continue
            yield sink.statement

        if errors:
            logger.info(f"Finished {self.tag} document with {errors} malformed line(s)")


class LineSerializerBackend(SerializerBackend):
    """Streams one N-Triples or N-Quads row per statement."""

    FAMILY = BackendFamily.LINES

    def add(self, statement: NativeStatement) -> None:
        s, p, o, g = statement
        try:
            if self.supports_quads:
                row = _nq_row((s, p, o), g if g is not None else DATASET_DEFAULT_GRAPH_ID)
            else:
                row = _nt_row((s, p, o))
        except Exception as e:
            # rdflib raises bare Exception for invalid IRIs and literals
            raise SerializeError(self.tag, f"Cannot represent statement: {e}") from e
        self.write(row)
