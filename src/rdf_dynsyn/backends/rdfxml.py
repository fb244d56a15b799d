"""
RDF/XML backend.

Parsing pushes the document through rdflib's SAX ``RDFXMLHandler`` block by
block. The handler adds triples to a sink as elements close, and the sink
is drained after every block, so statements reach the caller before the
rest of the document has been read.

Recovery policy: terminate. Statements completed before a malformed
construct are kept; the stream then ends with one ParseError carrying the
XML line and column. A relative IRI with no base IRI configured, or an
ill-typed literal in strict mode, ends the stream the same way without a
position.

Serialization has two modes:

- flat (default): one ``rdf:Description`` per run of statements sharing a
  subject, streamed as they arrive. Predicate namespaces are declared on
  the property element, so no namespace table is needed up front.
- pretty: statements are collected and written by rdflib's ``pretty-xml``
  serializer, with the configured prefixes bound
"""

import logging
import re
from collections import deque
from typing import Deque, Iterator, Optional, Tuple
from xml.sax import SAXException
from xml.sax.saxutils import escape, quoteattr
from xml.sax.xmlreader import Locator

from rdflib.exceptions import ParserError as RDFLibParserError
from rdflib.graph import Graph
from rdflib.namespace import RDF, is_ncname, split_uri
from rdflib.plugins.parsers.rdfxml import create_parser
from rdflib.plugins.serializers.xmlwriter import ESCAPE_ENTITIES
from rdflib.term import BNode, Literal, Node, URIRef

from ..errors import ParseError, SerializeError
from ..sources import Source, iter_chunks
from ..syntax import BackendFamily
from .base import NativeStatement, ParseItem, ParserBackend, SerializerBackend

logger = logging.getLogger(__name__)

# Complement of the XML 1.0 Char production
_NON_XML_CHAR = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


class _DocumentLocator(Locator):
    """Reports the configured base and the reader's current position."""

    def __init__(self, base: Optional[str]):
        self.base = base
        self.reader = None

    def getPublicId(self):
        return self.base

    def getSystemId(self):
        return self.base

    def getLineNumber(self):
        return self.reader.getLineNumber() if self.reader is not None else -1

    def getColumnNumber(self):
        return self.reader.getColumnNumber() if self.reader is not None else -1


class _TripleSink:
    """Store stand-in for RDFXMLHandler: queues triples, ignores prefixes."""

    def __init__(self):
        self.pending: Deque[Tuple[Node, Node, Node]] = deque()

    def add(self, triple: Tuple[Node, Node, Node]) -> None:
        self.pending.append(triple)

    def bind(self, prefix, namespace, override=True, replace=False) -> None:
        pass


class RDFXMLParserBackend(ParserBackend):
    """Incremental terminate-on-error RDF/XML parser."""

    FAMILY = BackendFamily.RDF_XML
    RECOVERS = False

    def statements(self, source: Source) -> Iterator[ParseItem]:
        sink = _TripleSink()
        locator = _DocumentLocator(self.base_iri)
        reader = create_parser(locator, sink)
        locator.reader = reader

        started = False
        leading = []
        try:
            for chunk in iter_chunks(source):
                if not started:
                    # Nothing is fed until real content arrives, so a blank
                    # document stays an empty stream
                    if not chunk.strip():
                        leading.append(chunk)
                        continue
                    started = True
                    for blank in leading:
                        reader.feed(blank)
                reader.feed(chunk)
                error = yield from self._drain(sink)
                if error:
                    return
            if not started:
                return
            reader.close()
        except SAXException as e:
            logger.warning(f"Rejected {self.tag} document: {e}")
            if (yield from self._drain(sink)):
                return
            yield ParseError(self.tag, e.getMessage(), reader.getLineNumber(), reader.getColumnNumber())
            return
        except (RDFLibParserError, ValueError) as e:
            logger.warning(f"Rejected {self.tag} document: {e}")
            if (yield from self._drain(sink)):
                return
            yield ParseError(self.tag, str(e), reader.getLineNumber(), reader.getColumnNumber())
            return
        yield from self._drain(sink)

    def _drain(self, sink: _TripleSink):
        """Yield queued statements; return True when a rejected statement ended the stream."""
        while sink.pending:
            s, p, o = sink.pending.popleft()
            statement = (s, p, o, None)
            reason = self.rejection_reason(statement)
            if reason:
                sink.pending.clear()
                logger.warning(f"Rejected {self.tag} document: {reason}")
                yield ParseError(self.tag, reason)
                return True
            yield statement
        return False


class RDFXMLSerializerBackend(SerializerBackend):
    """Flat streaming or pretty buffered RDF/XML writer."""

    FAMILY = BackendFamily.RDF_XML

    def start(self) -> None:
        self._subject: Optional[Node] = None
        self._buffer: Optional[Graph] = None
        if self.config.pretty_print:
            self._buffer = Graph()
            for prefix, namespace in self.config.prefixes.items():
                self._buffer.bind(prefix, URIRef(namespace), override=True, replace=True)
            return
        self.write(
            '<?xml version="1.0" encoding="utf-8"?>\n'
            f'<rdf:RDF xmlns:rdf="{RDF}">\n'
        )

    def add(self, statement: NativeStatement) -> None:
        s, p, o, _ = statement
        self._check_xml_chars(s, p, o)
        if self._buffer is not None:
            self._buffer.add((s, p, o))
            return

        parts = []
        if s != self._subject:
            if self._subject is not None:
                parts.append("  </rdf:Description>\n")
            parts.append(f"  <rdf:Description {self._node_attribute(s, 'about')}>\n")
            self._subject = s
        parts.append(self._property_element(p, o))
        self.write("".join(parts))

    def finish(self) -> None:
        if self._buffer is not None:
            try:
                text = self._buffer.serialize(format="pretty-xml")
            except Exception as e:
                raise SerializeError(self.tag, f"rdflib serializer failed: {e}") from e
            self.write(text)
            return
        if self._subject is not None:
            self.write("  </rdf:Description>\n")
        self.write("</rdf:RDF>\n")

    def _check_xml_chars(self, *nodes: Node) -> None:
        for node in nodes:
            texts = [str(node)]
            if isinstance(node, Literal):
                texts += [node.language or "", str(node.datatype or "")]
            for text in texts:
                match = _NON_XML_CHAR.search(text)
                if match:
                    raise SerializeError(
                        self.tag,
                        f"Character U+{ord(match.group()):04X} in {node!r} cannot be written in XML 1.0",
                    )

    def _node_attribute(self, node: Node, iri_attribute: str) -> str:
        if isinstance(node, BNode):
            if not is_ncname(str(node)):
                raise SerializeError(self.tag, f"Blank node label '{node}' is not an XML NCName")
            return f'rdf:nodeID="{node}"'
        if isinstance(node, URIRef):
            return f"rdf:{iri_attribute}={quoteattr(str(node))}"
        raise SerializeError(self.tag, f"{node!r} cannot be used as subject")

    def _property_element(self, predicate: Node, obj: Node) -> str:
        try:
            namespace, local = split_uri(predicate)
        except ValueError as e:
            raise SerializeError(
                self.tag, f"Predicate <{predicate}> cannot be written as an XML element name"
            ) from e
        element = f"p:{local} xmlns:p={quoteattr(namespace)}"

        if isinstance(obj, Literal):
            attributes = ""
            if obj.language:
                attributes += f" xml:lang={quoteattr(obj.language)}"
            if obj.datatype:
                attributes += f" rdf:datatype={quoteattr(str(obj.datatype))}"
            text = escape(str(obj), ESCAPE_ENTITIES)
            return f"    <{element}{attributes}>{text}</p:{local}>\n"
        return f"    <{element} {self._node_attribute(obj, 'resource')}/>\n"
