"""
Parser Factory

Builds a ``UniformParser`` for any supported syntax tag. Callers resolve a
media type or file extension to a tag, ask the factory for a parser and
consume one lazy stream of statements, whatever rdflib implementation
sits behind it.

Usage:
    from rdf_dynsyn import ParserFactory, ParserConfig, resolve

    factory = ParserFactory()
    tag = resolve("text/turtle").value
    with factory.try_new_parser(tag, ParserConfig(base_iri="http://example.org/")) as parser:
        for item in parser.parse(data):
            if isinstance(item, ParseError):
                ...
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Type, Union

from rdflib.term import URIRef

from .backends import (
    DocumentParserBackend,
    LineParserBackend,
    ParserBackend,
    RDFXMLParserBackend,
)
from .config import DynSynSettings, MemorySettings, ParserConfig, is_absolute_iri
from .errors import BackendInitError, ParseError, UnsupportedConfigError, UnsupportedSyntaxError
from .memory import MemoryManager
from .sources import Source
from .syntax import BackendFamily, SyntaxTag, metadata_of, tag_of
from .terms import Quad, RDFLibTermFactory, TermFactory, Triple, from_native

logger = logging.getLogger(__name__)

ParseResult = Union[Triple, Quad, ParseError]

_PARSER_BACKENDS: Dict[BackendFamily, Type[ParserBackend]] = {
    BackendFamily.LINES: LineParserBackend,
    BackendFamily.DOCUMENT: DocumentParserBackend,
    BackendFamily.RDF_XML: RDFXMLParserBackend,
}

if set(_PARSER_BACKENDS) != set(BackendFamily):
    raise RuntimeError(
        f"Backend families without a parser: {sorted(set(BackendFamily) - set(_PARSER_BACKENDS))}"
    )


def raise_on_error(results: Iterable[ParseResult]) -> Iterator[Union[Triple, Quad]]:
    """
    Pass statements through and raise the first ParseError.

    Example:
        >>> triples = list(raise_on_error(parser.parse(data)))
    """
    for item in results:
        if isinstance(item, ParseError):
            raise item
        yield item


class UniformParser:
    """
    Uniform parsing interface over one backend.

    Attributes:
        tag: Syntax this parser reads
        config: Validated configuration
        supports_quads: True when ``parse`` yields ``Quad`` items
        recovers: True when parsing continues after a malformed statement
    """

    def __init__(
        self,
        tag: SyntaxTag,
        backend: ParserBackend,
        term_factory: TermFactory,
        config: ParserConfig,
        memory: Optional[MemorySettings] = None,
    ):
        self.tag = tag
        self.config = config
        self._backend = backend
        self._terms = term_factory
        self._memory = memory or MemorySettings()
        self._closed = False
        self.supports_quads = backend.supports_quads
        self.recovers = backend.RECOVERS

        self._default_graph: Optional[URIRef] = None
        if self.supports_quads and config.default_graph_name:
            self._default_graph = URIRef(config.default_graph_name)

    def parse(self, source: Source) -> Iterator[ParseResult]:
        """
        Parse a document lazily.

        Args:
            source: ``str``, ``bytes``, a text or binary file object, or an
                iterable of ``str``/``bytes`` chunks.

        Returns:
            Iterator of ``Quad`` (quad syntaxes) or ``Triple`` items, with
            ``ParseError`` items inline where the document is malformed.

        Raises:
            TypeError: If the source type is not supported.
            ValueError: If the parser has been closed.
        """
        self._check_open()
        if not isinstance(source, (str, bytes, bytearray, Iterable)) and not hasattr(source, "read"):
            raise TypeError(f"Unsupported parser source: {type(source).__name__}")
        return self._translate(self._backend.statements(source))

    def parse_triples(self, source: Source, graph_name: Optional[str] = None) -> Iterator[Union[Triple, ParseError]]:
        """
        Parse a document as triples.

        For quad syntaxes only the statements of ``graph_name`` (None for the
        default graph) are kept. For triple syntaxes every triple is kept.
        """
        items = self.parse(source)
        if not self.supports_quads:
            return items
        wanted = self._graph_term(graph_name)
        return (
            item if isinstance(item, ParseError) else item.triple
            for item in items
            if isinstance(item, ParseError) or item.graph == wanted
        )

    def parse_quads(self, source: Source, graph_name: Optional[str] = None) -> Iterator[Union[Quad, ParseError]]:
        """
        Parse a document as quads.

        Triples of triple syntaxes are placed in ``graph_name`` (None for the
        default graph). Quad syntaxes are passed through unchanged.
        """
        items = self.parse(source)
        if self.supports_quads:
            return items
        graph = self._graph_term(graph_name)
        return (
            item if isinstance(item, ParseError) else Quad(*item, graph)
            for item in items
        )

    def parse_path(self, path: Union[str, Path]) -> Iterator[ParseResult]:
        """
        Parse a file. The file is closed when the iterator is exhausted or
        closed.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        self._check_open()
        path = Path(path)
        size_mb = path.stat().st_size / (1024 * 1024)
        if size_mb > self._memory.large_document_mb:
            logger.warning(f"Large {self.tag} document: {path} ({size_mb:.1f}MB)")
            fits, message = MemoryManager.check_document(size_mb)
            if not fits:
                logger.warning(message)
        MemoryManager.log_memory_status(f"parse {path.name}")
        return self._parse_file(path)

    def close(self) -> None:
        """Release backend state. Further parse calls raise ValueError."""
        if not self._closed:
            self._backend.close()
            self._closed = True

    def __enter__(self) -> "UniformParser":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"UniformParser(tag={self.tag!s}, config={self.config!r})"

    def _parse_file(self, path: Path) -> Iterator[ParseResult]:
        with open(path, "rb") as f:
            yield from self.parse(f)

    def _translate(self, items: Iterator[Any]) -> Iterator[ParseResult]:
        count = 0
        errors = 0
        for item in items:
            if isinstance(item, ParseError):
                errors += 1
                yield item
                continue
            s, p, o, g = item
            count += 1
            terms = (
                from_native(s, self._terms),
                from_native(p, self._terms),
                from_native(o, self._terms),
            )
            if self.supports_quads:
                if g is None:
                    g = self._default_graph
                yield Quad(*terms, from_native(g, self._terms) if g is not None else None)
            else:
                yield Triple(*terms)
        logger.debug(f"Parsed {self.tag} document: {count} statement(s), {errors} error(s)")

    def _graph_term(self, graph_name: Optional[str]) -> Any:
        if graph_name is None:
            return None
        return from_native(URIRef(graph_name), self._terms)

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"{self.tag} parser is closed")


class ParserFactory:
    """
    Builds parsers for syntax tags.

    Args:
        term_factory: Builds the caller's terms. Defaults to rdflib terms.
        settings: Per-syntax default configs and memory limits.
    """

    def __init__(
        self,
        term_factory: Optional[TermFactory] = None,
        settings: Optional[DynSynSettings] = None,
    ):
        self.term_factory = term_factory if term_factory is not None else RDFLibTermFactory()
        if not isinstance(self.term_factory, TermFactory):
            raise TypeError(f"{type(self.term_factory).__name__} does not implement TermFactory")
        self.settings = settings or DynSynSettings()

    def try_new_parser(self, tag: Any, config: Optional[ParserConfig] = None) -> UniformParser:
        """
        Construct a parser.

        Args:
            tag: SyntaxTag or tag name.
            config: Parser options. Defaults to the settings for ``tag``.

        Raises:
            UnknownSyntaxError: If ``tag`` is not a syntax tag.
            UnsupportedSyntaxError: If no backend parses the syntax.
            UnsupportedConfigError: If an option does not apply to the syntax.
            BackendInitError: If the backend cannot be constructed.
        """
        tag = tag_of(tag)
        family = metadata_of(tag).backend
        if family is None:
            logger.error(f"No parser backend for {tag}")
            raise UnsupportedSyntaxError(tag, "parse")

        if config is None:
            config = self.settings.parser_config_for(tag)
        validate_parser_config(tag, config)

        can_proceed, message = MemoryManager.check_headroom(self.settings.memory.min_available_mb)
        if not can_proceed:
            logger.error(f"Cannot construct {tag} parser: {message}")
            raise BackendInitError(tag, message)

        try:
            backend = _PARSER_BACKENDS[family](tag, config)
        except Exception as e:
            logger.error(f"Cannot construct {tag} parser: {e}")
            raise BackendInitError(tag, str(e)) from e

        logger.info(f"Created {tag} parser ({family} backend)")
        return UniformParser(tag, backend, self.term_factory, config, self.settings.memory)


def validate_parser_config(tag: SyntaxTag, config: ParserConfig) -> None:
    """
    Reject options that have no meaning for a syntax.

    Raises:
        UnsupportedConfigError: On the first rejected option.
    """
    meta = metadata_of(tag)
    if config.base_iri is not None:
        if meta.backend == BackendFamily.LINES:
            raise UnsupportedConfigError(
                tag, "base_iri", f"{meta.display_name} documents only contain absolute IRIs"
            )
        if not is_absolute_iri(config.base_iri):
            raise UnsupportedConfigError(tag, "base_iri", f"'{config.base_iri}' is not an absolute IRI")
    if config.default_graph_name is not None:
        if not meta.supports_quads:
            raise UnsupportedConfigError(
                tag, "default_graph_name", f"{meta.display_name} has no named graphs"
            )
        if not is_absolute_iri(config.default_graph_name):
            raise UnsupportedConfigError(
                tag, "default_graph_name", f"'{config.default_graph_name}' is not an absolute IRI"
            )
