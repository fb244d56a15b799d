"""
Serializer Factory

Builds a ``UniformSerializer`` (writes to a caller's sink) or a
``UniformStringifier`` (accumulates text in memory) for any supported
syntax tag.

Each serializer is a single serialization session: ``serialize_graph`` or
``serialize_dataset`` may be called once.

Usage:
    from rdf_dynsyn import SerializerFactory, SerializerConfig, SyntaxTag

    factory = SerializerFactory()
    stringifier = factory.try_new_stringifier(
        SyntaxTag.TURTLE,
        SerializerConfig(pretty_print=True, prefixes={"ex": "http://example.org/"}),
    )
    stringifier.serialize_graph(triples)
    text = stringifier.as_string()
"""

import io
import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Type

from rdflib.term import BNode, Literal, URIRef

from .backends import (
    DocumentSerializerBackend,
    LineSerializerBackend,
    NativeStatement,
    RDFXMLSerializerBackend,
    SerializerBackend,
    Writer,
)
from .config import DynSynSettings, SerializerConfig, is_absolute_iri
from .errors import BackendInitError, SerializeError, UnsupportedConfigError, UnsupportedSyntaxError
from .memory import MemoryManager
from .syntax import BackendFamily, SyntaxTag, metadata_of, tag_of
from .terms import RDFLibTermFactory, TermFactory, to_native

logger = logging.getLogger(__name__)

# Characters rdflib refuses to write inside an IRI
_INVALID_IRI_CHARS = frozenset('<>" {}|\\^`')

_SERIALIZER_BACKENDS: Dict[BackendFamily, Type[SerializerBackend]] = {
    BackendFamily.LINES: LineSerializerBackend,
    BackendFamily.DOCUMENT: DocumentSerializerBackend,
    BackendFamily.RDF_XML: RDFXMLSerializerBackend,
}

if set(_SERIALIZER_BACKENDS) != set(BackendFamily):
    raise RuntimeError(
        f"Backend families without a serializer: {sorted(set(BackendFamily) - set(_SERIALIZER_BACKENDS))}"
    )


def _sink_writer(tag: SyntaxTag, sink: Any) -> Writer:
    """
    Wrap a writable sink. Binary sinks receive UTF-8.

    Raises:
        TypeError: If the sink has no ``write`` method.
    """
    if not callable(getattr(sink, "write", None)):
        raise TypeError(f"Serializer sink must be writable, got {type(sink).__name__}")

    if isinstance(sink, io.TextIOBase):
        binary = False
    elif isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        binary = True
    else:
        binary = "b" in getattr(sink, "mode", "")

    def write(text: str) -> None:
        try:
            sink.write(text.encode("utf-8") if binary else text)
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file
            raise SerializeError(tag, f"Could not write to sink: {e}") from e

    return write


class UniformSerializer:
    """
    Uniform serialization interface over one backend.

    Attributes:
        tag: Syntax this serializer writes
        config: Validated configuration
        supports_quads: True when named graphs can be written
    """

    def __init__(
        self,
        tag: SyntaxTag,
        backend: SerializerBackend,
        term_factory: TermFactory,
        config: SerializerConfig,
    ):
        self.tag = tag
        self.config = config
        self._backend = backend
        self._terms = term_factory
        self._used = False
        self.supports_quads = backend.supports_quads

    def serialize_graph(self, triples: Iterable[Any]) -> None:
        """
        Write triples, each consumed once and in order. Quad syntaxes write
        them into the default graph. Default-graph quads are accepted as
        triples.

        Raises:
            SerializeError: On a named-graph quad, an unrepresentable term, a sink write failure
                or a second serialization with this serializer.
        """
        self._start()
        count = 0
        for item in triples:
            s, p, o = self._triple_of(item)
            self._backend.add(self._native(s, p, o, None))
            count += 1
        self._backend.finish()
        logger.info(f"Serialized {count} triple(s) as {self.tag}")

    def serialize_dataset(self, quads: Iterable[Any]) -> None:
        """
        Write quads, each consumed once and in order. Triples are written to
        the default graph. Triple syntaxes accept default-graph quads only.

        Raises:
            SerializeError: On a named-graph quad for a triple syntax, an
                unrepresentable term, a sink write failure or a second
                serialization with this serializer.
        """
        self._start()
        count = 0
        for item in quads:
            s, p, o, g = self._quad_of(item)
            if g is not None and not self.supports_quads:
                raise SerializeError(
                    self.tag,
                    f"{metadata_of(self.tag).display_name} cannot hold named graph {g!r}",
                )
            self._backend.add(self._native(s, p, o, g))
            count += 1
        self._backend.finish()
        logger.info(f"Serialized {count} quad(s) as {self.tag}")

    def _triple_of(self, item: Any) -> Tuple[Any, Any, Any]:
        """Accept a triple, or a quad of the default graph."""
        if isinstance(item, (tuple, list)) and len(item) == 4:
            if item[3] is not None:
                raise SerializeError(
                    self.tag,
                    f"serialize_graph cannot write named graph {item[3]!r}; use serialize_dataset",
                )
            return item[0], item[1], item[2]
        if isinstance(item, (tuple, list)) and len(item) == 3:
            return item[0], item[1], item[2]
        raise SerializeError(self.tag, f"Expected a triple, got {item!r}")

    def _quad_of(self, item: Any) -> Tuple[Any, Any, Any, Any]:
        """Accept a quad, or a triple lifted into the default graph."""
        if isinstance(item, (tuple, list)) and len(item) == 3:
            return item[0], item[1], item[2], None
        if isinstance(item, (tuple, list)) and len(item) == 4:
            return item[0], item[1], item[2], item[3]
        raise SerializeError(self.tag, f"Expected a quad, got {item!r}")

    def _start(self) -> None:
        if self._used:
            raise SerializeError(self.tag, "Serializer has already been used; create a new one")
        self._used = True
        self._backend.start()

    def _native(self, s: Any, p: Any, o: Any, g: Any) -> NativeStatement:
        try:
            subject = to_native(s, self._terms)
            predicate = to_native(p, self._terms)
            obj = to_native(o, self._terms)
            graph = to_native(g, self._terms) if g is not None else None
        except TypeError as e:
            raise SerializeError(self.tag, str(e)) from e

        if not isinstance(subject, (URIRef, BNode)):
            raise SerializeError(self.tag, f"Subject must be an IRI or blank node, got {s!r}")
        if not isinstance(predicate, URIRef):
            raise SerializeError(self.tag, f"Predicate must be an IRI, got {p!r}")
        if graph is not None and isinstance(graph, Literal):
            raise SerializeError(self.tag, f"Graph name must be an IRI or blank node, got {g!r}")
        for node in (subject, predicate, obj, graph):
            if isinstance(node, URIRef) and _INVALID_IRI_CHARS.intersection(node):
                raise SerializeError(self.tag, f"Invalid character in IRI <{node}>")
        return subject, predicate, obj, graph

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!s}, config={self.config!r})"


class UniformStringifier(UniformSerializer):
    """Serializer that accumulates the document in memory."""

    def __init__(
        self,
        tag: SyntaxTag,
        backend: SerializerBackend,
        term_factory: TermFactory,
        config: SerializerConfig,
        buffer: io.StringIO,
    ):
        super().__init__(tag, backend, term_factory, config)
        self._buffer = buffer

    def as_string(self) -> str:
        """Return the text written so far."""
        return self._buffer.getvalue()


class SerializerFactory:
    """
    Builds serializers for syntax tags.

    Args:
        term_factory: Describes the caller's terms. Defaults to rdflib terms.
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

    def try_new_serializer(
        self,
        tag: Any,
        sink: Any,
        config: Optional[SerializerConfig] = None,
    ) -> UniformSerializer:
        """
        Construct a serializer writing to ``sink``.

        Args:
            tag: SyntaxTag or tag name.
            sink: Text or binary writable. It is not closed.
            config: Serializer options. Defaults to the settings for ``tag``.

        Raises:
            UnknownSyntaxError: If ``tag`` is not a syntax tag.
            UnsupportedSyntaxError: If no backend serializes the syntax.
            UnsupportedConfigError: If an option does not apply to the syntax.
            BackendInitError: If the backend cannot be constructed.
        """
        tag, config, backend = self._build(tag, sink, config)
        return UniformSerializer(tag, backend, self.term_factory, config)

    def try_new_stringifier(self, tag: Any, config: Optional[SerializerConfig] = None) -> UniformStringifier:
        """
        Construct a serializer writing to an in-memory string.

        Raises:
            Same errors as ``try_new_serializer``.
        """
        buffer = io.StringIO()
        tag, config, backend = self._build(tag, buffer, config)
        return UniformStringifier(tag, backend, self.term_factory, config, buffer)

    def _build(self, tag: Any, sink: Any, config: Optional[SerializerConfig]):
        tag = tag_of(tag)
        family = metadata_of(tag).backend
        if family is None:
            logger.error(f"No serializer backend for {tag}")
            raise UnsupportedSyntaxError(tag, "serialize")

        if config is None:
            config = self.settings.serializer_config_for(tag)
        validate_serializer_config(tag, config)

        can_proceed, message = MemoryManager.check_headroom(self.settings.memory.min_available_mb)
        if not can_proceed:
            logger.error(f"Cannot construct {tag} serializer: {message}")
            raise BackendInitError(tag, message)

        write = _sink_writer(tag, sink)
        try:
            backend = _SERIALIZER_BACKENDS[family](tag, config, write)
        except Exception as e:
            logger.error(f"Cannot construct {tag} serializer: {e}")
            raise BackendInitError(tag, str(e)) from e

        mode = "pretty" if config.pretty_print else "flat"
        logger.info(f"Created {tag} serializer ({family} backend, {mode})")
        return tag, config, backend


def validate_serializer_config(tag: SyntaxTag, config: SerializerConfig) -> None:
    """
    Reject options that have no meaning for a syntax.

    Raises:
        UnsupportedConfigError: On the first rejected option.
    """
    meta = metadata_of(tag)
    if meta.backend == BackendFamily.LINES:
        if config.pretty_print:
            raise UnsupportedConfigError(
                tag, "pretty_print", f"{meta.display_name} has a single line-based layout"
            )
        if config.prefixes:
            raise UnsupportedConfigError(
                tag, "prefixes", f"{meta.display_name} cannot abbreviate IRIs"
            )
        return

    if config.prefixes and not config.pretty_print:
        raise UnsupportedConfigError(
            tag, "prefixes", "Prefixes are only used when pretty_print is enabled"
        )
    for prefix, namespace in config.prefixes.items():
        if not isinstance(prefix, str):
            raise UnsupportedConfigError(tag, "prefixes", f"Prefix name {prefix!r} is not a string")
        if not is_absolute_iri(namespace):
            raise UnsupportedConfigError(
                tag, "prefixes", f"Namespace '{namespace}' of prefix '{prefix}' is not an absolute IRI"
            )
