"""
Unit tests for the parser factory and uniform parsers.

Covers construction errors, every supported syntax, the per-syntax recovery
policies, strict mode and the triple/quad views.

Run with: python -m pytest tests/test_parser.py -v
"""

import io
import logging
from types import SimpleNamespace

import psutil
import pytest
from rdflib import RDF, XSD, Graph
from rdflib.compare import isomorphic
from rdflib.term import BNode, Literal, URIRef

from rdf_dynsyn.config import DynSynSettings, MemorySettings, ParserConfig
from rdf_dynsyn.errors import (
    BackendInitError,
    ParseError,
    UnknownSyntaxError,
    UnsupportedConfigError,
    UnsupportedSyntaxError,
)
from rdf_dynsyn.parser import ParserFactory, UniformParser, raise_on_error
from rdf_dynsyn.syntax import SyntaxTag, supported_syntaxes
from rdf_dynsyn.terms import IRI, BlankNode, PlainLiteral, PlainTermFactory, Quad, Triple

BASE_IRI = "http://localhost/ex"
G1_IRI = "http://localhost/ex#g1"
G2_IRI = "http://localhost/ex#g2"
NS = "http://example.org/ns/"

GOOD_NT_LINES = [
    '<http://example.org/a> <http://example.org/p> "1" .',
    '<http://example.org/b> <http://example.org/p> "2" .',
    '<http://example.org/c> <http://example.org/p> "3" .',
]

ILL_TYPED = '"abc"^^<http://www.w3.org/2001/XMLSchema#integer>'


def _graph(triples) -> Graph:
    graph = Graph()
    for triple in triples:
        graph.add(tuple(triple))
    return graph


@pytest.fixture
def parsers():
    return ParserFactory()


# =============================================================================
# Construction
# =============================================================================

@pytest.mark.unit
class TestParserConstruction:
    """try_new_parser error taxonomy."""

    def test_accepts_tag_name(self, parsers):
        parser = parsers.try_new_parser("turtle")
        assert isinstance(parser, UniformParser)
        assert parser.tag is SyntaxTag.TURTLE

    def test_identifier_is_not_a_tag(self, parsers):
        with pytest.raises(UnknownSyntaxError):
            parsers.try_new_parser("text/turtle")

    @pytest.mark.parametrize("tag", [
        SyntaxTag.N3,
        SyntaxTag.JSON_LD,
        SyntaxTag.HTML_RDFA,
        SyntaxTag.XHTML_RDFA,
        SyntaxTag.OWL2_XML,
        SyntaxTag.OWL2_MANCHESTER,
    ])
    def test_unsupported_syntax(self, parsers, tag):
        with pytest.raises(UnsupportedSyntaxError) as exc_info:
            parsers.try_new_parser(tag)
        assert exc_info.value.tag is tag
        assert isinstance(exc_info.value, UnknownSyntaxError)

    @pytest.mark.parametrize("tag", [SyntaxTag.N_TRIPLES, SyntaxTag.N_QUADS])
    def test_base_iri_rejected_for_line_syntaxes(self, parsers, tag):
        with pytest.raises(UnsupportedConfigError) as exc_info:
            parsers.try_new_parser(tag, ParserConfig(base_iri=BASE_IRI))
        assert exc_info.value.option == "base_iri"

    @pytest.mark.parametrize("tag", [SyntaxTag.TURTLE, SyntaxTag.N_TRIPLES, SyntaxTag.RDF_XML])
    def test_default_graph_name_rejected_for_triple_syntaxes(self, parsers, tag):
        with pytest.raises(UnsupportedConfigError) as exc_info:
            parsers.try_new_parser(tag, ParserConfig(default_graph_name=G1_IRI))
        assert exc_info.value.option == "default_graph_name"

    def test_relative_base_iri_rejected(self, parsers):
        with pytest.raises(UnsupportedConfigError, match="absolute"):
            parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(base_iri="#me"))

    def test_relative_default_graph_name_rejected(self, parsers):
        with pytest.raises(UnsupportedConfigError, match="absolute"):
            parsers.try_new_parser(SyntaxTag.TRIG, ParserConfig(default_graph_name="g1"))

    @pytest.mark.parametrize("tag,config", [
        (SyntaxTag.TURTLE, ParserConfig(base_iri=BASE_IRI, strict=True)),
        (SyntaxTag.TRIG, ParserConfig(base_iri=BASE_IRI, default_graph_name=G1_IRI)),
        (SyntaxTag.N_QUADS, ParserConfig(default_graph_name=G1_IRI)),
        (SyntaxTag.RDF_XML, ParserConfig(base_iri=BASE_IRI)),
        (SyntaxTag.N_TRIPLES, ParserConfig(strict=True)),
    ])
    def test_valid_configs(self, parsers, tag, config):
        assert parsers.try_new_parser(tag, config).config == config

    def test_settings_supply_default_config(self):
        settings = DynSynSettings(parsers={SyntaxTag.TURTLE: ParserConfig(base_iri=BASE_IRI)})
        parser = ParserFactory(settings=settings).try_new_parser(SyntaxTag.TURTLE)
        assert parser.config.base_iri == BASE_IRI

    def test_invalid_settings_config_rejected(self):
        settings = DynSynSettings(parsers={SyntaxTag.N_TRIPLES: ParserConfig(base_iri=BASE_IRI)})
        with pytest.raises(UnsupportedConfigError):
            ParserFactory(settings=settings).try_new_parser(SyntaxTag.N_TRIPLES)

    def test_memory_headroom(self, monkeypatch):
        monkeypatch.setattr(psutil, "virtual_memory", lambda: SimpleNamespace(available=0))
        settings = DynSynSettings(memory=MemorySettings(min_available_mb=64))
        with pytest.raises(BackendInitError, match="Insufficient free memory"):
            ParserFactory(settings=settings).try_new_parser(SyntaxTag.TURTLE)

    def test_term_factory_must_implement_capability(self):
        with pytest.raises(TypeError):
            ParserFactory(term_factory=object())

    def test_recovery_policy_is_exposed(self, parsers):
        assert parsers.try_new_parser(SyntaxTag.N_TRIPLES).recovers
        assert parsers.try_new_parser(SyntaxTag.N_QUADS).recovers
        assert not parsers.try_new_parser(SyntaxTag.TURTLE).recovers
        assert not parsers.try_new_parser(SyntaxTag.TRIG).recovers
        assert not parsers.try_new_parser(SyntaxTag.RDF_XML).recovers


# =============================================================================
# Parsing valid documents
# =============================================================================

@pytest.mark.unit
class TestParseDocuments:
    """Each supported syntax parses the shared test graph."""

    @pytest.mark.parametrize("tag", supported_syntaxes())
    @pytest.mark.parametrize("document", ["", b"", "  \n\t\n  "])
    def test_empty_document(self, parsers, tag, document):
        assert list(parsers.try_new_parser(tag).parse(document)) == []

    def test_turtle(self, parsers, turtle_doc):
        parser = parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(base_iri=BASE_IRI))
        items = list(parser.parse(turtle_doc))
        assert len(items) == 3
        assert all(type(item) is Triple for item in items)
        knows = [t for t in items if t.predicate == URIRef(NS + "knows")]
        assert knows[0].subject == URIRef(BASE_IRI + "#me")
        assert isinstance(knows[0].object, BNode)

    def test_ntriples(self, parsers, ntriples_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(ntriples_doc))
        assert len(items) == 3
        assert all(type(item) is Triple for item in items)
        # _:b1 is the same node on every line
        assert items[0].object == items[1].subject == items[2].subject
        assert items[2].object == Literal("Alice")

    def test_rdfxml(self, parsers, rdfxml_doc):
        items = list(parsers.try_new_parser(SyntaxTag.RDF_XML).parse(rdfxml_doc))
        assert len(items) == 3
        assert all(type(item) is Triple for item in items)
        assert any(t.predicate == RDF.type and t.object == URIRef(NS + "Person") for t in items)

    def test_same_graph_in_every_triple_syntax(self, parsers, turtle_doc, ntriples_doc, rdfxml_doc):
        turtle = parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(base_iri=BASE_IRI)).parse(turtle_doc)
        ntriples = parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(ntriples_doc)
        rdfxml = parsers.try_new_parser(SyntaxTag.RDF_XML).parse(rdfxml_doc)
        reference = _graph(turtle)
        assert isomorphic(reference, _graph(ntriples))
        assert isomorphic(reference, _graph(rdfxml))

    def test_trig(self, parsers, trig_doc):
        parser = parsers.try_new_parser(SyntaxTag.TRIG, ParserConfig(base_iri=BASE_IRI))
        items = list(parser.parse(trig_doc))
        assert len(items) == 3
        assert all(type(item) is Quad for item in items)
        graphs = sorted(str(q.graph) for q in items)
        assert graphs == [G1_IRI, G2_IRI, G2_IRI]

    def test_nquads(self, parsers, nquads_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_QUADS).parse(nquads_doc))
        assert [q.graph for q in items] == [None, URIRef("tag:g1"), URIRef("tag:g1")]
        assert all(type(item) is Quad for item in items)

    def test_trig_default_graph(self, parsers):
        doc = '<http://example.org/a> <http://example.org/p> <http://example.org/b> .'
        items = list(parsers.try_new_parser(SyntaxTag.TRIG).parse(doc))
        assert items == [Quad(
            URIRef("http://example.org/a"), URIRef("http://example.org/p"), URIRef("http://example.org/b"), None,
        )]

    @pytest.mark.parametrize("tag", [SyntaxTag.TRIG, SyntaxTag.N_QUADS])
    def test_default_graph_name(self, parsers, tag):
        doc = '<http://example.org/a> <http://example.org/p> <http://example.org/b> .\n'
        parser = parsers.try_new_parser(tag, ParserConfig(default_graph_name=G1_IRI))
        items = list(parser.parse(doc))
        assert len(items) == 1
        assert items[0].graph == URIRef(G1_IRI)

    def test_relative_iri_in_ntriples_is_an_error(self, parsers):
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse("<me> <p> <o> .\n"))
        assert len(items) == 1
        assert isinstance(items[0], ParseError)

    @pytest.mark.parametrize("tag", [SyntaxTag.TURTLE, SyntaxTag.TRIG])
    def test_relative_iri_without_base(self, parsers, tag, tmp_path, monkeypatch):
        doc = "<a> <http://example.org/p> <http://example.org/o> .\n"
        monkeypatch.chdir(tmp_path)
        items = list(parsers.try_new_parser(tag).parse(doc))
        assert len(items) == 1
        assert isinstance(items[0], ParseError)
        assert "Relative IRI <a>" in items[0].reason

    def test_relative_iri_without_base_in_rdfxml(self, parsers):
        doc = (
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns:ex="http://example.org/">'
            '<rdf:Description rdf:about="http://example.org/a"><ex:p>1</ex:p></rdf:Description>'
            '<rdf:Description rdf:about="a"><ex:p>2</ex:p></rdf:Description>'
            '</rdf:RDF>'
        )
        items = list(parsers.try_new_parser(SyntaxTag.RDF_XML).parse(doc))
        assert [type(item) for item in items] == [Triple, ParseError]
        assert "Relative IRI <a>" in items[1].reason

    def test_relative_iri_resolves_the_same_in_turtle_and_rdfxml(self, parsers):
        turtle = "<a> <http://example.org/p> <http://example.org/o> .\n"
        rdfxml = (
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns:ex="http://example.org/">'
            '<rdf:Description rdf:about="a"><ex:p rdf:resource="http://example.org/o"/></rdf:Description>'
            '</rdf:RDF>'
        )
        config = ParserConfig(base_iri=BASE_IRI)
        from_turtle = list(raise_on_error(parsers.try_new_parser(SyntaxTag.TURTLE, config).parse(turtle)))
        from_rdfxml = list(raise_on_error(parsers.try_new_parser(SyntaxTag.RDF_XML, config).parse(rdfxml)))
        assert from_turtle == from_rdfxml
        assert from_turtle[0].subject == URIRef("http://localhost/a")


@pytest.mark.unit
class TestSources:
    """Every source kind reaches the backends."""

    def test_bytes(self, parsers, ntriples_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(ntriples_doc.encode("utf-8")))
        assert len(items) == 3

    def test_text_file(self, parsers, turtle_doc):
        parser = parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(base_iri=BASE_IRI))
        assert len(list(parser.parse(io.StringIO(turtle_doc)))) == 3

    def test_binary_file(self, parsers, rdfxml_doc):
        parser = parsers.try_new_parser(SyntaxTag.RDF_XML)
        assert len(list(parser.parse(io.BytesIO(rdfxml_doc.encode("utf-8"))))) == 3

    def test_iterable_of_lines(self, parsers):
        lines = [line + "\n" for line in GOOD_NT_LINES]
        assert len(list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(lines))) == 3

    def test_rdfxml_in_small_chunks(self, parsers, rdfxml_doc):
        chunks = [rdfxml_doc[i:i + 7] for i in range(0, len(rdfxml_doc), 7)]
        assert len(list(parsers.try_new_parser(SyntaxTag.RDF_XML).parse(chunks))) == 3

    def test_unsupported_source(self, parsers):
        with pytest.raises(TypeError):
            parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(42)

    def test_parsing_is_lazy(self, parsers):
        def source():
            yield GOOD_NT_LINES[0] + "\n"
            raise RuntimeError("read past the first statement")

        items = parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(source())
        assert type(next(items)) is Triple
        with pytest.raises(RuntimeError):
            next(items)

    def test_rdfxml_statements_arrive_before_document_end(self, parsers):
        def source():
            yield (
                '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" '
                'xmlns:ex="http://example.org/">'
                '<rdf:Description rdf:about="http://example.org/a"><ex:p>1</ex:p></rdf:Description>'
            )
            raise RuntimeError("document not finished")

        items = parsers.try_new_parser(SyntaxTag.RDF_XML).parse(source())
        assert next(items).object == Literal("1")
        with pytest.raises(RuntimeError):
            next(items)


# =============================================================================
# Recovery policies
# =============================================================================

@pytest.mark.unit
class TestRecoveryPolicies:
    """Skip-and-report for line syntaxes, terminate for the others."""

    def test_ntriples_skips_bad_line(self, parsers):
        doc = "\n".join(["this is not ntriples"] + GOOD_NT_LINES) + "\n"
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(doc))
        assert len(items) == 4
        assert isinstance(items[0], ParseError)
        assert items[0].line == 1
        assert [str(t.object) for t in items[1:]] == ["1", "2", "3"]

    def test_ntriples_reports_line_of_error(self, parsers, caplog):
        doc = "\n".join([GOOD_NT_LINES[0], "<http://example.org/x> <http://example.org/p> .", GOOD_NT_LINES[1]])
        with caplog.at_level(logging.WARNING, logger="rdf_dynsyn.backends.lines"):
            items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(doc))
        assert [type(item) for item in items] == [Triple, ParseError, Triple]
        assert items[1].line == 2
        assert items[1].tag is SyntaxTag.N_TRIPLES
        assert "line 2" in str(items[1])
        assert any("line 2" in r.getMessage() for r in caplog.records)

    def test_nquads_skips_bad_line(self, parsers):
        doc = "garbage <tag:g1> .\n" + "\n".join(line[:-1] + "<tag:g1> ." for line in GOOD_NT_LINES)
        items = list(parsers.try_new_parser(SyntaxTag.N_QUADS).parse(doc))
        assert isinstance(items[0], ParseError)
        assert [q.graph for q in items[1:]] == [URIRef("tag:g1")] * 3

    def test_invalid_utf8_line(self, parsers):
        doc = b'<http://example.org/a> <http://example.org/p> "\xff" .\n' + GOOD_NT_LINES[0].encode() + b"\n"
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(doc))
        assert isinstance(items[0], ParseError)
        assert type(items[1]) is Triple

    @pytest.mark.parametrize("tag", [SyntaxTag.TURTLE, SyntaxTag.TRIG])
    def test_document_syntaxes_terminate(self, parsers, tag):
        doc = (
            "@prefix ex: <http://example.org/> .\n"
            "ex:a ex:p .\n"
            "ex:b ex:p ex:c .\n"
            "ex:d ex:p ex:e .\n"
        )
        items = list(parsers.try_new_parser(tag).parse(doc))
        assert len(items) == 1
        assert isinstance(items[0], ParseError)
        assert items[0].line is not None

    def test_rdfxml_keeps_statements_before_error(self, parsers):
        doc = (
            '<?xml version="1.0"?>\n'
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns:ex="http://example.org/">\n'
            '  <rdf:Description rdf:about="http://example.org/a"><ex:p>1</ex:p></rdf:Description>\n'
            '  <rdf:Description rdf:about="http://example.org/b"><ex:p>2</ex:q></rdf:Description>\n'
            '  <rdf:Description rdf:about="http://example.org/c"><ex:p>3</ex:p></rdf:Description>\n'
            '</rdf:RDF>\n'
        )
        items = list(parsers.try_new_parser(SyntaxTag.RDF_XML).parse(doc))
        assert [type(item) for item in items] == [Triple, ParseError]
        assert items[0].subject == URIRef("http://example.org/a")
        assert items[1].line == 4

    def test_rdfxml_truncated_document(self, parsers):
        doc = '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
        items = list(parsers.try_new_parser(SyntaxTag.RDF_XML).parse(doc))
        assert len(items) == 1
        assert isinstance(items[0], ParseError)

    def test_raise_on_error(self, parsers):
        parser = parsers.try_new_parser(SyntaxTag.N_TRIPLES)
        assert len(list(raise_on_error(parser.parse("\n".join(GOOD_NT_LINES))))) == 3
        with pytest.raises(ParseError):
            list(raise_on_error(parser.parse("nonsense\n")))


# =============================================================================
# Strict mode
# =============================================================================

@pytest.mark.unit
class TestStrictMode:
    """Ill-typed literals are rejected only in strict mode."""

    def test_ntriples_tolerant_keeps_lexical_form(self, parsers):
        doc = f"<http://example.org/a> <http://example.org/p> {ILL_TYPED} .\n"
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse(doc))
        assert str(items[0].object) == "abc"
        assert items[0].object.datatype == XSD.integer

    def test_ntriples_strict_skips_statement(self, parsers):
        doc = "\n".join([
            GOOD_NT_LINES[0],
            f"<http://example.org/a> <http://example.org/p> {ILL_TYPED} .",
            GOOD_NT_LINES[1],
        ])
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES, ParserConfig(strict=True)).parse(doc))
        assert [type(item) for item in items] == [Triple, ParseError, Triple]
        assert items[1].line == 2

    def test_well_typed_literal_passes_strict(self, parsers):
        doc = '<http://example.org/a> <http://example.org/p> "42"^^<http://www.w3.org/2001/XMLSchema#integer> .\n'
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES, ParserConfig(strict=True)).parse(doc))
        assert type(items[0]) is Triple

    def test_turtle_strict_rejects_document(self, parsers):
        doc = f"<http://example.org/a> <http://example.org/p> {ILL_TYPED}, 1 .\n"
        tolerant = list(parsers.try_new_parser(SyntaxTag.TURTLE).parse(doc))
        strict = list(parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(strict=True)).parse(doc))
        assert len(tolerant) == 2
        assert len(strict) == 1
        assert isinstance(strict[0], ParseError)

    def test_rdfxml_strict_terminates(self, parsers):
        doc = (
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns:ex="http://example.org/">'
            '<rdf:Description rdf:about="http://example.org/a"><ex:p>ok</ex:p></rdf:Description>'
            '<rdf:Description rdf:about="http://example.org/b">'
            '<ex:p rdf:datatype="http://www.w3.org/2001/XMLSchema#integer">abc</ex:p>'
            '<ex:q>after</ex:q>'
            '</rdf:Description>'
            '</rdf:RDF>'
        )
        items = list(parsers.try_new_parser(SyntaxTag.RDF_XML, ParserConfig(strict=True)).parse(doc))
        assert [type(item) for item in items] == [Triple, ParseError]


# =============================================================================
# Views and term factories
# =============================================================================

@pytest.mark.unit
class TestViews:
    """parse_triples and parse_quads."""

    def test_triples_of_default_graph(self, parsers, nquads_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_QUADS).parse_triples(nquads_doc))
        assert len(items) == 1
        assert type(items[0]) is Triple

    def test_triples_of_named_graph(self, parsers, nquads_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_QUADS).parse_triples(nquads_doc, "tag:g1"))
        assert len(items) == 2
        assert all(type(item) is Triple for item in items)

    def test_triples_of_triple_syntax(self, parsers, ntriples_doc):
        assert len(list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse_triples(ntriples_doc))) == 3

    def test_quads_lifted_into_graph(self, parsers, ntriples_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse_quads(ntriples_doc, G1_IRI))
        assert len(items) == 3
        assert all(type(q) is Quad and q.graph == URIRef(G1_IRI) for q in items)

    def test_quads_in_default_graph(self, parsers, ntriples_doc):
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse_quads(ntriples_doc))
        assert {q.graph for q in items} == {None}

    def test_quads_of_quad_syntax(self, parsers, nquads_doc):
        assert len(list(parsers.try_new_parser(SyntaxTag.N_QUADS).parse_quads(nquads_doc))) == 3

    def test_errors_pass_through_views(self, parsers):
        doc = "oops\n" + GOOD_NT_LINES[0] + "\n"
        items = list(parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse_quads(doc))
        assert isinstance(items[0], ParseError)
        assert type(items[1]) is Quad


@pytest.mark.unit
class TestPlainTerms:
    """Parsing into a caller-supplied term type."""

    def test_plain_terms(self, ntriples_doc):
        parser = ParserFactory(term_factory=PlainTermFactory()).try_new_parser(SyntaxTag.N_TRIPLES)
        first, second, third = parser.parse(ntriples_doc)
        assert first.subject == IRI(BASE_IRI + "#me")
        assert isinstance(first.object, BlankNode)
        assert first.object == second.subject == third.subject
        assert third.object == PlainLiteral("Alice")

    def test_lexical_form_preserved(self):
        parser = ParserFactory(term_factory=PlainTermFactory()).try_new_parser(SyntaxTag.N_TRIPLES)
        doc = '<http://example.org/a> <http://example.org/p> "007"^^<http://www.w3.org/2001/XMLSchema#integer> .'
        (triple,) = parser.parse(doc)
        assert triple.object == PlainLiteral("007", str(XSD.integer))

    def test_language_tag_preserved(self):
        parser = ParserFactory(term_factory=PlainTermFactory()).try_new_parser(SyntaxTag.N_QUADS)
        doc = '<http://example.org/a> <http://example.org/p> "chat"@fr <http://example.org/g> .'
        (quad,) = parser.parse(doc)
        assert quad.object == PlainLiteral("chat", None, "fr")
        assert quad.graph == IRI("http://example.org/g")


# =============================================================================
# Files and lifecycle
# =============================================================================

@pytest.mark.unit
class TestParsePath:
    """Parsing files from disk."""

    def test_parse_path(self, parsers, tmp_path, turtle_doc):
        path = tmp_path / "graph.ttl"
        path.write_text(turtle_doc, encoding="utf-8")
        parser = parsers.try_new_parser(SyntaxTag.TURTLE, ParserConfig(base_iri=BASE_IRI))
        assert len(list(parser.parse_path(path))) == 3

    def test_missing_file(self, parsers, tmp_path):
        with pytest.raises(FileNotFoundError):
            parsers.try_new_parser(SyntaxTag.TURTLE).parse_path(tmp_path / "absent.ttl")

    def test_closing_iterator_early(self, parsers, tmp_path):
        path = tmp_path / "graph.nt"
        path.write_text("\n".join(GOOD_NT_LINES), encoding="utf-8")
        items = parsers.try_new_parser(SyntaxTag.N_TRIPLES).parse_path(path)
        assert type(next(items)) is Triple
        items.close()
        with pytest.raises(StopIteration):
            next(items)

    def test_large_file_is_logged(self, tmp_path, caplog):
        path = tmp_path / "graph.nt"
        path.write_text("\n".join(GOOD_NT_LINES), encoding="utf-8")
        settings = DynSynSettings(memory=MemorySettings(large_document_mb=0))
        parser = ParserFactory(settings=settings).try_new_parser(SyntaxTag.N_TRIPLES)
        with caplog.at_level(logging.WARNING, logger="rdf_dynsyn.parser"):
            assert len(list(parser.parse_path(path))) == 3
        assert any("Large" in r.getMessage() for r in caplog.records)


@pytest.mark.unit
class TestLifecycle:
    """close() and the context manager."""

    def test_closed_parser_rejects_parse(self, parsers):
        parser = parsers.try_new_parser(SyntaxTag.TURTLE)
        parser.close()
        with pytest.raises(ValueError):
            parser.parse("")

    def test_context_manager(self, parsers, ntriples_doc):
        with parsers.try_new_parser(SyntaxTag.N_TRIPLES) as parser:
            assert len(list(parser.parse(ntriples_doc))) == 3
        with pytest.raises(ValueError):
            parser.parse(ntriples_doc)

    def test_parser_is_reusable(self, parsers, ntriples_doc):
        parser = parsers.try_new_parser(SyntaxTag.N_TRIPLES)
        first = list(parser.parse(ntriples_doc))
        second = list(parser.parse(ntriples_doc))
        assert len(first) == len(second) == 3
        # blank nodes are scoped to one document
        assert first[0].object != second[0].object
