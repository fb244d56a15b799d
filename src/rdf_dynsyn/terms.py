"""
Generic terms and the term factory capability.

Parsers and serializers never hard-code a term type. Callers pass a
``TermFactory`` that builds their own IRIs, blank nodes and literals from
lexical pieces, and that can describe those terms back in lexical form.
Two factories ship with the package:

- RDFLibTermFactory: rdflib ``URIRef``/``BNode``/``Literal`` (the default)
- PlainTermFactory: lightweight named tuples with no rdflib dependency
  for consumers

Example:
    ```python
    from rdf_dynsyn.terms import PlainTermFactory

    factory = PlainTermFactory()
    lit = factory.literal("42", datatype="http://www.w3.org/2001/XMLSchema#integer")
    factory.describe(lit).kind   # TermKind.LITERAL
    ```
"""

from enum import Enum
from typing import Any, NamedTuple, Optional, Protocol, runtime_checkable

from rdflib.term import BNode, Literal, Node, URIRef

RDF_LANG_STRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"


class TermKind(str, Enum):
    """Kinds of RDF terms that can appear in a statement."""
    IRI = "iri"
    BLANK_NODE = "blank-node"
    LITERAL = "literal"


class LexicalTerm(NamedTuple):
    """
    Lexical description of a term.

    ``value`` is the IRI text, the blank node label or the literal's lexical
    form. ``datatype`` and ``language`` only apply to literals.
    """
    kind: TermKind
    value: str
    datatype: Optional[str] = None
    language: Optional[str] = None


class Triple(NamedTuple):
    """Subject, predicate, object statement."""
    subject: Any
    predicate: Any
    object: Any


class Quad(NamedTuple):
    """Statement attributed to a graph; ``graph`` is None for the default graph."""
    subject: Any
    predicate: Any
    object: Any
    graph: Any = None

    @property
    def triple(self) -> Triple:
        return Triple(self.subject, self.predicate, self.object)


@runtime_checkable
class TermFactory(Protocol):
    """
    Capability that builds and describes the caller's term representation.

    Implementations must not lose information: IRI text, blank node labels,
    literal lexical forms, datatypes and language tags have to survive a
    ``describe(build(...))`` round trip.
    """

    def iri(self, value: str) -> Any:
        """Build an IRI term."""
        ...

    def blank_node(self, label: str) -> Any:
        """Build a blank node term from a document-scoped label."""
        ...

    def literal(
        self,
        lexical: str,
        datatype: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Any:
        """Build a literal term."""
        ...

    def describe(self, term: Any) -> LexicalTerm:
        """
        Describe a term built by this factory.

        Raises:
            TypeError: If the term was not built by this factory.
        """
        ...


class RDFLibTermFactory:
    """Builds rdflib terms. Literal lexical forms are kept as given."""

    def iri(self, value: str) -> URIRef:
        return URIRef(value)

    def blank_node(self, label: str) -> BNode:
        return BNode(label)

    def literal(
        self,
        lexical: str,
        datatype: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Literal:
        if language:
            return Literal(lexical, lang=language, normalize=False)
        return Literal(
            lexical,
            datatype=URIRef(datatype) if datatype else None,
            normalize=False,
        )

    def describe(self, term: Any) -> LexicalTerm:
        if isinstance(term, URIRef):
            return LexicalTerm(TermKind.IRI, str(term))
        if isinstance(term, BNode):
            return LexicalTerm(TermKind.BLANK_NODE, str(term))
        if isinstance(term, Literal):
            return LexicalTerm(
                TermKind.LITERAL,
                str(term),
                str(term.datatype) if term.datatype else None,
                term.language,
            )
        raise TypeError(f"Not an rdflib term: {term!r}")


class IRI(NamedTuple):
    value: str


class BlankNode(NamedTuple):
    label: str


class PlainLiteral(NamedTuple):
    lexical: str
    datatype: Optional[str] = None
    language: Optional[str] = None


class PlainTermFactory:
    """Builds ``IRI``, ``BlankNode`` and ``PlainLiteral`` named tuples."""

    def iri(self, value: str) -> IRI:
        return IRI(value)

    def blank_node(self, label: str) -> BlankNode:
        return BlankNode(label)

    def literal(
        self,
        lexical: str,
        datatype: Optional[str] = None,
        language: Optional[str] = None,
    ) -> PlainLiteral:
        return PlainLiteral(lexical, None if language else datatype, language)

    def describe(self, term: Any) -> LexicalTerm:
        if isinstance(term, IRI):
            return LexicalTerm(TermKind.IRI, term.value)
        if isinstance(term, BlankNode):
            return LexicalTerm(TermKind.BLANK_NODE, term.label)
        if isinstance(term, PlainLiteral):
            return LexicalTerm(TermKind.LITERAL, term.lexical, term.datatype, term.language)
        raise TypeError(f"Not a plain term: {term!r}")


def from_native(node: Node, factory: TermFactory) -> Any:
    """Translate an rdflib node produced by a backend into the caller's term type."""
    if isinstance(factory, RDFLibTermFactory):
        return node
    if isinstance(node, URIRef):
        return factory.iri(str(node))
    if isinstance(node, BNode):
        return factory.blank_node(str(node))
    if isinstance(node, Literal):
        return factory.literal(
            str(node),
            str(node.datatype) if node.datatype else None,
            node.language,
        )
    raise TypeError(f"Unsupported rdflib node: {node!r}")


def to_native(term: Any, factory: TermFactory) -> Node:
    """
    Translate a caller's term into the rdflib node a backend writes.

    Raises:
        TypeError: If the factory cannot describe the term.
    """
    if isinstance(factory, RDFLibTermFactory) and isinstance(term, (URIRef, BNode, Literal)):
        return term
    lexical = factory.describe(term)
    if lexical.kind == TermKind.IRI:
        return URIRef(lexical.value)
    if lexical.kind == TermKind.BLANK_NODE:
        return BNode(lexical.value)
    if lexical.language:
        if lexical.datatype and lexical.datatype != RDF_LANG_STRING:
            raise TypeError(
                f"Literal {lexical.value!r} has both language '{lexical.language}' "
                f"and datatype <{lexical.datatype}>"
            )
        return Literal(lexical.value, lang=lexical.language, normalize=False)
    return Literal(
        lexical.value,
        datatype=URIRef(lexical.datatype) if lexical.datatype else None,
        normalize=False,
    )
