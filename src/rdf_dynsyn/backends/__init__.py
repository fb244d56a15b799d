"""
Backend adapters, one per backend family.

Each family drives a structurally different rdflib implementation behind
the common ``ParserBackend``/``SerializerBackend`` interfaces.
"""

from .base import NativeStatement, ParseItem, ParserBackend, SerializerBackend, Writer
from .documents import DocumentParserBackend, DocumentSerializerBackend
from .lines import LineParserBackend, LineSerializerBackend
from .rdfxml import RDFXMLParserBackend, RDFXMLSerializerBackend

__all__ = [
    "NativeStatement",
    "ParseItem",
    "ParserBackend",
    "SerializerBackend",
    "Writer",
    "DocumentParserBackend",
    "DocumentSerializerBackend",
    "LineParserBackend",
    "LineSerializerBackend",
    "RDFXMLParserBackend",
    "RDFXMLSerializerBackend",
]
