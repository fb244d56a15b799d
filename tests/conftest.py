"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Tests that drive several components together
    pytest -m slow          # Tests that take >1s

The document fixtures describe the same small graph ("me knows Alice") in
every supported syntax.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests that drive several components together")
    config.addinivalue_line("markers", "slow: Tests that take more than 1 second")


@pytest.fixture
def turtle_doc():
    """Turtle graph with a relative subject; needs BASE_IRI."""
    return '''
        @prefix : <http://example.org/ns/> .
        <#me> :knows [ a :Person ; :name "Alice" ].
    '''


@pytest.fixture
def ntriples_doc():
    """The Turtle graph as N-Triples."""
    return '''
        <http://localhost/ex#me> <http://example.org/ns/knows> _:b1.
        _:b1 <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://example.org/ns/Person>.
        _:b1 <http://example.org/ns/name> "Alice".
    '''


@pytest.fixture
def rdfxml_doc():
    """The Turtle graph as RDF/XML."""
    return '''<?xml version="1.0" encoding="utf-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns="http://example.org/ns/">
  <rdf:Description rdf:about="http://localhost/ex#me">
    <knows>
      <Person>
        <name>Alice</name>
      </Person>
    </knows>
  </rdf:Description>
</rdf:RDF>
'''


@pytest.fixture
def trig_doc():
    """Two named graphs with relative names; needs BASE_IRI."""
    return '''
        @prefix : <http://example.org/ns/> .
        <#g1> {
            <#me> :knows _:alice.
        }
        <#g2> {
            _:alice a :Person ; :name "Alice".
        }
    '''


@pytest.fixture
def nquads_doc():
    """One default-graph quad and two quads in <tag:g1>."""
    return '''
        <http://localhost/ex#me> <http://example.org/ns/knows> _:b1.
        _:b1 <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> <http://example.org/ns/Person> <tag:g1>.
        _:b1 <http://example.org/ns/name> "Alice" <tag:g1>.
    '''


@pytest.fixture
def settings_file(tmp_path):
    """Write a JSON settings file and return its path."""
    def _write(content: str, name: str = "settings.json"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
