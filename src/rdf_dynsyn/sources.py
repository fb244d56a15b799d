"""
Normalisation of parser input sources.

Parsers accept ``str``, ``bytes``, text or binary file objects, and
iterables of ``str``/``bytes`` chunks (for instance a file iterated line by
line, or an HTTP response body iterated in blocks). Backends pull the input
in the shape they need:

- iter_chunks: raw blocks, for the incremental RDF/XML parser
- iter_lines: physical lines, for the line-oriented N-Triples/N-Quads parsers
- read_document: the whole document, for the Turtle/TriG parser

Bytes are never decoded here; backends decode them according to their
grammar.
"""

import re
from typing import IO, Iterable, Iterator, Union

Chunk = Union[str, bytes]
Source = Union[str, bytes, bytearray, IO[str], IO[bytes], Iterable[Chunk]]

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64KB

_TEXT_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BYTES_LINE_BREAK = re.compile(rb"\r\n|\r|\n")


def iter_chunks(source: Source, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Chunk]:
    """
    Yield the source as a sequence of ``str`` or ``bytes`` blocks.

    Raises:
        TypeError: If the source, or one of its chunks, is of an
            unsupported type.
    """
    if isinstance(source, (str, bytes, bytearray)):
        data = bytes(source) if isinstance(source, bytearray) else source
        for start in range(0, len(data), chunk_size):
            yield data[start:start + chunk_size]
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            yield chunk
    elif isinstance(source, Iterable):
        for chunk in source:
            if isinstance(chunk, bytearray):
                chunk = bytes(chunk)
            if not isinstance(chunk, (str, bytes)):
                raise TypeError(f"Source chunks must be str or bytes, got {type(chunk).__name__}")
            if chunk:
                yield chunk
    else:
        raise TypeError(f"Unsupported parser source: {type(source).__name__}")


def iter_lines(source: Source) -> Iterator[Chunk]:
    """
    Yield physical lines without their terminators.

    Lines end at ``\\r\\n``, ``\\r`` or ``\\n``, also when a terminator is
    split across two chunks.

    Raises:
        TypeError: On unsupported sources or when ``str`` and ``bytes``
            chunks are mixed.
    """
    pending: Union[Chunk, None] = None
    for chunk in iter_chunks(source):
        if pending is not None and type(pending) is not type(chunk):
            raise TypeError("Source mixes str and bytes chunks")
        data = chunk if pending is None else pending + chunk
        # Hold back a trailing CR: the next chunk may start with its LF
        carry = data[-1:] if data[-1:] in ("\r", b"\r") else data[:0]
        if carry:
            data = data[:-1]
        pattern = _TEXT_LINE_BREAK if isinstance(data, str) else _BYTES_LINE_BREAK
        lines = pattern.split(data)
        pending = lines.pop() + carry
        yield from lines
    if pending:
        # Lone trailing CR terminates the last line
        yield pending[:-1] if pending[-1:] in ("\r", b"\r") else pending


def read_document(source: Source) -> Chunk:
    """
    Read the whole source.

    Returns:
        ``str`` or ``bytes``, matching the source's chunks. Empty sources
        give an empty ``str``.
    """
    if isinstance(source, (str, bytes)):
        return source
    chunks = list(iter_chunks(source))
    if not chunks:
        return ""
    if any(type(c) is not type(chunks[0]) for c in chunks):
        raise TypeError("Source mixes str and bytes chunks")
    return chunks[0][:0].join(chunks)
