"""
Correspondence Resolver

Bidirectional lookup between external identifiers (media types and file
extensions) and syntax tags.

Matching policy:
    1. Media types match on ``type/subtype``; parameters are ignored.
    2. Canonical and alias media types resolve totally.
    3. Partial identifiers (``text/html``, ``.json``...) resolve with
       ``is_total=False``.
    4. Nothing else resolves; there is no default syntax.

Usage:
    from rdf_dynsyn.correspondence import resolve, canonical_identifier_of

    corr = resolve("application/x-turtle")
    corr.value            # SyntaxTag.TURTLE
    str(corr.canonical)   # 'text/turtle'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Generic, Optional, Tuple, TypeVar, Union

from .errors import UnknownSyntaxError
from .identifiers import ExternalIdentifier, FileExtension, MediaType, parse_identifier
from .syntax import SyntaxTag, all_syntaxes, metadata_of

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Correspondence(Generic[T]):
    """
    A resolved pairing of an external identifier with the value it maps to.

    Attributes:
        identifier: The identifier that was resolved
        value: The value it corresponds to (usually a SyntaxTag)
        canonical: The registered primary identifier for ``value``
        is_total: False when the identifier only partially identifies
            ``value`` (e.g. ``text/html`` may carry no RDF at all)
    """
    identifier: ExternalIdentifier
    value: T
    canonical: ExternalIdentifier
    is_total: bool = True


def _build_tables() -> Tuple[Dict[str, Tuple[SyntaxTag, bool]], Dict[str, Tuple[SyntaxTag, bool]]]:
    media_types: Dict[str, Tuple[SyntaxTag, bool]] = {}
    extensions: Dict[str, Tuple[SyntaxTag, bool]] = {}
    for tag in all_syntaxes():
        meta = metadata_of(tag)
        for media_type in meta.media_types:
            media_types[media_type] = (tag, media_type not in meta.partial_identifiers)
        for extension in meta.file_extensions:
            extensions[extension] = (tag, extension not in meta.partial_identifiers)
        for partial in meta.partial_identifiers:
            table = media_types if "/" in partial else extensions
            table[partial] = (tag, False)
    return media_types, extensions


_MEDIA_TYPE_TABLE, _EXTENSION_TABLE = _build_tables()


def resolve(identifier: Union[str, ExternalIdentifier]) -> Correspondence[SyntaxTag]:
    """
    Resolve a media type or file extension to a syntax tag.

    Args:
        identifier: A ``MediaType``, ``FileExtension`` or string. Strings
            containing ``/`` are parsed as media types, other strings as
            file extensions.

    Returns:
        Correspondence whose ``value`` is the matching SyntaxTag.

    Raises:
        UnknownSyntaxError: If nothing registered matches.

    Example:
        >>> resolve("text/turtle; charset=utf-8").value
        <SyntaxTag.TURTLE: 'turtle'>
        >>> resolve(".NQ").value
        <SyntaxTag.N_QUADS: 'n-quads'>
    """
    try:
        parsed = parse_identifier(identifier)
    except ValueError as e:
        logger.warning(f"Could not interpret syntax identifier {identifier!r}: {e}")
        raise UnknownSyntaxError(identifier, f"Unknown RDF syntax identifier {identifier!r}: {e}") from e

    if isinstance(parsed, MediaType):
        match = _MEDIA_TYPE_TABLE.get(parsed.essence)
    else:
        match = _EXTENSION_TABLE.get(parsed.value)

    if match is None:
        logger.warning(f"No RDF syntax registered for {type(parsed).__name__} '{parsed}'")
        raise UnknownSyntaxError(parsed)

    tag, is_total = match
    canonical: ExternalIdentifier
    if isinstance(parsed, MediaType):
        canonical = canonical_identifier_of(tag)
    else:
        canonical = canonical_extension_of(tag)
    logger.debug(f"Resolved '{parsed}' to syntax {tag} (total={is_total})")
    return Correspondence(parsed, tag, canonical, is_total)


def resolve_hint(
    media_type: Optional[Union[str, MediaType]] = None,
    file_extension: Optional[Union[str, FileExtension]] = None,
) -> Correspondence[SyntaxTag]:
    """
    Resolve from a media type and/or a file extension.

    The media type wins when it resolves; an unresolvable media type
    (e.g. ``application/octet-stream``) falls through to the extension.

    Raises:
        UnknownSyntaxError: If neither hint resolves.
    """
    if media_type is None and file_extension is None:
        raise UnknownSyntaxError(None, "No media type or file extension given")

    if media_type is not None:
        try:
            if not isinstance(media_type, MediaType):
                media_type = MediaType.parse(media_type)
            return resolve(media_type)
        except (UnknownSyntaxError, ValueError) as e:
            if file_extension is None:
                if isinstance(e, UnknownSyntaxError):
                    raise
                raise UnknownSyntaxError(media_type, str(e)) from e
            logger.debug(f"Media type '{media_type}' unresolved, trying extension '{file_extension}'")
    if not isinstance(file_extension, FileExtension):
        try:
            file_extension = FileExtension(file_extension)
        except ValueError as e:
            logger.warning(f"Could not interpret file extension {file_extension!r}: {e}")
            raise UnknownSyntaxError(file_extension, f"Unknown RDF syntax identifier {file_extension!r}: {e}") from e
    return resolve(file_extension)


def resolve_path(path: Union[str, Path]) -> Correspondence[SyntaxTag]:
    """
    Resolve the syntax of a file from its extension.

    Raises:
        UnknownSyntaxError: If the path has no extension or it is unknown.
    """
    extension = FileExtension.from_path(path)
    if extension is None:
        logger.warning(f"Cannot infer RDF syntax of '{path}': no file extension")
        raise UnknownSyntaxError(str(path), f"Cannot infer RDF syntax of '{path}': no file extension")
    return resolve(extension)


def canonical_identifier_of(tag: SyntaxTag) -> MediaType:
    """Return the canonical media type of a syntax tag."""
    return MediaType.parse(metadata_of(tag).canonical_media_type)


def canonical_extension_of(tag: SyntaxTag) -> FileExtension:
    """Return the preferred file extension of a syntax tag."""
    return FileExtension(metadata_of(tag).canonical_extension)
