"""
Memory checks for backend construction and document parsing.

Backends for whole-document syntaxes (Turtle, TriG, pretty serializers)
hold the full graph in memory, and rdflib graphs typically take 3-4x the
document size. ``MemoryManager`` runs a headroom check before a backend is
constructed and estimates the cost of parsing a file.

Example:
    ```python
    from rdf_dynsyn.memory import MemoryManager

    ok, message = MemoryManager.check_headroom(min_available_mb=64)
    if not ok:
        raise BackendInitError(tag, message)
    ```
"""

import logging
from typing import Tuple

import psutil

logger = logging.getLogger(__name__)


class MemoryManager:
    """
    Pre-flight memory checks based on psutil.

    Attributes:
        MEMORY_MULTIPLIER: Estimated in-memory graph size / document size
        LOAD_FACTOR: Fraction of available memory treated as safe
    """

    MEMORY_MULTIPLIER = 3.5
    LOAD_FACTOR = 0.7  # Only use 70% of available memory as safe threshold

    @staticmethod
    def get_available_memory_mb() -> float:
        """
        Get available system memory in MB.

        Returns:
            Available memory in MB, or float('inf') if detection fails.
        """
        try:
            return psutil.virtual_memory().available / (1024 * 1024)
        except (OSError, psutil.Error) as e:
            logger.warning(f"Could not determine available memory: {e}")
            return float('inf')

    @staticmethod
    def get_memory_usage_mb() -> float:
        """Get the resident set size of the current process in MB."""
        try:
            return psutil.Process().memory_info().rss / (1024 * 1024)
        except (OSError, psutil.Error):
            return 0.0

    @classmethod
    def check_headroom(cls, min_available_mb: float) -> Tuple[bool, str]:
        """
        Check that enough free memory exists to construct a backend.

        Args:
            min_available_mb: Minimum free memory required.

        Returns:
            Tuple of (can_proceed, message).
        """
        available_mb = cls.get_available_memory_mb()
        if available_mb == float('inf'):
            return True, "Memory check unavailable"
        if available_mb < min_available_mb:
            return False, (
                f"Insufficient free memory. "
                f"Available: {available_mb:.0f}MB, "
                f"minimum required: {min_available_mb:.0f}MB"
            )
        return True, f"Memory OK: {available_mb:.0f}MB available"

    @classmethod
    def check_document(cls, document_size_mb: float) -> Tuple[bool, str]:
        """
        Estimate whether an in-memory parse of a document fits.

        Args:
            document_size_mb: Size of the document in MB.

        Returns:
            Tuple of (fits, message). Callers log rather than refuse: the
            estimate is coarse.
        """
        estimated_usage_mb = document_size_mb * cls.MEMORY_MULTIPLIER
        available_mb = cls.get_available_memory_mb()
        if available_mb == float('inf'):
            return True, f"Memory check unavailable for {document_size_mb:.1f}MB document"

        safe_threshold_mb = available_mb * cls.LOAD_FACTOR
        if estimated_usage_mb > safe_threshold_mb:
            return False, (
                f"Document may be too large for available memory. "
                f"Size: {document_size_mb:.1f}MB, "
                f"estimated parsing memory: ~{estimated_usage_mb:.0f}MB, "
                f"safe threshold: {safe_threshold_mb:.0f}MB"
            )
        return True, (
            f"Memory OK: document {document_size_mb:.1f}MB, "
            f"estimated usage ~{estimated_usage_mb:.0f}MB "
            f"of {available_mb:.0f}MB available"
        )

    @classmethod
    def log_memory_status(cls, context: str = "") -> None:
        """Log current memory status at debug level."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        prefix = f"[{context}] " if context else ""
        logger.debug(
            f"{prefix}Memory status: Process using {cls.get_memory_usage_mb():.0f}MB, "
            f"System available: {cls.get_available_memory_mb():.0f}MB"
        )
