"""Expression level vocabulary.

This module loads modENCODE expression level names keyed by their
numeric code and looks up level references from score rows.
"""

from __future__ import annotations

from core.constants import (
    DATA_SOURCE_NAME,
    SCORE_LEVEL_PREFIX,
    TERM_CODE_QUALIFIER_LENGTH,
    TERM_FIELD_COUNT,
)
from core.logging_config import get_logger
from core.types import TermVocabulary
from ingest.tabular_source import TabularSource

_LOGGER = get_logger(__name__)


def load_term_vocabulary(source: TabularSource) -> TermVocabulary:
    """Load normalized level code to display name mappings.

    Only rows whose source label is exactly ``modENCODE`` are kept; rows
    from other sources (e.g. FlyAtlas) are dropped silently. The stored
    key drops the one-letter qualifier, so ``T07`` is stored as ``07``.

    Args:
        source: Term table source.

    Returns:
        Mapping of normalized level code to display name.

    Raises:
        FlyExpressionSourceError: If the term table cannot be read.
    """
    terms: TermVocabulary = {}
    for line_number, row in source.iter_numbered_rows():
        if len(row) != TERM_FIELD_COUNT:
            _LOGGER.error(
                "row_skipped",
                source=str(source.path),
                reason="field_count",
                line_number=line_number,
                expected_fields=TERM_FIELD_COUNT,
                field_count=len(row),
            )
            continue
        if row[0] != DATA_SOURCE_NAME:
            continue
        terms[normalize_term_code(row[1])] = row[3]
    _LOGGER.info("vocabulary_loaded", vocabulary="term", entries=len(terms))
    return terms


def normalize_term_code(code: str) -> str:
    """Drop the one-letter qualifier from a term file level code."""
    return code[TERM_CODE_QUALIFIER_LENGTH:]


def lookup_level(terms: TermVocabulary, level_reference: str) -> str | None:
    """Return the level display name for a score row reference.

    The reference is tried as-is, then with the ``ME_`` score-file
    prefix removed.

    Args:
        terms: Loaded term vocabulary.
        level_reference: Level field of a score row, e.g. ``ME_07``.

    Returns:
        Display name, or None when no mapping exists.
    """
    name = terms.get(level_reference)
    if not name and level_reference.startswith(SCORE_LEVEL_PREFIX):
        name = terms.get(level_reference[len(SCORE_LEVEL_PREFIX):])
    return name or None
