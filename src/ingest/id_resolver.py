"""Gene identifier resolution source.

This module defines the read-only resolver protocol consulted by the
gene resolver, plus an index loaded from a gene identifier file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from core.logging_config import get_logger
from ingest.tabular_source import TabularSource

_LOGGER = get_logger(__name__)
_MIN_ID_FILE_FIELDS = 2


class IdResolver(Protocol):
    """External identifier resolver predicates."""

    def has_taxon(self, taxon_id: str) -> bool:
        """Return whether identifier data exists for ``taxon_id``."""

    def is_primary_identifier(self, taxon_id: str, identifier: str) -> bool:
        """Return whether ``identifier`` is the taxon's primary gene identifier."""


class PrimaryIdentifierIndex:
    """In-memory set of primary gene identifiers per taxon."""

    def __init__(self, primary_identifiers: dict[str, set[str]]) -> None:
        self._primary_identifiers = primary_identifiers

    def has_taxon(self, taxon_id: str) -> bool:
        """Return whether any primary identifiers were loaded for the taxon."""
        return bool(self._primary_identifiers.get(taxon_id))

    def is_primary_identifier(self, taxon_id: str, identifier: str) -> bool:
        """Return whether identifier is a loaded primary id of the taxon."""
        return identifier in self._primary_identifiers.get(taxon_id, set())


def load_id_resolver(path: Path | None) -> PrimaryIdentifierIndex | None:
    """Load a primary identifier index from a gene identifier file.

    Rows carry taxon id and primary identifier; further columns such as
    symbols or synonyms are ignored.

    Args:
        path: Identifier file path, or None when resolution is disabled.

    Returns:
        Loaded index, or None when no path was configured.

    Raises:
        FlyExpressionSourceError: If the identifier file cannot be read.
    """
    if path is None:
        return None
    source = TabularSource(path)
    primary_identifiers: dict[str, set[str]] = {}
    for line_number, row in source.iter_numbered_rows():
        if len(row) < _MIN_ID_FILE_FIELDS:
            _LOGGER.error(
                "row_skipped",
                source=str(source.path),
                reason="field_count",
                line_number=line_number,
                field_count=len(row),
            )
            continue
        taxon_id, identifier = row[0].strip(), row[1].strip()
        primary_identifiers.setdefault(taxon_id, set()).add(identifier)
    _LOGGER.info(
        "id_resolver_loaded",
        source=str(source.path),
        taxa=len(primary_identifiers),
        identifiers=sum(len(ids) for ids in primary_identifiers.values()),
    )
    return PrimaryIdentifierIndex(primary_identifiers)
