"""Gene resolution with memoized entity creation.

This module maps raw score-file gene identifiers to canonical ones and
creates exactly one stored ``Gene`` per canonical identifier.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import Gene, Organism
from ingest.id_resolver import IdResolver
from store.item_sink import ItemSink

_LOGGER = get_logger(__name__)


class GeneResolver:
    """Resolve identifiers to cached, stored genes.

    The cache is keyed on canonical identifier and is first-writer-wins;
    a cached gene is never replaced. Single-threaded use only.
    """

    def __init__(
        self,
        organism: Organism,
        sink: ItemSink,
        id_resolver: IdResolver | None = None,
    ) -> None:
        self._organism = organism
        self._sink = sink
        self._id_resolver = id_resolver
        self._genes: dict[str, Gene] = {}

    @property
    def gene_count(self) -> int:
        """Return the number of distinct genes created so far."""
        return len(self._genes)

    def resolve(self, raw_identifier: str) -> Gene | None:
        """Return the gene for a raw identifier, creating it on first use.

        Args:
            raw_identifier: Gene identifier from a score row.

        Returns:
            Cached or newly stored gene, or None when unresolved.

        Raises:
            FlyExpressionStoreError: If storing a new gene fails.
        """
        identifier = self.canonical_identifier(raw_identifier)
        if not identifier:
            return None
        cached_gene = self._genes.get(identifier)
        if cached_gene is not None:
            return cached_gene
        gene = Gene(primary_identifier=identifier, organism=self._organism)
        self._sink.store(gene)
        self._genes[identifier] = gene
        _LOGGER.debug("gene_created", primary_identifier=identifier)
        return gene

    def canonical_identifier(self, raw_identifier: str) -> str | None:
        """Return the canonical identifier, or None when unresolved.

        Without resolver data for the organism the raw identifier passes
        through unchanged. Otherwise only identifiers that already are the
        primary form resolve; synonyms are not looked up.
        """
        taxon_id = self._organism.taxon_id
        if self._id_resolver is None or not self._id_resolver.has_taxon(taxon_id):
            return raw_identifier
        if self._id_resolver.is_primary_identifier(taxon_id, raw_identifier):
            return raw_identifier
        return None
