"""Unit tests for the primary identifier index."""

from __future__ import annotations

from pathlib import Path

from ingest.id_resolver import load_id_resolver
from tests.fakes import write_tsv
from tests.fixture_paths import fixture_path


def test_load_id_resolver_returns_none_without_path() -> None:
    """No configured file should disable resolution."""
    assert load_id_resolver(None) is None


def test_load_id_resolver_indexes_primary_ids_per_taxon() -> None:
    """Identifiers should be scoped to their taxon."""
    resolver = load_id_resolver(fixture_path("gene_ids.tsv"))

    assert resolver is not None
    assert resolver.has_taxon("7227") and resolver.has_taxon("9606")
    assert resolver.is_primary_identifier("7227", "FBgn0000003")
    assert not resolver.is_primary_identifier("9606", "FBgn0000003")


def test_load_id_resolver_skips_single_column_rows(tmp_path: Path) -> None:
    """Rows without a taxon and identifier should be ignored."""
    id_path = write_tsv(tmp_path / "ids.tsv", [["FBgn0000003"], ["7227", "FBgn0000008"]])

    resolver = load_id_resolver(id_path)

    assert resolver is not None
    assert not resolver.is_primary_identifier("7227", "FBgn0000003")
    assert resolver.is_primary_identifier("7227", "FBgn0000008")


def test_has_taxon_false_for_unknown_taxon(tmp_path: Path) -> None:
    """A taxon absent from the file should report no data."""
    id_path = write_tsv(tmp_path / "ids.tsv", [["9606", "ENSG00000139618"]])

    resolver = load_id_resolver(id_path)

    assert resolver is not None and resolver.has_taxon("7227") is False
