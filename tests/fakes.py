"""Shared fakes and file helpers for tests."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.errors import FlyExpressionStoreError
from core.types import Entity, ExpressionObservation, Gene


class RecordingSink:
    """Sink that keeps stored entities in memory, in order."""

    def __init__(self, fail_on_store: bool = False) -> None:
        self.entities: list[Entity] = []
        self._fail_on_store = fail_on_store

    def store(self, entity: Entity) -> None:
        if self._fail_on_store:
            raise FlyExpressionStoreError("sink rejected write")
        self.entities.append(entity)

    @property
    def genes(self) -> list[Gene]:
        return [entity for entity in self.entities if isinstance(entity, Gene)]

    @property
    def observations(self) -> list[ExpressionObservation]:
        return [entity for entity in self.entities if isinstance(entity, ExpressionObservation)]


class StaticIdResolver:
    """Resolver answering from a fixed set of primary identifiers."""

    def __init__(self, taxon_id: str, primary_identifiers: Sequence[str]) -> None:
        self._taxon_id = taxon_id
        self._primary_identifiers = set(primary_identifiers)
        self.primary_checks: list[str] = []

    def has_taxon(self, taxon_id: str) -> bool:
        return taxon_id == self._taxon_id

    def is_primary_identifier(self, taxon_id: str, identifier: str) -> bool:
        self.primary_checks.append(identifier)
        return taxon_id == self._taxon_id and identifier in self._primary_identifiers


def write_tsv(path: Path, rows: Sequence[Sequence[str]]) -> Path:
    """Write rows as a tab-delimited file and return its path."""
    lines = ["\t".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
