"""Shared typed models.

This module defines the immutable entities produced by a conversion
run and the option and summary objects passed between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Union


@dataclass(frozen=True)
class Organism:
    """Organism singleton referenced by every gene of a run.

    Attributes:
        taxon_id: NCBI taxonomy identifier.
    """

    taxon_id: str


@dataclass(frozen=True)
class Gene:
    """Resolved gene identity.

    Attributes:
        primary_identifier: Canonical identifier, unique per run.
        organism: Owning organism singleton.
    """

    primary_identifier: str
    organism: Organism


@dataclass(frozen=True)
class Stage:
    """Developmental stage vocabulary entry.

    Attributes:
        name: Human-readable stage name.
        category: Stage category label, e.g. ``embryo``.
    """

    name: str
    category: str


@dataclass(frozen=True)
class ExpressionObservation:
    """One normalized expression score tied to a gene and stage.

    Attributes:
        stage: Stage display name.
        gene: Resolved gene reference.
        expression_score: Integer score when the row carried a parseable one.
        expression_level: Level display name when the level code was mapped.
    """

    stage: str
    gene: Gene
    expression_score: int | None = None
    expression_level: str | None = None


Entity = Union[Organism, Gene, ExpressionObservation]
StageVocabulary = Dict[str, Stage]
TermVocabulary = Dict[str, str]


@dataclass(frozen=True)
class ConversionOptions:
    """Input and output locations for one conversion run.

    Attributes:
        score_path: Tab-delimited expression score table.
        stage_path: Tab-delimited stage vocabulary.
        term_path: Tab-delimited expression level vocabulary.
        output_dir: Directory receiving items and summary files.
        id_resolver_path: Optional gene identifier file for resolution.
    """

    score_path: Path
    stage_path: Path
    term_path: Path
    output_dir: Path
    id_resolver_path: Path | None = None


@dataclass
class ConversionSummary:
    """Mutable per-run counters reported at completion.

    Attributes:
        rows_read: Score rows seen, including skipped ones.
        observations_emitted: Observations handed to the sink.
        genes_created: Distinct genes stored.
        bad_scores: Rows whose score field failed integer parsing.
        skipped_rows: Count of dropped score rows keyed by reason.
    """

    rows_read: int = 0
    observations_emitted: int = 0
    genes_created: int = 0
    bad_scores: int = 0
    skipped_rows: Dict[str, int] = field(default_factory=dict)

    def record_skip(self, reason: str) -> None:
        """Increment the skipped-row counter for ``reason``."""
        self.skipped_rows[reason] = self.skipped_rows.get(reason, 0) + 1

    def to_payload(self) -> Mapping[str, object]:
        """Return a JSON-safe view of the counters."""
        return {
            "rows_read": self.rows_read,
            "observations_emitted": self.observations_emitted,
            "genes_created": self.genes_created,
            "bad_scores": self.bad_scores,
            "skipped_rows": dict(sorted(self.skipped_rows.items())),
        }
