"""Expression observation pipeline.

This module joins score rows with the stage and term vocabularies and
the gene resolver, and orchestrates a full conversion run.
"""

from __future__ import annotations

import json
import os
import re

from core.config import ConverterConfig
from core.constants import (
    DATA_SOURCE_NAME,
    DATASET_TITLE,
    PARTIAL_FILE_SUFFIX,
    SCORE_GENE_INDEX,
    SCORE_LEVEL_INDEX,
    SCORE_MIN_FIELD_COUNT,
    SCORE_SOURCE_INDEX,
    SCORE_STAGE_INDEX,
    SCORE_VALUE_INDEX,
    SUMMARY_FILE_NAME,
    TAXON_FLY,
)
from core.errors import FlyExpressionStoreError
from core.logging_config import get_logger
from core.types import (
    ConversionOptions,
    ConversionSummary,
    ExpressionObservation,
    Organism,
    StageVocabulary,
    TermVocabulary,
)
from ingest.gene_resolver import GeneResolver
from ingest.id_resolver import load_id_resolver
from ingest.stage_vocabulary import load_stage_vocabulary, translate_stage
from ingest.tabular_source import TabularSource
from ingest.term_vocabulary import load_term_vocabulary, lookup_level
from store.item_sink import ItemSink, JsonlItemSink

_LOGGER = get_logger(__name__)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


class ObservationPipeline:
    """Stream score rows into stored expression observations.

    Both vocabularies must be fully loaded before ``run`` is called.
    Malformed rows are logged and skipped; only source and sink
    failures propagate.
    """

    def __init__(
        self,
        stages: StageVocabulary,
        terms: TermVocabulary,
        gene_resolver: GeneResolver,
        sink: ItemSink,
    ) -> None:
        self._stages = stages
        self._terms = terms
        self._gene_resolver = gene_resolver
        self._sink = sink

    def run(self, score_source: TabularSource) -> ConversionSummary:
        """Process every score row once, in file order.

        Args:
            score_source: Score table source.

        Returns:
            Counters for rows read, emitted, and skipped.

        Raises:
            FlyExpressionSourceError: If the score table cannot be read.
            FlyExpressionStoreError: If the sink rejects a write.
        """
        summary = ConversionSummary()
        genes_before = self._gene_resolver.gene_count
        for line_number, row in score_source.iter_numbered_rows():
            summary.rows_read += 1
            observation = self._build_observation(line_number, row, summary)
            if observation is None:
                continue
            self._sink.store(observation)
            summary.observations_emitted += 1
        summary.genes_created = self._gene_resolver.gene_count - genes_before
        return summary

    def _build_observation(
        self,
        line_number: int,
        row: list[str],
        summary: ConversionSummary,
    ) -> ExpressionObservation | None:
        if len(row) < SCORE_MIN_FIELD_COUNT:
            _LOGGER.error(
                "row_skipped",
                reason="short_row",
                line_number=line_number,
                expected_fields=SCORE_MIN_FIELD_COUNT,
                field_count=len(row),
            )
            summary.record_skip("short_row")
            return None
        if not row[SCORE_SOURCE_INDEX].startswith(DATA_SOURCE_NAME):
            _LOGGER.debug(
                "row_skipped",
                reason="foreign_source",
                line_number=line_number,
                source_label=row[SCORE_SOURCE_INDEX],
            )
            summary.record_skip("foreign_source")
            return None
        stage_code = _optional_field(row, SCORE_STAGE_INDEX)
        if stage_code is None:
            _LOGGER.error("row_skipped", reason="missing_stage", line_number=line_number)
            summary.record_skip("missing_stage")
            return None
        stage_name = translate_stage(self._stages, stage_code)
        expression_score = _parse_score(line_number, row, summary)
        level_reference = _optional_field(row, SCORE_LEVEL_INDEX)
        expression_level = None
        if level_reference is not None:
            expression_level = lookup_level(self._terms, level_reference)
        gene = self._gene_resolver.resolve(row[SCORE_GENE_INDEX])
        if gene is None:
            _LOGGER.info(
                "row_skipped",
                reason="unresolved_gene",
                line_number=line_number,
                gene_identifier=row[SCORE_GENE_INDEX],
            )
            summary.record_skip("unresolved_gene")
            return None
        return ExpressionObservation(
            stage=stage_name,
            gene=gene,
            expression_score=expression_score,
            expression_level=expression_level,
        )


def convert_expression_data(
    options: ConversionOptions,
    config: ConverterConfig,
) -> ConversionSummary:
    """Run a full conversion and persist items plus a run summary.

    Args:
        options: Input tables and output directory.
        config: Runtime configuration.

    Returns:
        Counters for the completed run.

    Raises:
        FlyExpressionSourceError: If any input table cannot be read.
        FlyExpressionStoreError: If output cannot be written.
    """
    id_resolver_path = options.id_resolver_path or config.id_resolver_path
    id_resolver = load_id_resolver(id_resolver_path)
    organism = Organism(taxon_id=TAXON_FLY)
    term_source = TabularSource(options.term_path)
    stage_source = TabularSource(options.stage_path)
    score_source = TabularSource(options.score_path)
    for source in (term_source, stage_source, score_source):
        source.ensure_readable()
    with JsonlItemSink(options.output_dir) as sink:
        sink.store(organism)
        terms = load_term_vocabulary(term_source)
        stages = load_stage_vocabulary(stage_source)
        gene_resolver = GeneResolver(organism, sink, id_resolver)
        pipeline = ObservationPipeline(stages, terms, gene_resolver, sink)
        summary = pipeline.run(score_source)
        _remove_stale_summary(options)
        sink.commit()
    _write_summary_file(options, summary)
    _LOGGER.info(
        "conversion_completed",
        score_path=str(options.score_path),
        output_dir=str(options.output_dir),
        resolver_enabled=id_resolver is not None,
        **summary.to_payload(),
    )
    return summary


def _optional_field(row: list[str], index: int) -> str | None:
    """Return a field value, or None when absent or blank."""
    if len(row) <= index:
        return None
    value = row[index]
    return value if value else None


def _parse_score(line_number: int, row: list[str], summary: ConversionSummary) -> int | None:
    """Parse the optional integer expression score."""
    raw_score = _optional_field(row, SCORE_VALUE_INDEX)
    if raw_score is None:
        return None
    if _INTEGER_PATTERN.fullmatch(raw_score) is None:
        _LOGGER.warning("bad_expression_score", line_number=line_number, raw_score=raw_score)
        summary.bad_scores += 1
        return None
    return int(raw_score)


def _remove_stale_summary(options: ConversionOptions) -> None:
    """Drop a previous run's summary before its items are replaced."""
    summary_path = options.output_dir / SUMMARY_FILE_NAME
    try:
        summary_path.unlink(missing_ok=True)
    except OSError as error:
        raise FlyExpressionStoreError(
            f"Failed to remove stale conversion summary at {summary_path}: {error}."
        ) from error


def _write_summary_file(options: ConversionOptions, summary: ConversionSummary) -> None:
    """Write run counters and dataset metadata next to the items file."""
    summary_path = options.output_dir / SUMMARY_FILE_NAME
    payload = {
        "data_source": DATA_SOURCE_NAME,
        "dataset_title": DATASET_TITLE,
        "taxon_id": TAXON_FLY,
        "score_path": str(options.score_path),
        **summary.to_payload(),
    }
    partial_path = summary_path.with_name(SUMMARY_FILE_NAME + PARTIAL_FILE_SUFFIX)
    try:
        serialized_payload = json.dumps(payload, indent=2, sort_keys=True)
        partial_path.write_text(serialized_payload + "\n", encoding="utf-8")
        os.replace(partial_path, summary_path)
    except OSError as error:
        raise FlyExpressionStoreError(
            f"Failed to write conversion summary at {summary_path}: {error}."
        ) from error
