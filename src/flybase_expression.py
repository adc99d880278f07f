"""Public SDK surface for the expression converter.

This module provides a stable import path for library users.
It re-exports the conversion entry point and typed models.
"""

from __future__ import annotations

from core.config import ConverterConfig
from core.conversion_spec import load_conversion_spec
from core.types import (
    ConversionOptions,
    ConversionSummary,
    ExpressionObservation,
    Gene,
    Organism,
    Stage,
)
from ingest.gene_resolver import GeneResolver
from ingest.id_resolver import IdResolver, PrimaryIdentifierIndex, load_id_resolver
from ingest.pipeline import ObservationPipeline, convert_expression_data
from ingest.stage_vocabulary import load_stage_vocabulary
from ingest.tabular_source import TabularSource
from ingest.term_vocabulary import load_term_vocabulary
from store.item_sink import ItemSink, JsonlItemSink

__all__ = [
    "ConversionOptions",
    "ConversionSummary",
    "ConverterConfig",
    "ExpressionObservation",
    "Gene",
    "GeneResolver",
    "IdResolver",
    "ItemSink",
    "JsonlItemSink",
    "ObservationPipeline",
    "Organism",
    "PrimaryIdentifierIndex",
    "Stage",
    "TabularSource",
    "convert_expression_data",
    "load_conversion_spec",
    "load_id_resolver",
    "load_stage_vocabulary",
    "load_term_vocabulary",
]
