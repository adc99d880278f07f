"""Core constants used across converter modules.

This module centralizes file names, source labels, and the prefix
lengths used by vocabulary fallbacks so no magic literals leak into
the record-joining logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_OUTPUT_ROOT = Path(".flyexpr")
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
ITEMS_FILE_NAME = "items.jsonl"
PARTIAL_FILE_SUFFIX = ".partial"
SUMMARY_FILE_NAME = "conversion_summary.json"
TAB_DELIMITER = "\t"
COMMENT_PREFIX = "#"

DATA_SOURCE_NAME = "modENCODE"
DATASET_TITLE = "FlyBase expression data"
TAXON_FLY = "7227"

STAGE_FALLBACK_PREFIX = "me_mRNA_"
TERM_CODE_QUALIFIER_LENGTH = 1
SCORE_LEVEL_PREFIX = "ME_"

STAGE_FIELD_COUNT = 3
TERM_FIELD_COUNT = 6
SCORE_MIN_FIELD_COUNT = 5
SCORE_GENE_INDEX = 1
SCORE_SOURCE_INDEX = 4
SCORE_STAGE_INDEX = 6
SCORE_VALUE_INDEX = 7
SCORE_LEVEL_INDEX = 8

CONVERSION_SPEC_VERSION = 1
