"""Developmental stage vocabulary.

This module loads the stage code table and translates raw stage codes
from the score file into human-readable stage names.
"""

from __future__ import annotations

from core.constants import STAGE_FALLBACK_PREFIX, STAGE_FIELD_COUNT
from core.logging_config import get_logger
from core.types import Stage, StageVocabulary
from ingest.tabular_source import TabularSource

_LOGGER = get_logger(__name__)


def load_stage_vocabulary(source: TabularSource) -> StageVocabulary:
    """Load stage code to stage mappings.

    Rows must carry exactly category, code, and name. Other rows are
    skipped with a diagnostic. A repeated code keeps the last row seen.

    Args:
        source: Stage table source.

    Returns:
        Mapping of raw stage code to ``Stage``.

    Raises:
        FlyExpressionSourceError: If the stage table cannot be read.
    """
    stages: StageVocabulary = {}
    for line_number, row in source.iter_numbered_rows():
        if len(row) != STAGE_FIELD_COUNT:
            _LOGGER.error(
                "row_skipped",
                source=str(source.path),
                reason="field_count",
                line_number=line_number,
                expected_fields=STAGE_FIELD_COUNT,
                field_count=len(row),
            )
            continue
        category, code, name = (value.strip() for value in row)
        stages[code] = Stage(name=name, category=category)
    _LOGGER.info("vocabulary_loaded", vocabulary="stage", entries=len(stages))
    return stages


def translate_stage(stages: StageVocabulary, code: str) -> str:
    """Return the display name for a raw stage code.

    Codes missing from the vocabulary fall back to the code with the
    ``me_mRNA_`` prefix length chopped off.

    Args:
        stages: Loaded stage vocabulary.
        code: Raw stage code from a score row.

    Returns:
        Stage display name, never empty for a non-empty code.
    """
    stage = stages.get(code)
    if stage is not None:
        return stage.name
    return _strip_stage_prefix(code)


def _strip_stage_prefix(code: str) -> str:
    prefix_length = len(STAGE_FALLBACK_PREFIX)
    if len(code) <= prefix_length:
        _LOGGER.warning("stage_fallback_too_short", stage_code=code)
        return code
    return code[prefix_length:]
