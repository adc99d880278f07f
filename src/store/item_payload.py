"""JSON serialization for stored entities.

This module maps domain entities onto item payloads. References to
other entities are written as the item ids the sink assigned them.
"""

from __future__ import annotations

from typing import Callable

from core.errors import FlyExpressionStoreError
from core.types import Entity, ExpressionObservation, Gene, Organism

ORGANISM_CLASS = "Organism"
GENE_CLASS = "Gene"
OBSERVATION_CLASS = "RNASeqResult"

ReferenceLookup = Callable[[object], str]


def is_referenceable(entity: Entity) -> bool:
    """Return whether other items may reference ``entity``."""
    return isinstance(entity, (Organism, Gene))


def item_class_name(entity: Entity) -> str:
    """Return the stored class name for an entity.

    Raises:
        FlyExpressionStoreError: If the entity type is not storable.
    """
    if isinstance(entity, Organism):
        return ORGANISM_CLASS
    if isinstance(entity, Gene):
        return GENE_CLASS
    if isinstance(entity, ExpressionObservation):
        return OBSERVATION_CLASS
    raise FlyExpressionStoreError(
        f"Cannot store entity of type {type(entity).__name__}. "
        "Only Organism, Gene, and ExpressionObservation are storable."
    )


def entity_to_payload(
    item_id: str,
    entity: Entity,
    reference_of: ReferenceLookup,
) -> dict[str, object]:
    """Serialize an entity into a JSON-safe item payload.

    Unset optional attributes are omitted.

    Args:
        item_id: Item id assigned to this entity.
        entity: Entity to serialize.
        reference_of: Returns the item id of an already stored entity.

    Returns:
        Dictionary payload for JSON encoding.
    """
    attributes: dict[str, object] = {}
    references: dict[str, str] = {}
    if isinstance(entity, Organism):
        attributes["taxonId"] = entity.taxon_id
    elif isinstance(entity, Gene):
        attributes["primaryIdentifier"] = entity.primary_identifier
        references["organism"] = reference_of(entity.organism)
    elif isinstance(entity, ExpressionObservation):
        attributes["stage"] = entity.stage
        if entity.expression_score is not None:
            attributes["expressionScore"] = entity.expression_score
        if entity.expression_level is not None:
            attributes["expressionLevel"] = entity.expression_level
        references["gene"] = reference_of(entity.gene)
    payload: dict[str, object] = {
        "id": item_id,
        "class": item_class_name(entity),
        "attributes": attributes,
    }
    if references:
        payload["references"] = references
    return payload
