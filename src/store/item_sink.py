"""Item sinks for converter output.

This module defines the sink protocol used by the pipeline and a
JSON-lines implementation that writes items as they are stored.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from types import TracebackType
from typing import IO, Protocol

from core.constants import ITEMS_FILE_NAME, PARTIAL_FILE_SUFFIX
from core.errors import FlyExpressionStoreError
from core.types import Entity
from store.item_payload import entity_to_payload, is_referenceable, item_class_name


class ItemSink(Protocol):
    """Destination for converted entities."""

    def store(self, entity: Entity) -> None:
        """Persist one entity or raise ``FlyExpressionStoreError``."""


class JsonlItemSink:
    """Sink writing one JSON item per line.

    Each stored entity gets an item id of the form ``<class>_<n>``.
    Entities must be stored before anything referencing them. Items go
    to a partial file that replaces ``items.jsonl`` only on ``commit``;
    closing without a commit discards the partial file.
    """

    def __init__(self, output_dir: Path) -> None:
        self._items_path = Path(output_dir) / ITEMS_FILE_NAME
        self._partial_path = self._items_path.with_name(ITEMS_FILE_NAME + PARTIAL_FILE_SUFFIX)
        self._handle: IO[str] | None = None
        self._item_ids: dict[object, str] = {}
        self._class_counters: dict[str, int] = {}
        self._stored_count = 0

    @property
    def items_path(self) -> Path:
        """Return the committed JSONL output path."""
        return self._items_path

    @property
    def stored_count(self) -> int:
        """Return the number of items written."""
        return self._stored_count

    @property
    def indexed_count(self) -> int:
        """Return the number of referenceable items held for id lookup."""
        return len(self._item_ids)

    def __enter__(self) -> "JsonlItemSink":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def open(self) -> None:
        """Create the output directory and open the partial items file.

        Raises:
            FlyExpressionStoreError: If the file cannot be created.
        """
        try:
            self._items_path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self._partial_path.open("w", encoding="utf-8")
        except OSError as error:
            raise FlyExpressionStoreError(
                f"Failed to open item output at {self._partial_path}: {error}. "
                "Check the output directory permissions."
            ) from error

    def commit(self) -> None:
        """Close the partial file and move it over ``items.jsonl``.

        Raises:
            FlyExpressionStoreError: If the sink is not open or the move fails.
        """
        if self._handle is None:
            raise FlyExpressionStoreError(
                f"Item sink for {self._items_path} is not open. Nothing to commit."
            )
        self._close_handle()
        try:
            os.replace(self._partial_path, self._items_path)
        except OSError as error:
            raise FlyExpressionStoreError(
                f"Failed to commit item output to {self._items_path}: {error}."
            ) from error

    def close(self) -> None:
        """Close the sink, discarding any uncommitted items."""
        if self._handle is None:
            return
        self._close_handle()
        try:
            self._partial_path.unlink(missing_ok=True)
        except OSError as error:
            raise FlyExpressionStoreError(
                f"Failed to discard partial item output at {self._partial_path}: {error}."
            ) from error

    def store(self, entity: Entity) -> None:
        """Assign an item id to ``entity`` and append its payload.

        Args:
            entity: Organism, gene, or expression observation.

        Raises:
            FlyExpressionStoreError: If the sink is closed, a reference is
                dangling, or the write fails.
        """
        if self._handle is None:
            raise FlyExpressionStoreError(
                f"Item sink for {self._items_path} is not open. Open the sink before storing."
            )
        item_id = self._next_item_id(item_class_name(entity))
        payload = entity_to_payload(item_id, entity, self._reference_of)
        try:
            self._handle.write(json.dumps(payload, sort_keys=True) + "\n")
        except OSError as error:
            raise FlyExpressionStoreError(
                f"Failed to write item {item_id} to {self._partial_path}: {error}."
            ) from error
        if is_referenceable(entity):
            self._item_ids[entity] = item_id
        self._stored_count += 1

    def _close_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as error:
            raise FlyExpressionStoreError(
                f"Failed to close item output at {self._partial_path}: {error}."
            ) from error

    def _next_item_id(self, class_name: str) -> str:
        count = self._class_counters.get(class_name, 0) + 1
        self._class_counters[class_name] = count
        return f"{class_name}_{count}"

    def _reference_of(self, entity: object) -> str:
        item_id = self._item_ids.get(entity)
        if item_id is None:
            raise FlyExpressionStoreError(
                f"Cannot reference unstored {type(entity).__name__}: {entity!r}. "
                "Store referenced items first."
            )
        return item_id
