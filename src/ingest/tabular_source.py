"""Tab-delimited source reader.

This module streams rows from the flat files consumed by the converter.
Each iteration re-opens the file so every component reads its own pass.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator

from core.constants import COMMENT_PREFIX, TAB_DELIMITER
from core.errors import FlyExpressionSourceError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class TabularSource:
    """Iterable of tab-split rows from one file, in file order.

    Blank lines and ``#`` comment lines are skipped. Only failure to open
    or read the file raises ``FlyExpressionSourceError``.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        """Return the source file path."""
        return self._path

    def __iter__(self) -> Iterator[list[str]]:
        return self.iter_rows()

    def iter_rows(self) -> Iterator[list[str]]:
        """Yield rows split on tab.

        Yields:
            Ordered string fields of each data line.

        Raises:
            FlyExpressionSourceError: If the file cannot be opened or read.
        """
        for _, row in self.iter_numbered_rows():
            yield row

    def ensure_readable(self) -> None:
        """Fail fast when the source file is missing.

        Raises:
            FlyExpressionSourceError: If the path is not an existing file.
        """
        if not self._path.is_file():
            raise FlyExpressionSourceError(
                f"Failed to open source at {self._path}: file does not exist. "
                "Provide an existing tab-delimited file."
            )

    def iter_numbered_rows(self) -> Iterator[tuple[int, list[str]]]:
        """Yield ``(line_number, row)`` pairs with one-based line numbers.

        Undecodable bytes are replaced with U+FFFD so the row still reaches
        the caller's row checks. Lines the csv reader rejects are skipped.
        """
        self.ensure_readable()
        try:
            handle = self._path.open("r", encoding="utf-8", errors="replace", newline="")
        except OSError as error:
            raise FlyExpressionSourceError(
                f"Failed to open source at {self._path}: {error}. Check file permissions."
            ) from error
        with handle:
            reader = csv.reader(handle, delimiter=TAB_DELIMITER, quoting=csv.QUOTE_NONE)
            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    return
                except csv.Error as error:
                    _LOGGER.error(
                        "row_skipped",
                        source=str(self._path),
                        reason="malformed_line",
                        line_number=reader.line_num,
                        error=str(error),
                    )
                    continue
                except OSError as error:
                    raise FlyExpressionSourceError(
                        f"Failed to read source at {self._path}: {error}."
                    ) from error
                if _is_ignorable(row):
                    continue
                yield reader.line_num, row


def _is_ignorable(row: list[str]) -> bool:
    if not row or (len(row) == 1 and not row[0].strip()):
        return True
    return row[0].startswith(COMMENT_PREFIX)
