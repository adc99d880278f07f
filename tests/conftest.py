"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from core.constants import TAXON_FLY
from core.types import Organism


def pytest_sessionstart() -> None:
    """Add the project root and src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture
def fly_organism() -> Organism:
    """Return the fly organism singleton used by conversion runs."""
    return Organism(taxon_id=TAXON_FLY)
