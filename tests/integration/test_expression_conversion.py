"""Integration tests for end-to-end expression conversion."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from core.config import ConverterConfig
from core.errors import FlyExpressionSourceError
from core.types import ConversionOptions
from ingest.pipeline import convert_expression_data
from tests.fakes import write_tsv
from tests.fixture_paths import fixture_path


def _config(tmp_path: Path) -> ConverterConfig:
    return replace(ConverterConfig.from_env(), output_root=tmp_path, id_resolver_path=None)


def _fixture_options(output_dir: Path, id_resolver_path: Path | None) -> ConversionOptions:
    return ConversionOptions(
        score_path=fixture_path("scores.tsv"),
        stage_path=fixture_path("stages.tsv"),
        term_path=fixture_path("terms.tsv"),
        output_dir=output_dir,
        id_resolver_path=id_resolver_path,
    )


def _read_items(output_dir: Path) -> list[dict[str, object]]:
    lines = (output_dir / "items.jsonl").read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines]


def test_single_row_conversion_emits_one_joined_observation(tmp_path: Path) -> None:
    """One valid row should produce one organism, gene, and observation."""
    options = ConversionOptions(
        score_path=write_tsv(
            tmp_path / "scores.tsv",
            [["id", "FBgn0000003", "x", "x", "modENCODE_mRNA-Seq_U", "x", "01", "6825", "ME_07"]],
        ),
        stage_path=write_tsv(tmp_path / "stages.tsv", [["embryo", "01", "Embryonic Stage 1"]]),
        term_path=write_tsv(
            tmp_path / "terms.tsv",
            [["modENCODE", "T07", "x", "No expression", "y", "z"]],
        ),
        output_dir=tmp_path / "out",
        id_resolver_path=write_tsv(tmp_path / "ids.tsv", [["7227", "FBgn0000003"]]),
    )

    summary = convert_expression_data(options, _config(tmp_path))
    items = _read_items(tmp_path / "out")

    assert summary.observations_emitted == 1 and summary.genes_created == 1
    assert [item["class"] for item in items] == ["Organism", "Gene", "RNASeqResult"]
    assert items[1]["attributes"] == {"primaryIdentifier": "FBgn0000003"}
    assert items[2]["attributes"] == {
        "stage": "Embryonic Stage 1",
        "expressionScore": 6825,
        "expressionLevel": "No expression",
    }
    assert items[2]["references"] == {"gene": items[1]["id"]}


def test_fixture_conversion_with_resolver_drops_unknown_genes(tmp_path: Path) -> None:
    """Resolver-backed runs should skip identifiers that are not primary."""
    summary = convert_expression_data(
        _fixture_options(tmp_path, fixture_path("gene_ids.tsv")),
        _config(tmp_path),
    )

    assert summary.rows_read == 6
    assert summary.observations_emitted == 3 and summary.genes_created == 2
    assert summary.bad_scores == 1
    assert summary.skipped_rows == {"foreign_source": 1, "short_row": 1, "unresolved_gene": 1}


def test_fixture_conversion_without_resolver_passes_identifiers_through(tmp_path: Path) -> None:
    """Without resolver data every modENCODE row's gene should resolve."""
    summary = convert_expression_data(_fixture_options(tmp_path, None), _config(tmp_path))
    stages = [
        item["attributes"]["stage"]
        for item in _read_items(tmp_path)
        if item["class"] == "RNASeqResult"
    ]

    assert summary.observations_emitted == 4 and summary.genes_created == 3
    assert stages == ["Embryonic Stage 1", "Embryo 0-2 hr", "L3_larvae", "Embryonic Stage 1"]


def test_conversion_writes_summary_file(tmp_path: Path) -> None:
    """A run summary with dataset metadata should sit next to the items."""
    convert_expression_data(_fixture_options(tmp_path, None), _config(tmp_path))

    payload = json.loads((tmp_path / "conversion_summary.json").read_text(encoding="utf-8"))

    assert payload["data_source"] == "modENCODE"
    assert payload["dataset_title"] == "FlyBase expression data"
    assert payload["observations_emitted"] == 4


def test_conversion_tolerates_undecodable_score_row(tmp_path: Path) -> None:
    """A bad byte in one score row should not cost the other rows."""
    valid_row = b"id\tFBgn0000003\tx\tx\tmodENCODE_mRNA-Seq_U\tx\t01\t6825\tME_07\n"
    bad_row = b"id\tFBgn0000008\tx\tx\t\xffmodENCODE\tx\t01\t12\tME_07\n"
    score_path = tmp_path / "scores.tsv"
    score_path.write_bytes(valid_row + bad_row + valid_row)
    options = replace(_fixture_options(tmp_path / "out", None), score_path=score_path)

    summary = convert_expression_data(options, _config(tmp_path))

    assert summary.rows_read == 3 and summary.observations_emitted == 2
    assert summary.skipped_rows == {"foreign_source": 1}


def test_failed_run_keeps_previous_output_consistent(tmp_path: Path) -> None:
    """A run aborted on a missing source should not mix old and new output."""
    output_dir = tmp_path / "out"
    convert_expression_data(_fixture_options(output_dir, None), _config(tmp_path))
    previous_items = (output_dir / "items.jsonl").read_text(encoding="utf-8")
    previous_summary = (output_dir / "conversion_summary.json").read_text(encoding="utf-8")
    broken_options = replace(
        _fixture_options(output_dir, None),
        term_path=tmp_path / "missing_terms.tsv",
    )

    with pytest.raises(FlyExpressionSourceError):
        convert_expression_data(broken_options, _config(tmp_path))

    assert (output_dir / "items.jsonl").read_text(encoding="utf-8") == previous_items
    summary_text = (output_dir / "conversion_summary.json").read_text(encoding="utf-8")
    assert summary_text == previous_summary
    assert sorted(path.name for path in output_dir.iterdir()) == [
        "conversion_summary.json",
        "items.jsonl",
    ]

