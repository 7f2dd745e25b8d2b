from __future__ import annotations

import json
import math
from pathlib import Path

import pytest

from cardsort.logging.diagnostic_log import DiagnosticLogBuffer
from cardsort.models.cell_issue import IssueKind
from cardsort.models.config_models import ColumnShape, RunConfig, ValueKind
from cardsort.models.output_row import ROW_ID_FIELD, OutputField
from cardsort.services.card_text import render_card_text
from cardsort.services.pipeline import PipelineError, run_pipeline

"""End-to-end pipeline runs against real CSV files on disk."""


QUALTRICS_EXPORT = (
    "\ufeffStartDate,EndDate,Q3,Q4,Q5\n"
    '"Start Date","End Date","How did AI influence your understanding?","Any concerns?","Hours per week"\n'
    '"{""ImportId"":""startDate""}","{""ImportId"":""endDate""}","{""ImportId"":""QID3""}","{""ImportId"":""QID4""}","{""ImportId"":""QID5""}"\n'
    '2023-12-01,2023-12-01,"It helped me\nunderstand tests",None,4\n'
    "2023-12-01,2023-12-01,,,\n"
    "2023-12-02,2023-12-02,N/A,Worried about cheating,lots\n"
    "2023-12-02,2023-12-02,  yes  ,NO,2.5\n"
)


@pytest.fixture
def qualtrics_config(temp_workdir: Path) -> RunConfig:
    (temp_workdir / "data" / "export.csv").write_bytes(QUALTRICS_EXPORT.encode("utf-8"))
    return RunConfig(
        name="cpsc310_23w1_exit",
        input_path=str(temp_workdir / "data" / "export.csv"),
        output_path=str(temp_workdir / "data" / "out.json"),
        column_shapes=(
            ColumnShape("Q3", "InfluenceUnderstanding", ValueKind.TEXT),
            ColumnShape("Q4", "AIConcerns", ValueKind.TEXT),
            ColumnShape("Q5", "Hours", ValueKind.NUMBER),
            ColumnShape("Q9", "NotInExport", ValueKind.TEXT),
        ),
        ignore_list=frozenset({"n/a", "none", "no", "yes"}),
        skip_rows=2,
    )


def test_qualtrics_export_end_to_end(qualtrics_config: RunConfig):
    run = run_pipeline(qualtrics_config)

    assert len(run.rows) == 3
    assert run.rows[0] == [
        OutputField(ROW_ID_FIELD, 0),
        OutputField("InfluenceUnderstanding", "It helped me understand tests"),
        OutputField("Hours", 4),
    ]
    assert run.rows[1][0] == OutputField(ROW_ID_FIELD, 1)
    assert run.rows[1][1] == OutputField("AIConcerns", "Worried about cheating")
    assert run.rows[1][2].name == "Hours" and math.isnan(run.rows[1][2].value)
    assert run.rows[2] == [OutputField(ROW_ID_FIELD, 2), OutputField("Hours", 2.5)]

    result = run.result
    assert result.survey == "cpsc310_23w1_exit"
    assert result.total_records == 4
    assert result.kept_rows == 3
    assert result.dropped_records == 1
    assert result.missing_cells == 4  # Q9 absent from every record
    assert result.non_numeric_cells == 1
    assert result.elapsed_seconds >= 0


def test_qualtrics_export_outputs(qualtrics_config: RunConfig):
    run = run_pipeline(qualtrics_config)

    data = json.loads(Path(qualtrics_config.output_path).read_text(encoding="utf-8"))
    assert data[1][2] == {"name": "Hours", "value": None}
    assert render_card_text(run.rows).splitlines()[::3] == [
        "It helped me understand tests (r0_InfluenceUnderstanding)",
        "4 (r0_Hours)",
        "Worried about cheating (r1_AIConcerns)",
        "NaN (r1_Hours)",
        "2.5 (r2_Hours)",
    ]


def test_diagnostics_buffer_receives_issues(qualtrics_config: RunConfig, tmp_path: Path):
    buf = DiagnosticLogBuffer(logs_dir=tmp_path / "logs")

    run = run_pipeline(qualtrics_config, diagnostics=buf)

    assert len(buf) == len(run.issues) == 5
    kinds = [i.kind for i in run.issues]
    assert kinds.count(IssueKind.MISSING_COLUMN) == 4
    assert kinds.count(IssueKind.NON_NUMERIC) == 1
    lines = buf.flush().read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["file"] == "export.csv"


def test_rerun_is_deterministic(qualtrics_config: RunConfig):
    first = run_pipeline(qualtrics_config)
    first_json = Path(qualtrics_config.output_path).read_text(encoding="utf-8")
    second = run_pipeline(qualtrics_config)

    assert [[f.to_dict() for f in r] for r in first.rows] == [[f.to_dict() for f in r] for r in second.rows]
    assert Path(qualtrics_config.output_path).read_text(encoding="utf-8") == first_json


def test_missing_input_is_fatal(temp_workdir: Path):
    cfg = RunConfig(
        name="x",
        input_path=str(temp_workdir / "data" / "absent.csv"),
        output_path=str(temp_workdir / "data" / "out.json"),
        column_shapes=(ColumnShape("Q3", "IU"),),
    )
    with pytest.raises(PipelineError) as e:
        run_pipeline(cfg)
    assert "input file not found" in str(e.value)
    assert not (temp_workdir / "data" / "out.json").exists()
