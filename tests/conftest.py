# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from cardsort.logging.init import reset_logging
from cardsort.models.config_models import ColumnShape, RunConfig, ValueKind


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind the stream at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CARDSORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """default_survey: exit
ignore_list: ["n/a", "no"]
surveys:
  exit:
    input: ./data/exit.csv
    output: ./data/out/exit.json
    columns:
      - {source: Q3, name: IU, kind: text}
      - {source: Q4, name: AIC, kind: text}
  grades:
    input: ./data/grades.csv
    output: ./data/out/grades.json
    ignore_list: []
    columns:
      - {source: StudentNumber, name: StudentNumber, kind: number}
      - {source: FinalExamGrade, name: Grade, kind: number}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "surveys.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def exit_survey_csv(temp_workdir: Path) -> Path:
    """The Q3/Q4 scenario: one kept row, one blank row, one row with Q4 ignored."""
    f = temp_workdir / "data" / "exit.csv"
    f.write_text(
        'Q3,Q4\n'
        '" Hello ",No\n'
        ',\n'
        'Yes but unsure,no\n',
        encoding="utf-8",
    )
    return f


@pytest.fixture()
def grades_csv(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "grades.csv"
    f.write_text(
        "StudentNumber,FinalExamGrade\n"
        "12345678,87\n"
        "23456789,twelve\n",
        encoding="utf-8",
    )
    return f


@pytest.fixture()
def exit_shapes() -> tuple[ColumnShape, ...]:
    return (
        ColumnShape("Q3", "IU", ValueKind.TEXT),
        ColumnShape("Q4", "AIC", ValueKind.TEXT),
    )


@pytest.fixture()
def exit_run_config(temp_workdir: Path, exit_shapes) -> RunConfig:
    return RunConfig(
        name="exit",
        input_path=str(temp_workdir / "data" / "exit.csv"),
        output_path=str(temp_workdir / "data" / "out" / "exit.json"),
        column_shapes=exit_shapes,
        ignore_list=frozenset({"no"}),
    )
