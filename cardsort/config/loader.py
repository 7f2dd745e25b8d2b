from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ColumnShape, RunConfig, ValueKind

"""Survey config loader.

Responsibilities:
- Load the YAML file (config/surveys.yml by default)
- Validate it against the bundled JSON schema
- Build one RunConfig per named survey (a per-survey ignore_list replaces the
  top-level default)
- Select the survey to run
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/surveys.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SurveysConfig:
    surveys: dict[str, RunConfig]
    default_survey: str | None = None

    @property
    def names(self) -> list[str]:
        return list(self.surveys)

    def select(self, name: str | None = None) -> RunConfig:
        """Return the named survey, the default one, or the only one defined."""
        if name is None:
            name = self.default_survey
        if name is None:
            if len(self.surveys) == 1:
                return next(iter(self.surveys.values()))
            raise ConfigError(f"no survey selected; choose one of: {', '.join(self.names)}")
        try:
            return self.surveys[name]
        except KeyError:
            raise ConfigError(f"unknown survey '{name}'; choose one of: {', '.join(self.names)}") from None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path)
        suffix = f" (at {where})" if where else ""
        raise ConfigError(f"config validation failed: {e.message}{suffix}") from e


def _build_run_config(name: str, raw: dict[str, Any], default_ignore: list[str]) -> RunConfig:
    shapes = tuple(
        ColumnShape(
            source_column=c["source"],
            output_name=c["name"],
            value_kind=ValueKind.parse(c.get("kind", "text")),
        )
        for c in raw["columns"]
    )
    return RunConfig(
        name=name,
        input_path=raw["input"],
        output_path=raw["output"],
        column_shapes=shapes,
        ignore_list=frozenset(raw.get("ignore_list", default_ignore)),
        skip_rows=raw.get("skip_rows", 0),
    )


def load_config(path: Path) -> SurveysConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    default_ignore = data.get("ignore_list", [])
    surveys = {
        name: _build_run_config(name, raw, default_ignore)
        for name, raw in data["surveys"].items()
    }
    default_survey = data.get("default_survey")
    if default_survey is not None and default_survey not in surveys:
        raise ConfigError(f"default_survey '{default_survey}' is not defined under surveys")
    return SurveysConfig(surveys=surveys, default_survey=default_survey)
