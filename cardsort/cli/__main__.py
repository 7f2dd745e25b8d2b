from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from cardsort.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from cardsort.csvfile.reader import CsvReadError, read_survey_csv
from cardsort.logging.diagnostic_log import DiagnosticLogBuffer
from cardsort.logging.init import get_logger, log_summary, set_debug, setup_logging
from cardsort.models.config_models import RunConfig
from cardsort.services.card_text import render_card_text
from cardsort.services.pipeline import PipelineError, run_pipeline
from cardsort.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the survey config (--config > $CARDSORT_CONFIG > config/surveys.yml)
- Select one named survey
- Run the pipeline, print card text to stdout, log the SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

CONFIG_ENV_VAR = "CARDSORT_CONFIG"
INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv. Existing environment variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="cardsort",
        description="Shape survey CSV exports into structured rows and card-sort text",
    )
    p.add_argument("survey", nargs="?", help="Named survey from the config (default: default_survey)")
    p.add_argument("--config", type=Path, default=None, help="Survey config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--list", action="store_true", help="List configured surveys and exit")
    p.add_argument("--inspect-data", action="store_true", help="Print CSV headers & first rows then exit")
    p.add_argument("--no-cards", action="store_true", help="Do not print card text")
    p.add_argument("--diagnostics", action="store_true", help="Write cell diagnostics to logs/ as JSON Lines")
    return p.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _inspect_data(run_cfg: RunConfig) -> int:
    try:
        survey = read_survey_csv(Path(run_cfg.input_path), skip_rows=run_cfg.skip_rows)
    except CsvReadError as e:
        get_logger().error(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {survey.path.name} records={len(survey.records)}")
    print(f"  columns={survey.columns}")
    configured = [s.source_column for s in run_cfg.column_shapes]
    missing = [c for c in configured if c not in survey.columns]
    print(f"  configured={configured} missing={missing}")
    for record in survey.records[:INSPECT_SAMPLE_ROWS]:
        print("    sample_row=", {c: record.get(c) for c in configured})
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    config_path = _config_path(args)
    try:
        cfg = load_config(config_path)
        if args.list:
            for name in cfg.names:
                print(name)
            return EXIT_SUCCESS
        run_cfg = cfg.select(args.survey)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"survey={run_cfg.name} input={run_cfg.input_path}")

    if args.inspect_data:
        return _inspect_data(run_cfg)

    diagnostics = DiagnosticLogBuffer() if args.diagnostics else None
    try:
        run = run_pipeline(run_cfg, diagnostics=diagnostics)
    except PipelineError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if diagnostics is not None:
        try:
            written = diagnostics.flush()
        except OSError as e:
            logger.warning(f"diagnostics log not written: {e}")
        else:
            if written is not None:
                logger.info(f"diagnostics written to {written}")

    if not args.no_cards:
        sys.stdout.write(render_card_text(run.rows))
        sys.stdout.flush()

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(run.result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
