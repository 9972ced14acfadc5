"""Command line entry point for recording PurpleAir sensor readings.

`record-status` runs one reading cycle and maps its Outcome to an exit code.
"""

from __future__ import annotations

import logging

import typer

import config
from config import PipelineConfig
from logging_config import setup_logging
from purpleair.errors import ConfigError
from purpleair.pipeline import IngestPipeline

logger = logging.getLogger("purpleair.cli")

app = typer.Typer(add_completion=False, help="Record PurpleAir sensor readings.")


@app.callback()
def main() -> None:
    """PurpleAir sensor ingest."""


def _exit_code(success: bool, strict: bool) -> int:
    if success or not strict:
        return 0
    return 1


@app.command("record-status")
def record_status(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="don't write to the database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="increase verbosity"),
    log: bool = typer.Option(True, "--log/--no-log", help=f"log output to {config.LOG_FILE}"),
    json_logs: bool = typer.Option(False, "--json-logs", help="emit JSON log records"),
    strict: bool = typer.Option(
        config.STRICT_EXIT, "--strict/--no-strict", help="exit 1 when the cycle fails"
    ),
):
    """Record the current reading to the database."""
    setup_logging(log_file=config.LOG_FILE if log else None, json_format=json_logs, verbose=verbose)
    logger.info("starting")

    try:
        cfg = PipelineConfig.from_env(dry_run=dry_run, strict_exit=strict)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise typer.Exit(code=_exit_code(False, strict))

    outcome = IngestPipeline(cfg).run()
    if outcome.success:
        logger.info("Recorded %d points (written=%s)", len(outcome.points), outcome.written)
    else:
        logger.error("Reading cycle failed: %s", outcome.reason)
    raise typer.Exit(code=_exit_code(outcome.success, cfg.strict_exit))


if __name__ == "__main__":
    app()
