"""Tests for the record-status command and its exit-code policy."""

import pytest
from typer.testing import CliRunner

import config
from purpleair import cli
from purpleair.models import Outcome

runner = CliRunner()


class FakePipeline:
    outcome = Outcome.ok([], written=False)
    configs = []

    def __init__(self, cfg):
        FakePipeline.configs.append(cfg)

    def run(self):
        return FakePipeline.outcome


@pytest.fixture
def fake_pipeline(monkeypatch):
    FakePipeline.configs = []
    FakePipeline.outcome = Outcome.ok([], written=False)
    monkeypatch.setattr(cli, "IngestPipeline", FakePipeline)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(config, "SENSOR_ID", "42")
    monkeypatch.setattr(config, "API_GENERATION", "legacy_show")
    return FakePipeline


def test_dry_run_flag_reaches_config(fake_pipeline):
    result = runner.invoke(cli.app, ["record-status", "--no-log", "--dry-run"])

    assert result.exit_code == 0
    assert fake_pipeline.configs[0].dry_run is True


def test_failed_cycle_exits_zero_by_default(fake_pipeline):
    fake_pipeline.outcome = Outcome.failure("HTTPError: 502")

    result = runner.invoke(cli.app, ["record-status", "--no-log", "--no-strict"])

    assert result.exit_code == 0


def test_failed_cycle_exits_one_when_strict(fake_pipeline):
    fake_pipeline.outcome = Outcome.failure("HTTPError: 502")

    result = runner.invoke(cli.app, ["record-status", "--no-log", "--strict"])

    assert result.exit_code == 1


def test_successful_cycle_exits_zero_when_strict(fake_pipeline):
    result = runner.invoke(cli.app, ["record-status", "--no-log", "--strict"])

    assert result.exit_code == 0


def test_missing_sensor_id_is_reported(fake_pipeline, monkeypatch):
    monkeypatch.setattr(config, "SENSOR_ID", None)

    lenient = runner.invoke(cli.app, ["record-status", "--no-log", "--no-strict"])
    strict = runner.invoke(cli.app, ["record-status", "--no-log", "--strict"])

    assert lenient.exit_code == 0
    assert strict.exit_code == 1
    assert fake_pipeline.configs == []
