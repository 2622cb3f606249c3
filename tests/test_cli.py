"""End-to-end tests for the command-line interface."""

import logging

import pytest
from typer.testing import CliRunner

from braker_cli import __version__
from braker_cli.cli import app as app_module

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(app_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(app_module, "CONFIG_FILE", config_dir / "config.ini")
    return config_dir / "config.ini"


def extract_args(fake_engine, disc, output_dir, *extra: str) -> list[str]:
    return [
        "extract",
        str(disc),
        "--engine",
        str(fake_engine),
        "--output-dir",
        str(output_dir),
        *extra,
    ]


def test_version():
    result = runner.invoke(app_module.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.parametrize(
    "flags, level",
    [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
)
def test_verbose_flag_sets_log_level(flags, level):
    logger = logging.getLogger("braker_cli")
    previous = logger.level
    try:
        result = runner.invoke(app_module.app, [*flags, "validate"])

        assert result.exit_code == 0, result.output
        assert logger.level == level
    finally:
        logger.setLevel(previous)


def test_scan_lists_tracks(fake_engine, disc, handbrake_report):
    fake_engine.report(handbrake_report)

    result = runner.invoke(
        app_module.app, ["scan", str(disc), "--engine", str(fake_engine)]
    )

    assert result.exit_code == 0, result.output
    assert "0:26" in result.output
    assert "0:01" in result.output


def test_scan_rejects_folder_without_video_ts(fake_engine, tmp_path):
    result = runner.invoke(
        app_module.app, ["scan", str(tmp_path), "--engine", str(fake_engine)]
    )

    assert result.exit_code == 1
    assert "InvalidSourceError" in result.output
    assert fake_engine.calls() == []


def test_extract_converts_then_skips(fake_engine, disc, output_dir, handbrake_report):
    fake_engine.report(handbrake_report)

    first = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir)
    )
    assert first.exit_code == 0, first.output
    assert len(fake_engine.conversion_calls()) == 5
    assert (output_dir / "High Profile_MY_DISC_4.mp4").exists()

    second = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir)
    )
    assert second.exit_code == 0, second.output
    assert len(fake_engine.conversion_calls()) == 5


def test_extract_selection_options(fake_engine, disc, output_dir, handbrake_report):
    fake_engine.report(handbrake_report)

    result = runner.invoke(
        app_module.app,
        extract_args(
            fake_engine,
            disc,
            output_dir,
            "--min-minutes",
            "5",
            "--track",
            "2",
            "--track",
            "6",
            "--container",
            "mkv",
        ),
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in output_dir.iterdir()) == [
        "High Profile_MY_DISC_6.mkv"
    ]


def test_extract_reports_failures(fake_engine, disc, output_dir, handbrake_report):
    fake_engine.report(handbrake_report)
    fake_engine.fail_tracks("5")

    result = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir)
    )

    assert result.exit_code == 1
    assert "BatchError" in result.output
    assert not (output_dir / "High Profile_MY_DISC_5.mp4").exists()
    assert (output_dir / "High Profile_MY_DISC_7.mp4").exists()


def test_extract_dry_run(fake_engine, disc, output_dir, handbrake_report):
    fake_engine.report(handbrake_report)

    result = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir, "--dry-run")
    )

    assert result.exit_code == 0, result.output
    assert "Dry Run Summary" in result.output
    assert fake_engine.conversion_calls() == []
    assert not output_dir.exists()


def test_extract_parse_error_aborts_before_conversion(
    fake_engine, disc, output_dir, tmp_path
):
    report = tmp_path / "bad_report.txt"
    report.write_text("+ title 1:\n  + duration: 00:??:00\n", encoding="utf-8")
    fake_engine.report(report)

    result = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir)
    )

    assert result.exit_code == 1
    assert "ParseError" in result.output
    assert fake_engine.conversion_calls() == []


def test_extract_writes_json_log(fake_engine, disc, output_dir, handbrake_report):
    fake_engine.report(handbrake_report)

    result = runner.invoke(
        app_module.app, extract_args(fake_engine, disc, output_dir, "--log-json")
    )

    assert result.exit_code == 0, result.output
    logs = list((app_module.CONFIG_DIR / "logs").glob("braker_*.jsonl"))
    assert len(logs) == 1
    assert '"event": "batch_completed"' in logs[0].read_text(encoding="utf-8")


def test_init_then_validate(isolated_config):
    result = runner.invoke(
        app_module.app,
        ["init", "--engine", "/opt/hb/HandBrakeCLI", "--profile", "Fast 1080p30"],
    )
    assert result.exit_code == 0, result.output
    assert isolated_config.is_file()

    result = runner.invoke(app_module.app, ["validate"])
    assert result.exit_code == 0, result.output
    assert "Fast 1080p30" in result.output


def test_init_refuses_to_overwrite_without_confirmation(isolated_config):
    runner.invoke(app_module.app, ["init"])

    result = runner.invoke(app_module.app, ["init"], input="n\n")

    assert result.exit_code == 1


def test_show_config_requires_file():
    result = runner.invoke(app_module.app, ["--show-config"])

    assert result.exit_code == 1
    assert "Config file not found" in result.output
