"""CLI command tests."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from ui.cli.cli import app

runner = CliRunner()

SAMPLE_INPUT = """\
Step C must be finished before step A can begin.
Step C must be finished before step F can begin.
Step A must be finished before step B can begin.
Step A must be finished before step D can begin.
Step B must be finished before step E can begin.
Step D must be finished before step E can begin.
Step F must be finished before step E can begin.
"""


def write_inputs(tmp_path: Path, text: str = SAMPLE_INPUT) -> tuple[Path, Path]:
    input_file = tmp_path / "input7.txt"
    input_file.write_text(text, encoding="utf-8")
    config_file = tmp_path / "test.yaml"
    config_file.write_text(
        "logging:\n"
        "  level: WARNING\n"
        "paths:\n"
        f"  journal_path: {tmp_path / 'runs.jsonl'}\n",
        encoding="utf-8",
    )
    return input_file, config_file


def test_order_command(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    result = runner.invoke(app, ["order", str(input_file), "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Completion order: CABDFE" in result.output


def test_time_command(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    result = runner.invoke(
        app,
        ["time", str(input_file), "-w", "2", "--base-offset", "0", "--config", str(config_file)],
    )

    assert result.exit_code == 0
    assert "Total time: 15" in result.output


def test_run_command_json_and_journal(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    result = runner.invoke(
        app,
        [
            "run", str(input_file),
            "--workers", "2", "--base-offset", "0",
            "--json", "--config", str(config_file),
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["order"] == ["C", "A", "B", "D", "F", "E"]
    assert payload["total_time"] == 15
    journal = (tmp_path / "runs.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(journal) == 1


def test_run_command_timeline(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    result = runner.invoke(
        app,
        [
            "run", str(input_file),
            "-w", "2", "--base-offset", "0",
            "--timeline", "--config", str(config_file),
        ],
    )

    assert result.exit_code == 0
    assert "worker 1: F 3-9" in result.output
    assert "worker 0: E 10-15" in result.output


def test_cycle_exits_with_error(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(
        tmp_path,
        "Step A must be finished before step B can begin.\n"
        "Step B must be finished before step A can begin.\n",
    )
    result = runner.invoke(app, ["order", str(input_file), "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Cyclic" in result.output


def test_strict_mode_rejects_malformed_line(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path, SAMPLE_INPUT + "not a step\n")
    result = runner.invoke(
        app, ["order", str(input_file), "--strict", "--config", str(config_file)]
    )

    assert result.exit_code == 1
    assert "Cannot read dependencies" in result.output


def test_non_utf8_input_exits_with_error(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    input_file.write_bytes(SAMPLE_INPUT.encode("utf-8") + b"\xff\xfe\n")
    result = runner.invoke(app, ["order", str(input_file), "--config", str(config_file)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "not valid UTF-8" in result.output


def test_empty_config_sections(tmp_path: Path) -> None:
    input_file, config_file = write_inputs(tmp_path)
    config_file.write_text("logging:\npaths:\n", encoding="utf-8")
    result = runner.invoke(app, ["order", str(input_file), "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Completion order: CABDFE" in result.output


def test_config_show(tmp_path: Path) -> None:
    _, config_file = write_inputs(tmp_path)
    result = runner.invoke(app, ["config", "show", "--config", str(config_file)])

    assert result.exit_code == 0
    config = json.loads(result.output)
    assert config["scheduler"]["workers"] == 5
    assert config["logging"]["level"] == "WARNING"
