"""Tests for the ipalloc CLI."""

import json

from typer.testing import CliRunner

from ipalloc.cli.main import app
from ipalloc.config import config

runner = CliRunner()


def test_info_table():
    result = runner.invoke(app, ["info", "192.168.1.10-20/24"])
    assert result.exit_code == 0
    assert "192.168.1.10" in result.output
    assert "255.255.255.0" in result.output


def test_info_json():
    result = runner.invoke(app, ["--format", "json", "info", "192.168.1.10-20"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["size"] == 10
    assert data["first"] == "192.168.1.10"
    assert data["last"] == "192.168.1.19"
    assert data["network"] is None


def test_info_default_range():
    result = runner.invoke(app, ["--format", "json", "info"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["range"] == "10.128.64.2-10.128.64.254/18"


def test_info_invalid_range():
    result = runner.invoke(app, ["info", "10.0.0.9-1"])
    assert result.exit_code == 1
    assert "Invalid IP range" in result.output


def test_plan_json_walkthrough():
    result = runner.invoke(
        app,
        [
            "--format",
            "json",
            "plan",
            "192.168.1.10-20",
            "-r",
            "192.168.1.11",
            "-n",
            "9",
            "--release",
            "192.168.1.12",
        ],
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["assigned"] == [
        f"192.168.1.{n}" for n in (10, 12, 13, 14, 15, 16, 17, 18, 19)
    ]
    assert "192.168.1.12" not in data["allocated"]
    assert data["reserved"] == ["192.168.1.11"]
    assert data["stats"]["remaining"] == 1
    assert data["stats"]["allocated"] == 8


def test_plan_exhaustion_warns():
    result = runner.invoke(app, ["plan", "192.168.1.10-13", "-n", "5"])
    assert result.exit_code == 0
    assert "exhausted" in result.output
    assert "remaining=0" in result.output


def test_plan_reserve_outside_range_warns():
    result = runner.invoke(app, ["plan", "192.168.1.10-13", "-r", "10.0.0.1"])
    assert result.exit_code == 0
    assert "not reserved" in result.output
    assert "reserved=0" in result.output


def test_callback_updates_config():
    runner.invoke(app, ["--log-level", "debug", "info", "10.0.0.1"])
    assert config.LOG_LEVEL.value == "debug"


def test_plan_oversized_range_fails_cleanly():
    result = runner.invoke(app, ["plan", "fd00::-fd00::ffff:ffff:ffff:ffff"])
    assert result.exit_code == 1
    assert "too large" in result.output
    assert "Traceback" not in result.output
