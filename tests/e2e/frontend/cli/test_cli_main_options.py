"""End-to-end runs of the top-level ``datamodeler`` options.

Covers console verbosity (-v/-q), per-logger overrides (-L and
DATAMODELER_LOGGER_LEVELS), --debug formatting and the flight recorder
written to --log-path.
"""

import re
from pathlib import Path

import pytest

# pylint: disable=magic-value-comparison

LEVEL_MESSAGES = {
    "DEBUG": "app debug record",
    "INFO": "app info record",
    "WARNING": "app warning record",
    "ERROR": "app error record",
    "CRITICAL": "app critical record",
}
ORDER = list(LEVEL_MESSAGES)


@pytest.mark.parametrize(
    "flags, lowest",
    [
        ([], "WARNING"),
        (["-v"], "INFO"),
        (["-vv"], "DEBUG"),
        (["-vvv"], "DEBUG"),
        (["-q"], "ERROR"),
        (["-qq"], "CRITICAL"),
        (["-v", "-q"], "WARNING"),
    ],
)
def test_console_verbosity(cli, flags, lowest):
    """The console shows exactly the records at or above the chosen level."""
    result = cli(*flags)
    assert result.exit_code == 0, result.output
    cutoff = ORDER.index(lowest)
    for index, (_, message) in enumerate(LEVEL_MESSAGES.items()):
        assert (message in result.output) is (index >= cutoff), message


@pytest.mark.parametrize(
    "flags, env",
    [
        (["-vv", "-L", "vendor.driver=INFO"], None),
        (["-vv"], {"DATAMODELER_LOGGER_LEVELS": "vendor.driver=INFO"}),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_override_silences_library_debug(cli, flags, env):
    result = cli(*flags, env=env)
    assert result.exit_code == 0, result.output
    assert "lib debug record" not in result.output
    assert "lib info record" in result.output
    assert "app debug record" in result.output


def test_invalid_logger_override_is_rejected(cli):
    result = cli("-L", "vendor.driver")
    assert result.exit_code == 2
    assert "Expected NAME=LEVEL" in result.output


def test_debug_mode_adds_source_locations(cli):
    assert re.search(r"conftest\.py:\d+", cli("--debug").output)
    assert not re.search(r"conftest\.py:\d+", cli().output)


def test_flight_recorder_dumps_on_warning(cli, tmp_path):
    """A warning writes the DEBUG history up to that point to --log-path."""
    log_path = tmp_path / "recorder.log"
    result = cli("--log-path", str(log_path), "-L", "vendor.driver=INFO")
    assert result.exit_code == 0, result.output

    content = log_path.read_text(encoding="utf-8")
    for message in LEVEL_MESSAGES.values():
        assert message in content
    assert "lib info record" in content
    assert "lib debug record" not in content
    # nothing after the last warning-or-above record is flushed
    assert "app trailing debug record" not in content


@pytest.mark.parametrize(
    "flags, env",
    [(["--force-flush"], None), ([], {"DATAMODELER_FORCE_FLUSH_FLIGHT_RECORDER": "1"})],
    ids=["cli-flag", "env-var"],
)
def test_force_flush_writes_tail(cli, tmp_path, flags, env):
    log_path = tmp_path / "recorder.log"
    result = cli("--log-path", str(log_path), *flags, env=env)
    assert result.exit_code == 0, result.output
    assert "app trailing debug record" in log_path.read_text(encoding="utf-8")


def test_flight_recorder_can_be_disabled(cli, tmp_path):
    log_path = tmp_path / "recorder.log"
    result = cli("--log-path", str(log_path), "--no-flight-recorder")
    assert result.exit_code == 0, result.output
    assert not log_path.exists()


def test_flight_recorder_truncates_between_runs(cli, tmp_path):
    log_path = tmp_path / "recorder.log"

    def line_count() -> int:
        assert cli("--log-path", str(log_path)).exit_code == 0
        return len(log_path.read_text(encoding="utf-8").splitlines())

    assert line_count() == line_count()


def test_startup_banner(cli, tmp_path):
    """The first flight recorder lines describe the running program."""
    log_path = tmp_path / "startup.log"
    result = cli(
        "--log-path",
        str(log_path),
        "--force-flush",
        env={"DATAMODELER_LOGGER_LEVELS": "vendor.driver=INFO"},
    )
    assert result.exit_code == 0, result.output

    content = Path(log_path).read_text(encoding="utf-8")
    for pattern in (
        r"DATAMODELER \d+\.\d+\.\d+ - console=WARNING, flight-recorder=ON",
        r"Python: \d+\.\d+\.\d+",
        r"PID: \d+",
        r"Alembic: \d+\.\d+\.\d+",
        r"SQLAlchemy: \d+\.\d+\.\d+",
        r"Handlers: \[.*MemoryHandler.*\]",
        r"Flight recorder: path=.*startup\.log, capacity=2000, flush_on_close=True",
        r"Per-logger overrides: .*'vendor\.driver': 'INFO'",
    ):
        assert re.search(pattern, content), pattern
