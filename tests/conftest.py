"""Shared fixtures: a scriptable stand-in for HandBrakeCLI and a disc folder."""

import stat
import sys
from pathlib import Path

import pytest

TESTDATA = Path(__file__).resolve().parent / "testdata"

_FAKE_ENGINE = """\
#!{python}
import os
import sys

args = sys.argv[1:]

log_path = os.environ.get("FAKE_ENGINE_LOG")
if log_path:
    with open(log_path, "a", encoding="utf-8") as f:
        f.write("\\t".join(args) + "\\n")


def opt(name):
    return args[args.index(name) + 1] if name in args else None


track = opt("-t")

if track == "0":
    report = os.environ.get("FAKE_ENGINE_REPORT")
    if report:
        with open(report, encoding="utf-8") as f:
            sys.stdout.write(f.read())
    sys.exit(int(os.environ.get("FAKE_ENGINE_SCAN_STATUS", "0")))

if track in os.environ.get("FAKE_ENGINE_FAIL", "").split(","):
    print("Encode failed for title " + track, file=sys.stderr)
    sys.exit(3)

if track in os.environ.get("FAKE_ENGINE_NO_OUTPUT", "").split(","):
    sys.exit(0)

with open(opt("-o"), "w", encoding="utf-8") as f:
    f.write("converted " + track)
"""

_ENGINE_VARS = [
    "FAKE_ENGINE_LOG",
    "FAKE_ENGINE_REPORT",
    "FAKE_ENGINE_SCAN_STATUS",
    "FAKE_ENGINE_FAIL",
    "FAKE_ENGINE_NO_OUTPUT",
]


class FakeEngine:
    def __init__(self, path: Path, log_path: Path, monkeypatch):
        self.path = path
        self.log_path = log_path
        self._monkeypatch = monkeypatch

    def __str__(self) -> str:
        return str(self.path)

    def calls(self) -> list[list[str]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [line.split("\t") for line in lines]

    def conversion_calls(self) -> list[list[str]]:
        return [call for call in self.calls() if call[call.index("-t") + 1] != "0"]

    def fail_tracks(self, *track_ids: str) -> None:
        self._monkeypatch.setenv("FAKE_ENGINE_FAIL", ",".join(track_ids))

    def skip_output_for(self, *track_ids: str) -> None:
        self._monkeypatch.setenv("FAKE_ENGINE_NO_OUTPUT", ",".join(track_ids))

    def report(self, path: Path, status: int = 0) -> None:
        self._monkeypatch.setenv("FAKE_ENGINE_REPORT", str(path))
        self._monkeypatch.setenv("FAKE_ENGINE_SCAN_STATUS", str(status))


@pytest.fixture
def fake_engine(tmp_path, monkeypatch) -> FakeEngine:
    for key in _ENGINE_VARS:
        monkeypatch.delenv(key, raising=False)

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    path = bin_dir / "HandBrakeCLI"
    path.write_text(_FAKE_ENGINE.format(python=sys.executable), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log_path = tmp_path / "engine.log"
    monkeypatch.setenv("FAKE_ENGINE_LOG", str(log_path))
    return FakeEngine(path, log_path, monkeypatch)


@pytest.fixture
def disc(tmp_path) -> Path:
    source = tmp_path / "MY_DISC"
    (source / "VIDEO_TS").mkdir(parents=True)
    return source


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def handbrake_report() -> Path:
    return TESTDATA / "HandbrakeTrackInfoOutput.txt"
