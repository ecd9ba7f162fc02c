"""Integration test configuration and shared fixtures."""

from __future__ import annotations

import sys
import textwrap
from dataclasses import replace
from pathlib import Path

import pytest

from hardsub.settings import DEFAULT_SETTINGS, Settings

# Stand-in for ffmpeg: prints the same kind of stderr chatter, writes the
# output file, fails for videos whose name contains "fail" and hangs after
# the first status line for videos whose name contains "stall".
_FAKE_ENCODER = textwrap.dedent(
    """
    import sys
    import time
    from pathlib import Path

    args = sys.argv[1:]
    video = args[args.index("-i") + 1]
    output = next(arg for arg in reversed(args) if arg.endswith("_output.mp4"))

    err = sys.stderr
    err.write(f"Input #0, mov,mp4,m4a,3gp,3g2,mj2, from '{video}':\\n")
    if "noduration" not in video:
        err.write("  Duration: 00:00:10.00, start: 0.000000, bitrate: 900 kb/s\\n")
    for second in ("02.50", "05.00", "07.50", "10.00"):
        err.write(f"frame=  60 fps=30 q=28.0 size=     256kB time=00:00:{second} bitrate= 800.0kbits/s speed=2x\\r")
        err.flush()
        if "stall" in Path(video).name:
            time.sleep(60)
    err.write("\\n")

    if "fail" in Path(video).name:
        err.write("Error while filtering: Invalid argument\\n")
        sys.exit(1)

    Path(output).write_bytes(b"burned")
    """
)


@pytest.fixture
def fake_encoder(tmp_path: Path) -> Path:
    """Write the fake encoder script and return its path."""
    script = tmp_path / "fake_ffmpeg.py"
    script.write_text(_FAKE_ENCODER, encoding="utf-8")
    return script


@pytest.fixture
def fake_settings(fake_encoder: Path) -> Settings:
    """Settings that launch the fake encoder through the current interpreter."""
    return replace(DEFAULT_SETTINGS, encoder_command=(sys.executable, str(fake_encoder)))
