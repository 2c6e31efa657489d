"""Pytest fixtures for webp-wrapper tests."""

import stat
import sys
import textwrap
from pathlib import Path
from typing import Callable, Optional

import pytest

from webp_wrapper.config import Settings
from webp_wrapper.decoder import DecoderWrapper
from webp_wrapper.encoder import EncoderWrapper
from webp_wrapper.platforms import Platform

USER_PATH_VAR = "WEBP_TEST_USER_PATH"
MACHINE_PATH_VAR = "WEBP_TEST_MACHINE_PATH"

# Honors the "-o <output> -- <input>" grammar and "-version", copying the
# input to the output unchanged
ECHO_TOOL = """
import sys

args = sys.argv[1:]
if args == ["-version"]:
    sys.stdout.write("0.6.1\\n")
    sys.exit(0)

output = args[args.index("-o") + 1]
source = args[args.index("--") + 1]

if source == "-":
    data = sys.stdin.buffer.read()
else:
    with open(source, "rb") as handle:
        data = handle.read()

if output == "-":
    sys.stdout.buffer.write(data)
else:
    with open(output, "wb") as handle:
        handle.write(data)
"""

ARGV_TOOL = """
import json
import sys

sys.stdout.write(json.dumps(sys.argv[1:]))
"""

SILENT_TOOL = """
import sys

sys.stdout.write("  \\n")
"""

FAILING_TOOL = """
import sys

sys.stdin.buffer.read()
sys.exit(3)
"""


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment."""
    return Settings(
        _env_file=None,
        search_path_variables=[USER_PATH_VAR, MACHINE_PATH_VAR],
        buffer_size=4096,
    )


@pytest.fixture
def make_tool(tmp_path) -> Callable[..., Path]:
    """Factory writing an executable Python script into a directory."""

    def _make_tool(body: str, name: str = "cwebp", directory: Optional[Path] = None) -> Path:
        directory = directory or tmp_path / "bin"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make_tool


@pytest.fixture
def echo_tool(make_tool) -> Path:
    return make_tool(ECHO_TOOL)


@pytest.fixture
def encoder(echo_tool, settings) -> EncoderWrapper:
    return EncoderWrapper(str(echo_tool), settings=settings, platform=Platform.LINUX)


@pytest.fixture
def decoder(make_tool, settings) -> DecoderWrapper:
    tool = make_tool(ECHO_TOOL, name="dwebp")
    return DecoderWrapper(str(tool), settings=settings, platform=Platform.LINUX)


@pytest.fixture
def sample_bytes() -> bytes:
    """Deterministic payload larger than a pipe buffer."""
    return bytes(range(256)) * 1024
