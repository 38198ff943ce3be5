from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import Callable, Iterator

import pytest

ScriptFactory = Callable[[str, str], Path]


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def make_script(bin_dir: Path) -> ScriptFactory:
    """Write an executable shell script into ``bin_dir`` and return its path."""

    def factory(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture(autouse=True)
def restore_library_log_level() -> Iterator[None]:
    logger = logging.getLogger("command_exec")
    level = logger.level
    yield
    logger.setLevel(level)
