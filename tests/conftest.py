from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterator

import pytest

from empd.inspector import PathInspector


class Streams:
    """In-memory stdin/stdout/stderr for driving an inspector in tests."""

    def __init__(self, answer: str = "") -> None:
        self.stdin = io.StringIO(answer)
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def answer(self, text: str) -> "Streams":
        self.stdin = io.StringIO(text)
        return self

    def inspector(self) -> PathInspector:
        return PathInspector(stdin=self.stdin, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def streams() -> Streams:
    return Streams()


@pytest.fixture
def dangling_link(tmp_path: Path) -> Path:
    """Provide a symlink whose destination does not exist."""
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "missing-target")
    return link


@pytest.fixture(autouse=True)
def _reset_empd_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("empd")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
