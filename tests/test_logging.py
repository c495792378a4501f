from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from common.logging import LEVEL_ENV, configure_logging, get_logger, level_from


@pytest.fixture
def root_level():
    root = logging.getLogger()
    saved = root.level
    yield root
    root.setLevel(saved)


def test_level_from_names_and_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LEVEL_ENV, raising=False)
    assert level_from("debug") == logging.DEBUG
    assert level_from(" Warning ") == logging.WARNING
    assert level_from(logging.ERROR) == logging.ERROR
    assert level_from(None) == logging.INFO
    assert level_from("chatty") == logging.INFO


def test_level_from_env_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LEVEL_ENV, "ERROR")
    assert level_from(None) == logging.ERROR
    assert level_from("bogus") == logging.ERROR
    assert level_from("DEBUG") == logging.DEBUG


def test_configure_logging_sets_root_and_quiets_graphviz(root_level, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LEVEL_ENV, raising=False)
    assert configure_logging("DEBUG") == logging.DEBUG
    assert root_level.level == logging.DEBUG
    assert logging.getLogger("graphviz").level == logging.WARNING


def test_get_logger_default_name() -> None:
    assert get_logger().name == "visualizer"
    assert get_logger("visualizer.main").name == "visualizer.main"
