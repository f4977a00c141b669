"""
Pytest configuration and shared fixtures for simplecalc tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from simplecalc.core.config import ENV_ENGINE, ENV_LOG_LEVEL
from simplecalc.core.engine import ExpressionEngine, get_engine, list_engines


@pytest.fixture(params=list_engines())
def engine(request: pytest.FixtureRequest) -> ExpressionEngine:
    """Each registered evaluation engine in turn."""
    return get_engine(request.param)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run without simplecalc environment variables or a local config file."""
    for name in (ENV_ENGINE, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
