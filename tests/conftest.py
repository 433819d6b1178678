"""
Shared fixtures for the twotrack test suite.

Settings are cached by get_settings(); every test starts from a clean cache
and a clean TWOTRACK_* environment so one test's overrides never leak.
"""

from __future__ import annotations

import importlib.util
from types import ModuleType

import pytest
import structlog

from twotrack.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop cached settings and TWOTRACK_* variables around each test."""
    for name in ("TWOTRACK_LOG_LEVEL", "TWOTRACK_JSON_LOGS", "TWOTRACK_EXECUTION_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def restore_structlog():
    """Put structlog back to its defaults after a test reconfigures it."""
    yield
    structlog.reset_defaults()


def _load_copy(module_name: str) -> ModuleType:
    spec = importlib.util.find_spec(module_name)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def reloaded_outcome() -> ModuleType:
    """A second, unregistered copy of twotrack.outcome, as after a reload."""
    return _load_copy("twotrack.outcome")


@pytest.fixture()
def reloaded_presence() -> ModuleType:
    """A second, unregistered copy of twotrack.presence."""
    return _load_copy("twotrack.presence")
