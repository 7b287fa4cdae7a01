"""Pytest configuration and shared fixtures for trackpad tests

This module provides common fixtures and test utilities used across
unit and integration tests.
"""

import logging
import threading
from pathlib import Path
from typing import Generator

import pytest

from trackpad.common.config import Config, ConfigLoader
from trackpad.common.settings import settings
from trackpad.common.types import Key, Modifier, Platform, ScrollAxis


class RecordingCapability:
    """Input capability that records every primitive call

    Calls are stored as tuples:
        ("key_combo", frozenset(modifiers), key)
        ("scroll", axis, direction)
        ("script", script)
    """

    def __init__(self, platform: Platform = Platform.WINDOWS) -> None:
        self.platform = platform
        self.calls: list[tuple] = []
        self._condition = threading.Condition()

    def _record(self, call: tuple) -> None:
        with self._condition:
            self.calls.append(call)
            self._condition.notify_all()

    def keyCombo_inject(self, modifiers: frozenset[Modifier], key: Key) -> None:
        self._record(("key_combo", frozenset(modifiers), key))

    def scroll_inject(self, axis: ScrollAxis, direction: int) -> None:
        self._record(("scroll", axis, direction))

    def platformScript_invoke(self, script: str) -> None:
        self._record(("script", script))

    def calls_wait(self, count: int, timeout: float = 2.0) -> bool:
        """Wait until at least `count` calls were recorded"""
        with self._condition:
            return self._condition.wait_for(lambda: len(self.calls) >= count, timeout)


@pytest.fixture
def recording_capability() -> RecordingCapability:
    """Capability that records calls using the Windows action column"""
    return RecordingCapability(Platform.WINDOWS)


@pytest.fixture
def capability_factory():
    """Factory for recording capabilities on a chosen platform"""
    return RecordingCapability


@pytest.fixture
def sample_config() -> Config:
    """Load sample configuration for testing

    Returns:
        Config object parsed from the repository config.yml
    """
    config_path = Path(__file__).parent.parent / "config.yml"
    if not config_path.exists():
        pytest.skip("config.yml not found - required for this test")
    return ConfigLoader.config_load(config_path)


@pytest.fixture
def reset_settings() -> Generator[None, None, None]:
    """Reset settings singleton between tests

    This fixture ensures each test gets a fresh Settings instance.
    """
    settings._initialized = False
    settings._config = None
    yield
    settings._initialized = False
    settings._config = None


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)
