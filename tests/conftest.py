"""Shared fixtures: keep global console/debug state from leaking between tests."""

import logging

import pytest

from consolelog import dbug, interceptor, log


class FakeLogger:
    def __init__(self, name):
        self.name = name
        self.records = []

    def log(self, level, msg):
        self.records.append((level, msg))


class FakeRegistry:
    """Stands in for logging.getLogger and remembers every lookup."""

    def __init__(self, normalize=None):
        self.normalize = normalize or (lambda name: name)
        self.calls = []
        self.loggers = {}

    def __call__(self, name):
        self.calls.append(name)
        name = self.normalize(name)
        if name not in self.loggers:
            self.loggers[name] = FakeLogger(name)
        return self.loggers[name]


@pytest.fixture(autouse=True)
def _clean_state(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    root = logging.getLogger()
    level = root.level
    yield
    interceptor.restore()
    dbug.reset_hook()
    log.teardown_logging()
    root.setLevel(level)


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def registry_factory():
    return FakeRegistry
