"""
Shared test fixtures and configuration.
"""

import logging
from datetime import datetime
from pathlib import Path

import pytest

from devbootstrap.adapters.mock import MockRunner
from devbootstrap.core.config.loader import load_settings
from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.models.settings import BootstrapSettings
from devbootstrap.core.reliability.retry import RetryPolicy
from devbootstrap.core.services.tasks.base import ProvisionTask

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def environ(home: Path) -> dict[str, str]:
    """Minimal environment for settings resolution."""
    return {"HOME": str(home), "USER": "dev"}


@pytest.fixture
def settings(environ: dict[str, str]) -> BootstrapSettings:
    return load_settings(environ=environ, now=FIXED_NOW)


@pytest.fixture
def runner(home: Path) -> MockRunner:
    """A mock host where nothing is installed and nothing is on PATH."""
    return MockRunner(env={"PATH": "", "HOME": str(home), "USER": "dev"})


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def pctx(settings: BootstrapSettings, runner: MockRunner, sleeps: list[float]) -> ProvisionContext:
    """Provisioning context with instant retries."""
    return ProvisionContext(
        settings=settings,
        runner=runner,
        retry=RetryPolicy(attempts=3, delay=2.0, sleep=sleeps.append),
    )


def mark_installed(runner: MockRunner, *packages: str) -> None:
    """Make dpkg-query report packages (all when none given) as installed."""
    if not packages:
        runner.set_response(["dpkg-query"], stdout="install ok installed")
        return
    for pkg in packages:
        runner.set_response(
            ["dpkg-query", "-W", "-f=${Status}", pkg], stdout="install ok installed"
        )


class FakeTask(ProvisionTask):
    """Task with a scripted outcome."""

    def __init__(self, id, *, present=False, error=None, best_effort=False, calls=None):
        self.id = id
        self.title = f"Fake {id}"
        self.best_effort = best_effort
        self._present = present
        self._error = error
        self._calls = calls if calls is not None else []

    def is_present(self, ctx: ProvisionContext) -> bool:
        return self._present

    def install(self, ctx: ProvisionContext) -> str:
        self._calls.append(self.id)
        if self._error is not None:
            raise self._error
        return f"installed {self.id}"
