"""Shared test fixtures: isolated settings and an in-memory workspace."""

import os

import pytest

from paramhint.config import Settings
from paramhint.inference.estimator import TypeHintEstimator
from paramhint.workspace.fakes import InMemoryWorkspace


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PARAMHINT_* variables from the shell out of Settings()."""
    for key in list(os.environ):
        if key.startswith("PARAMHINT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def workspace() -> InMemoryWorkspace:
    return InMemoryWorkspace()


@pytest.fixture
def estimator(
    workspace: InMemoryWorkspace, settings: Settings
) -> TypeHintEstimator:
    """Estimator wired to an empty in-memory workspace."""
    return TypeHintEstimator(workspace=workspace, settings=settings)
