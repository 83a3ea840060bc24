"""Pytest configuration - offscreen Qt, consistent CWD and shared fixtures."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]


def pytest_sessionstart(session):
    os.chdir(ROOT)


@pytest.fixture
def project_root():
    """Return path to project root."""
    return ROOT


@pytest.fixture(scope="session")
def qapp():
    """Single QApplication for widget tests."""
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    """Redirect GenSynth state files into a temporary directory."""
    path = tmp_path / "state"
    monkeypatch.setenv("GENSYNTH_STATE_DIR", str(path))
    return path
