"""Shared pytest fixtures for JournalQuest tests."""

import sys
from datetime import datetime

import pytest

from PyQt6.QtCore import QCoreApplication

from journalquest.database.db import configure_engine, init_db
from journalquest.gamification.engine import ProgressionEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    """A clock pinned to Monday 2024-01-01 12:00."""
    return FakeClock(datetime(2024, 1, 1, 12, 0))


@pytest.fixture
def engine(qapp, clock):
    """Fresh ProgressionEngine with default state and no persistence."""
    return ProgressionEngine(parent=None, clock=clock)
