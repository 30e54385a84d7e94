"""Shared fixtures for the KeepFOSS test suite."""

import random

import pytest
from PySide6.QtCore import QCoreApplication

from keepfoss.database.initialize_db import DatabaseManager
from keepfoss.database.notes_db import NotesDatabase
from keepfoss.models.note import Note
from keepfoss.tools.notes_service import NotesService


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Single QCoreApplication shared by every test that touches Qt objects."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def db_manager(tmp_path):
    """DatabaseManager rooted in a temporary directory."""
    return DatabaseManager(user_name="test_user", base_dir=tmp_path / "user_data")


@pytest.fixture
def notes_db(db_manager):
    """Note store backed by a temporary SQLite file."""
    db = NotesDatabase(db_manager)
    yield db
    db.close()


@pytest.fixture
def notes_service(db_manager, notes_db):
    """NotesService with a seeded random source."""
    service = NotesService(
        db_manager=db_manager,
        notes_db=notes_db,
        rng=random.Random(1234),
    )
    yield service
    service.shutdown()


@pytest.fixture
def sample_note():
    """Provide a sample, not yet persisted note."""
    return Note(title="Test Note", content="This is a test note content", color_index=2)
