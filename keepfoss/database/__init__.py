"""
Database Package - Database management and operations
Contains database initialization, connections, and the note store
"""

from .initialize_db import DatabaseManager, initialize_user_databases
from .resilient_db import ResilientDB
from .notes_db import NotesDatabase, NotesStorageError
from .live_query import LiveNotesQuery

__all__ = [
    'DatabaseManager', 'initialize_user_databases', 'ResilientDB',
    'NotesDatabase', 'NotesStorageError', 'LiveNotesQuery'
]
