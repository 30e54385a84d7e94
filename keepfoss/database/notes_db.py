"""
NotesDatabase class for KeepFOSS
Note Store: insert, delete and live ordered queries over SQLite
"""

import sqlite3
import threading
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from ..models.note import Note
from ..utils.logger import Logger
from .initialize_db import DatabaseManager
from .live_query import LiveNotesQuery


class NotesStorageError(Exception):
    """Raised when the underlying SQLite storage fails an operation"""


class NotesDatabase(QObject):
    """
    Persistent collection of notes.

    Every committed insert or delete emits ``notes_changed`` with the full
    current list, most recent first. Writes are serialized by ``lock``;
    listeners run on the writing thread while the lock is held, so
    snapshots are delivered in commit order.
    """
    
    notes_changed = Signal(object)  # List[Note]
    
    def __init__(self, db_manager: Optional[DatabaseManager] = None,
                 parent: Optional[QObject] = None):
        """
        Args:
            db_manager: Source of the notes connection.
                        Defaults to a DatabaseManager for "default_user".
            parent: Optional Qt parent
        """
        super().__init__(parent)
        self.logger = Logger()
        self.db_manager = db_manager or DatabaseManager()
        self.table_name = "notes"
        self.lock = threading.RLock()
        self._conn: Optional[sqlite3.Connection] = None
    
    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = self.db_manager.get_notes_connection()
        return self._conn
    
    def _rollback(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.rollback()
        except sqlite3.Error as e:
            self.logger.warning(f"Rollback failed: {e}")
    
    def _fetch_all(self) -> List[Note]:
        cursor = self._connection().execute(f'''
            SELECT id, title, content, color_index
            FROM {self.table_name}
            ORDER BY id DESC
        ''')
        return [Note.from_row(row) for row in cursor.fetchall()]
    
    def _publish(self) -> None:
        try:
            snapshot = self._fetch_all()
        except sqlite3.Error as e:
            # The write itself is committed; listeners catch up on the next change
            self.logger.error(f"Could not reload notes after change: {e}")
            return
        self.notes_changed.emit(snapshot)
    
    def insert_note(self, note: Note) -> int:
        """
        Persist ``note`` as a new record.
        
        The id carried by ``note`` is ignored; SQLite assigns a fresh one.
        
        Returns:
            The new note id
            
        Raises:
            NotesStorageError: if the insert cannot be committed
        """
        with self.lock:
            try:
                conn = self._connection()
                cursor = conn.execute(f'''
                    INSERT INTO {self.table_name} (title, content, color_index)
                    VALUES (?, ?, ?)
                ''', (note.title, note.content, note.color_index))
                conn.commit()
                note_id = cursor.lastrowid
            except sqlite3.Error as e:
                self._rollback()
                self.logger.error(f"Error creating note: {e}")
                raise NotesStorageError(f"Failed to create note: {e}") from e
            
            self.logger.info(f"Created note with ID: {note_id}")
            self._publish()
            return note_id
    
    def delete_note(self, note: Note) -> bool:
        """
        Remove the record with ``note.id``.
        
        Returns:
            True if a record was removed, False if there was nothing to remove
            
        Raises:
            NotesStorageError: if the delete cannot be committed
        """
        if not note.is_persisted:
            self.logger.debug(f"Ignoring delete of unsaved note: {note}")
            return False
        
        with self.lock:
            try:
                conn = self._connection()
                cursor = conn.execute(f'''
                    DELETE FROM {self.table_name}
                    WHERE id = ?
                ''', (note.id,))
                conn.commit()
                removed = cursor.rowcount > 0
            except sqlite3.Error as e:
                self._rollback()
                self.logger.error(f"Error deleting note {note.id}: {e}")
                raise NotesStorageError(f"Failed to delete note {note.id}: {e}") from e
            
            if not removed:
                self.logger.debug(f"Note not found, nothing deleted: {note.id}")
                return False
            
            self.logger.info(f"Deleted note: {note.id}")
            self._publish()
            return True
    
    def get_all_notes(self) -> List[Note]:
        """
        One-shot snapshot of all notes, most recent first.
        
        Raises:
            NotesStorageError: if the query fails
        """
        with self.lock:
            try:
                notes = self._fetch_all()
            except sqlite3.Error as e:
                self.logger.error(f"Error retrieving all notes: {e}")
                raise NotesStorageError(f"Failed to read notes: {e}") from e
        self.logger.debug(f"Retrieved {len(notes)} notes")
        return notes
    
    def count_notes(self) -> int:
        with self.lock:
            try:
                row = self._connection().execute(
                    f"SELECT COUNT(*) FROM {self.table_name}"
                ).fetchone()
            except sqlite3.Error as e:
                self.logger.error(f"Error counting notes: {e}")
                raise NotesStorageError(f"Failed to count notes: {e}") from e
        return row[0]
    
    def query_all(self) -> LiveNotesQuery:
        """Live view of all notes; see LiveNotesQuery"""
        return LiveNotesQuery(self)
    
    def close(self) -> None:
        with self.lock:
            if self._conn is not None:
                self._conn = None
                self.db_manager.close_all_connections()
