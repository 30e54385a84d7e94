"""
Database initialization for KeepFOSS
Owns the per-user data directory, the notes schema and connection tracking
"""

import sqlite3
import shutil
import threading
from pathlib import Path
from datetime import datetime
from typing import Callable, List, Optional

from ..utils.enums import DatabaseState
from ..utils.logger import Logger
from .resilient_db import ResilientDB


class DatabaseManager:
    """Manages the SQLite notes database for one user"""
    
    def __init__(self, user_name: Optional[str] = None,
                 user_feedback: Optional[Callable[[str], None]] = None,
                 base_dir: Optional[Path] = None,
                 connect_retries: int = 3):
        self.user_name = str(user_name or "default_user")
        self.user_feedback = user_feedback
        self.logger = Logger()
        self.base_dir = Path(base_dir) if base_dir else Path(__file__).parent.parent.parent / "user_data"
        self.user_dir = self.base_dir / self.user_name
        self.user_db_dir = self.user_dir / "databases"
        self.exports_dir = self.user_dir / "exports"
        self.backups_dir = self.user_dir / "backups"
        self.connect_retries = max(1, connect_retries)
        self.state = DatabaseState.DISCONNECTED
        
        # Track active connections for cleanup
        self._active_connections: List[sqlite3.Connection] = []
        self._connection_lock = threading.Lock()
        
        self.notes_db_path = self.user_db_dir / "notes.db"
        
        self._create_directory_structure()
    
    def _feedback(self, message: str) -> None:
        self.logger.info(message)
        if self.user_feedback:
            self.user_feedback(message)
    
    def _create_directory_structure(self):
        """Create the user-specific directory structure"""
        try:
            self.user_db_dir.mkdir(parents=True, exist_ok=True)
            self.exports_dir.mkdir(exist_ok=True)
            self.backups_dir.mkdir(exist_ok=True)
        except OSError as e:
            self.state = DatabaseState.ERROR
            self.logger.error(f"Cannot create user folders under {self.user_dir}: {e}")
            raise
    
    def initialize_all_databases(self):
        """Open the notes database once so the schema exists before first use"""
        self.state = DatabaseState.INITIALIZING
        self._feedback(f"Setting up databases for {self.user_name}...")
        try:
            conn = self._open_notes()
            conn.close()
        except sqlite3.Error as e:
            self.state = DatabaseState.ERROR
            self.logger.error(f"Database error: {e}")
            raise
        self.state = DatabaseState.CONNECTED
        self._feedback(f"[OK] Notes database ready for {self.user_name}")
    
    def _setup_notes_schema(self, conn):
        """Initialize the notes database schema"""
        cursor = conn.cursor()
        
        # AUTOINCREMENT keeps ids monotonic and never reuses a deleted id
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS notes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL DEFAULT '',
                content TEXT NOT NULL DEFAULT '',
                color_index INTEGER NOT NULL DEFAULT 0,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        
        conn.commit()
    
    def _open_notes(self) -> sqlite3.Connection:
        notes_db = ResilientDB(self.notes_db_path, self._setup_notes_schema, self.user_feedback)
        return notes_db.connect_with_retry(retries=self.connect_retries)
    
    def _track_connection(self, conn):
        """Track a database connection for cleanup"""
        with self._connection_lock:
            self._active_connections.append(conn)
    
    def get_notes_connection(self) -> sqlite3.Connection:
        """Get a tracked connection to the notes database"""
        conn = self._open_notes()
        self._track_connection(conn)
        self.state = DatabaseState.CONNECTED
        return conn
    
    def close_all_connections(self):
        """Close all tracked database connections"""
        with self._connection_lock:
            for conn in self._active_connections:
                try:
                    conn.close()
                except sqlite3.Error as e:
                    self.logger.warning(f"Error closing connection: {e}")
            self._active_connections.clear()
        self.state = DatabaseState.DISCONNECTED
    
    def backup_databases(self) -> Optional[Path]:
        """Copy notes.db into the user's backups folder.

        Returns:
            Path of the copy, or None when there is no database file yet
        """
        if not self.notes_db_path.exists():
            return None
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.backups_dir / f"{self.notes_db_path.stem}_{timestamp}.db"
        try:
            self.backups_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.notes_db_path, backup_path)
        except OSError as e:
            self.logger.error(f"Backup failed - file system error: {e}")
            raise
        self._feedback(f"[OK] Database backup saved to: {backup_path}")
        return backup_path


def initialize_user_databases(user_name=None, user_feedback=None, base_dir=None):
    """Convenience function to initialize databases for a user"""
    db_manager = DatabaseManager(user_name, user_feedback, base_dir=base_dir)
    db_manager.initialize_all_databases()
    return db_manager
