# KeepFOSS - resilient_db.py
# SQLite connection helper with first-run setup, retry and damaged-file recovery.

import sqlite3
import shutil
import time
from pathlib import Path
from datetime import datetime
from typing import Callable, Optional

from ..utils.logger import Logger


class ResilientDB:
    """Opens a SQLite file and applies its schema, recovering from the usual first-run and corruption failures."""

    def __init__(self, db_path: Path,
                 schema_initializer: Callable[[sqlite3.Connection], None],
                 user_feedback: Optional[Callable[[str], None]] = None,
                 timeout: float = 5.0):
        self.db_path = db_path
        self.schema_initializer = schema_initializer
        self.user_feedback = user_feedback
        self.timeout = timeout
        self.logger = Logger()

    def log(self, message):
        self.logger.info(message)
        if self.user_feedback:
            self.user_feedback(message)

    def connect(self) -> sqlite3.Connection:
        """Attempts to connect to the DB with recovery logic."""
        try:
            return self._attempt_connection()
        except sqlite3.OperationalError as e:
            if "unable to open database file" in str(e):
                self.log("Creating database folder - this is normal for first-time setup.")
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                return self._attempt_connection()
            elif "database is locked" in str(e):
                self.log("Database is busy. Waiting a moment and trying again...")
                time.sleep(1)
                return self._attempt_connection()
            else:
                raise
        except sqlite3.DatabaseError as e:
            if "file is not a database" in str(e) or "database disk image is malformed" in str(e):
                self.log("Found a damaged database file. Moving it aside and starting fresh...")
                self._backup_corrupted_db()
                return self._attempt_connection()
            else:
                raise

    def _attempt_connection(self) -> sqlite3.Connection:
        # Store calls arrive from the service worker thread as well
        conn = sqlite3.connect(self.db_path, timeout=self.timeout,
                               check_same_thread=False)
        try:
            conn.execute("SELECT 1")
            self.schema_initializer(conn)
        except Exception:
            conn.close()
            raise
        return conn

    def _backup_corrupted_db(self):
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_path = self.db_path.with_name(f"{self.db_path.stem}_corrupted_{timestamp}.db")
        try:
            shutil.move(self.db_path, backup_path)
            self.log(f"Damaged database saved to: {backup_path}")
        except OSError:
            self.db_path.unlink(missing_ok=True)
            self.log("Removed damaged database file.")

    def connect_with_retry(self, retries=3, delay=0.5) -> sqlite3.Connection:
        for attempt in range(retries):
            try:
                return self.connect()
            except sqlite3.Error as e:
                if attempt < retries - 1:
                    wait = delay * (attempt + 1)
                    self.logger.warning(f"Database open attempt {attempt + 1} failed ({e}); retrying in {wait}s")
                    time.sleep(wait)
                else:
                    self.logger.error(f"Database open failed after {retries} attempts: {e}")
                    raise
