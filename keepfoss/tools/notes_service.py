"""
Notes Service
Orchestrates the note store and the backup codec for presentation code.

Every public operation returns a result dict and emits a human-readable
notification; failures never raise past this layer. The ``*_async`` variants
run the same operation on a single worker thread and return a Future of the
result dict.
"""
from __future__ import annotations

import random
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from PySide6.QtCore import QObject, Signal

from keepfoss.database.initialize_db import DatabaseManager
from keepfoss.database.live_query import LiveNotesQuery, NotesCallback
from keepfoss.database.notes_db import NotesDatabase, NotesStorageError
from keepfoss.models.note import Note
from keepfoss.tools.notes_backup import (
    DEFAULT_FILENAME_PREFIX,
    BackupParseError,
    export_all,
    import_all,
    read_backup,
    suggested_backup_filename,
    write_backup,
)
from keepfoss.utils.config_loader import ConfigLoader
from keepfoss.utils.enums import ACCENT_INDICES
from keepfoss.utils.logger import Logger

Result = Dict[str, Any]


class NotesService(QObject):
    """Service for creating, deleting, exporting and importing notes.

    Signals:
        operation_completed(str): notification text after a success
        operation_failed(str): notification text after a failure
    """

    operation_completed = Signal(str)
    operation_failed = Signal(str)

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        notes_db: Optional[NotesDatabase] = None,
        config: Optional[ConfigLoader] = None,
        rng: Optional[random.Random] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.logger = Logger()
        self._db_manager = db_manager or DatabaseManager()
        self._notes_db = notes_db or NotesDatabase(self._db_manager)
        self._rng = rng or random.Random()
        self._filename_prefix = DEFAULT_FILENAME_PREFIX
        self._indent: Optional[int] = 2
        if config is not None:
            self._filename_prefix = config.get("backup.filename_prefix", DEFAULT_FILENAME_PREFIX)
            self._indent = config.get("backup.indent", 2)
        self._live = self._notes_db.query_all()
        # One worker keeps mutations in submission order
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="keepfoss-notes")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _succeed(self, message: str, **fields: Any) -> Result:
        self.logger.info(message)
        self.operation_completed.emit(message)
        return {"success": True, "message": message, **fields}

    def _fail(self, error: str, **fields: Any) -> Result:
        self.logger.error(error)
        self.operation_failed.emit(error)
        return {"success": False, "error": error, **fields}

    # ------------------------------------------------------------------
    # Live notes
    # ------------------------------------------------------------------
    @property
    def live_notes(self) -> LiveNotesQuery:
        return self._live

    def subscribe(self, callback: NotesCallback) -> None:
        """Receive the full ordered note list now and after every change"""
        self._live.subscribe(callback)

    def unsubscribe(self, callback: NotesCallback) -> None:
        self._live.unsubscribe(callback)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def _pick_accent(self) -> int:
        return self._rng.choice(ACCENT_INDICES)

    def add_note(self, title: str, content: str) -> Result:
        note = Note(title=title, content=content, color_index=self._pick_accent())
        try:
            note_id = self._notes_db.insert_note(note)
        except NotesStorageError as e:
            return self._fail(f"Could not save note: {e}")
        return self._succeed("Note saved", note_id=note_id)

    @staticmethod
    def can_save(title: str, content: str) -> bool:
        """The quick-note form needs a title or some content"""
        return not Note(title=title, content=content).is_blank

    def save_quick_note(self, title: str, content: str) -> Result:
        """Form save: rejects a note with neither title nor content"""
        if not self.can_save(title, content):
            return self._fail("Nothing to save: add a title or some content")
        return self.add_note(title, content)

    def delete_note(self, note: Note) -> Result:
        try:
            removed = self._notes_db.delete_note(note)
        except NotesStorageError as e:
            return self._fail(f"Could not delete note: {e}", deleted=False)
        if removed:
            return self._succeed("Note deleted", deleted=True)
        # Already gone counts as done
        return self._succeed("Note already deleted", deleted=False)

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------
    def export_notes(self) -> str:
        """JSON backup of the most recently observed note list"""
        return export_all(self._live.latest(), indent=self._indent)

    def export_to_file(self, target: Union[str, Path]) -> Result:
        """Write a backup to ``target``.

        A directory target gets the suggested ``keepfoss_backup_<millis>.json``
        name inside it.
        """
        path = Path(target)
        if path.is_dir():
            path = path / suggested_backup_filename(prefix=self._filename_prefix)
        notes = self._live.latest()
        try:
            write_backup(path, notes, indent=self._indent)
        except OSError as e:
            return self._fail(f"Export failed: {e}", path=str(path))
        return self._succeed("Exported!", path=str(path), exported=len(notes))

    def _insert_imported(self, notes: List[Note]) -> Result:
        imported = 0
        for note in notes:
            try:
                self._notes_db.insert_note(note.as_new())
            except NotesStorageError as e:
                return self._fail(
                    f"Import stopped after {imported} of {len(notes)} notes: {e}",
                    imported=imported,
                )
            imported += 1
        return self._succeed("Imported!", imported=imported)

    def import_notes(self, json_text: str) -> Result:
        """Insert every note of a backup document as a new note.

        The whole document is parsed before anything is inserted, so a
        malformed backup leaves the store untouched.
        """
        try:
            notes = import_all(json_text)
        except BackupParseError as e:
            self.logger.warning(f"Rejected backup: {e}")
            return self._fail("Import failed: not a valid notes backup", imported=0)
        return self._insert_imported(notes)

    def import_from_file(self, path: Union[str, Path]) -> Result:
        try:
            notes = read_backup(path)
        except BackupParseError as e:
            self.logger.warning(f"Rejected backup {path}: {e}")
            return self._fail("Import failed: not a valid notes backup", imported=0)
        except OSError as e:
            return self._fail(f"Import failed: {e}", imported=0)
        return self._insert_imported(notes)

    # ------------------------------------------------------------------
    # Off-thread variants
    # ------------------------------------------------------------------
    def _submit(self, operation: Callable[..., Result], *args: Any) -> Future:
        return self._executor.submit(operation, *args)

    def add_note_async(self, title: str, content: str) -> Future:
        return self._submit(self.add_note, title, content)

    def delete_note_async(self, note: Note) -> Future:
        return self._submit(self.delete_note, note)

    def import_notes_async(self, json_text: str) -> Future:
        return self._submit(self.import_notes, json_text)

    def export_to_file_async(self, target: Union[str, Path]) -> Future:
        return self._submit(self.export_to_file, target)

    def import_from_file_async(self, path: Union[str, Path]) -> Future:
        return self._submit(self.import_from_file, path)

    def shutdown(self, wait: bool = True) -> None:
        """Finish queued work, then release the live query and the database"""
        self._executor.shutdown(wait=wait)
        self._live.close()
        self._notes_db.close()
