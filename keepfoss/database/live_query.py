"""
Live note query
Redelivers the complete ordered note list to subscribers after every change
"""

import threading
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot

from ..models.note import Note
from ..utils.logger import Logger

NotesCallback = Callable[[List[Note]], None]


class LiveNotesQuery(QObject):
    """Subscribable view over a NotesDatabase.

    Subscribers get the current list immediately and then again after every
    committed insert or delete. Callbacks are invoked on the thread that made
    the change; a GUI consumer is expected to hop to its own thread.
    """
    
    snapshot_ready = Signal(object)  # List[Note]
    
    def __init__(self, store, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.logger = Logger()
        self._store = store
        self._lock = threading.Lock()
        self._subscribers: List[NotesCallback] = []
        self._closed = False
        
        with store.lock:
            self._latest: List[Note] = store.get_all_notes()
            store.notes_changed.connect(
                self._on_notes_changed, Qt.ConnectionType.DirectConnection
            )
    
    @Slot(object)
    def _on_notes_changed(self, snapshot) -> None:
        with self._lock:
            if self._closed:
                return
            self._latest = list(snapshot)
        self.snapshot_ready.emit(list(snapshot))
    
    def subscribe(self, callback: NotesCallback) -> None:
        """Register ``callback`` and deliver the current list to it right away"""
        with self._store.lock:
            with self._lock:
                if self._closed:
                    raise RuntimeError("Live query is closed")
                if callback in self._subscribers:
                    return
                self._subscribers.append(callback)
                current = list(self._latest)
            self.snapshot_ready.connect(
                callback, Qt.ConnectionType.DirectConnection
            )
            callback(current)
    
    def unsubscribe(self, callback: NotesCallback) -> None:
        with self._lock:
            if callback not in self._subscribers:
                return
            self._subscribers.remove(callback)
        self.snapshot_ready.disconnect(callback)
    
    def latest(self) -> List[Note]:
        """Most recently delivered list"""
        with self._lock:
            return list(self._latest)
    
    def refresh(self) -> None:
        """Reload from the store and redeliver to every subscriber"""
        with self._store.lock:
            self._on_notes_changed(self._store.get_all_notes())
    
    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
    
    def close(self) -> None:
        """Stop following the store and drop all subscribers"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscribers, self._subscribers = self._subscribers, []
        self._store.notes_changed.disconnect(self._on_notes_changed)
        for callback in subscribers:
            self.snapshot_ready.disconnect(callback)
        self.logger.debug("Live notes query closed")
