"""
Enums and constants for KeepFOSS
Centralized location for application constants
"""

from enum import Enum, IntEnum, auto


class NoteAccent(IntEnum):
    """Accent slots a note can be painted with.

    Only the index is persisted; the presentation layer maps it to a color.
    """
    FIRST = 0
    SECOND = 1
    THIRD = 2
    FOURTH = 3
    FIFTH = 4


class DatabaseState(Enum):
    """Database state enumeration"""
    CONNECTED = auto()
    DISCONNECTED = auto()
    INITIALIZING = auto()
    ERROR = auto()


# Persisted values of NoteAccent, in order
ACCENT_INDICES = tuple(int(accent) for accent in NoteAccent)
BACKUP_MIME_TYPE = "application/json"
