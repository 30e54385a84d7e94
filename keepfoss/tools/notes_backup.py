"""
Notes Backup - JSON export and import of the note collection

Backup files are UTF-8 JSON arrays::

    [{"id": 3, "title": "...", "content": "...", "colorIndex": 2}, ...]

Field order is not significant on import and unknown fields are ignored.
Ids are carried through unchanged in both directions; giving imported notes
fresh ids is the service's job.
"""

import json
import time
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from ..models.note import Note, UNSAVED_NOTE_ID, normalize_color_index
from ..utils.enums import BACKUP_MIME_TYPE
from ..utils.logger import Logger

DEFAULT_FILENAME_PREFIX = "keepfoss_backup"

__all__ = [
    'BACKUP_MIME_TYPE', 'BackupParseError', 'export_all', 'import_all',
    'read_backup', 'suggested_backup_filename', 'write_backup',
]


class BackupParseError(ValueError):
    """The backup text is not a JSON array of note objects"""


def export_all(notes: Iterable[Note], indent: Optional[int] = 2) -> str:
    """Serialize ``notes`` in the given order.

    The output only depends on the notes and ``indent``.
    """
    return json.dumps(
        [note.to_dict() for note in notes],
        ensure_ascii=False,
        indent=indent,
    )


def _field(record: dict, position: int, key: str, kind: type, default: Any) -> Any:
    value = record.get(key)
    if value is None:
        return default
    # bool is an int subclass but never a valid id or color index
    if not isinstance(value, kind) or isinstance(value, bool):
        raise BackupParseError(
            f"Record {position}: '{key}' must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def import_all(json_text: str) -> List[Note]:
    """Parse backup text into notes, keeping their original ids.

    Missing or null ``title``/``content`` become "", missing ``colorIndex``
    and ``id`` become 0. Color indices outside the accent range are folded
    back into it.

    Raises:
        BackupParseError: malformed JSON, a non-array document, a non-object
            element or a field of the wrong type
    """
    try:
        document = json.loads(json_text)
    except (TypeError, ValueError) as e:
        raise BackupParseError(f"Backup is not valid JSON: {e}") from e
    except RecursionError as e:
        raise BackupParseError("Backup is nested too deeply") from e
    
    if not isinstance(document, list):
        raise BackupParseError(
            f"Backup must be a JSON array, got {type(document).__name__}"
        )
    
    notes = []
    for position, record in enumerate(document):
        if not isinstance(record, dict):
            raise BackupParseError(
                f"Record {position} must be an object, got {type(record).__name__}"
            )
        notes.append(Note(
            id=_field(record, position, 'id', int, UNSAVED_NOTE_ID),
            title=_field(record, position, 'title', str, ""),
            content=_field(record, position, 'content', str, ""),
            color_index=normalize_color_index(
                _field(record, position, 'colorIndex', int, 0)
            ),
        ))
    return notes


def suggested_backup_filename(timestamp_ms: Optional[int] = None,
                              prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    """``keepfoss_backup_<unix millis>.json``"""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{prefix}_{timestamp_ms}.json"


def write_backup(path: Union[str, Path], notes: Iterable[Note],
                 indent: Optional[int] = 2) -> Path:
    """Export ``notes`` to ``path`` as UTF-8 and return the path"""
    path = Path(path)
    payload = export_all(notes, indent=indent)
    path.write_text(payload, encoding='utf-8')
    Logger().info(f"Wrote backup: {path}")
    return path


def read_backup(path: Union[str, Path]) -> List[Note]:
    """Read and parse a backup file.

    Raises:
        OSError: the file cannot be read
        BackupParseError: see import_all
    """
    try:
        text = Path(path).read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise BackupParseError(f"Backup is not UTF-8 text: {e}") from e
    return import_all(text)
