#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Note Models
Immutable note record shared by the store, the service and the backup codec.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict

from ..utils.enums import ACCENT_INDICES

UNSAVED_NOTE_ID = 0


@dataclass(frozen=True)
class Note:
    """A short text note.

    ``id`` is assigned by the store; ``UNSAVED_NOTE_ID`` marks a note that has
    not been persisted yet. ``color_index`` selects one of the accent slots.
    """
    id: int = UNSAVED_NOTE_ID
    title: str = ""
    content: str = ""
    color_index: int = 0

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_NOTE_ID

    @property
    def is_blank(self) -> bool:
        """True when neither title nor content carries any text"""
        return not self.title.strip() and not self.content.strip()

    def as_new(self) -> 'Note':
        """Copy of this note that the store will treat as a new creation"""
        return replace(self, id=UNSAVED_NOTE_ID)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backup field layout"""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'colorIndex': self.color_index,
        }

    @classmethod
    def from_row(cls, row) -> 'Note':
        """Create from a ``(id, title, content, color_index)`` database row"""
        return cls(
            id=row[0],
            title=row[1] or "",
            content=row[2] or "",
            color_index=row[3] or 0,
        )

    def __str__(self):
        return f"Note(id={self.id}, title='{self.title}')"


def normalize_color_index(value: int) -> int:
    """Fold any integer onto the accent range"""
    return value % len(ACCENT_INDICES)
