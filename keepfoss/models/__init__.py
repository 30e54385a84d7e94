"""
Models Package - Data models
Contains the Note record
"""

from .note import Note, UNSAVED_NOTE_ID, normalize_color_index

__all__ = ['Note', 'UNSAVED_NOTE_ID', 'normalize_color_index']
