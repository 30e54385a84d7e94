"""
Tools Package - Note service and backup codec
"""

from .notes_backup import BackupParseError, export_all, import_all
from .notes_service import NotesService

__all__ = ['BackupParseError', 'export_all', 'import_all', 'NotesService']
