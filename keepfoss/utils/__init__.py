"""
Utils Package - Core utilities for KeepFOSS
Contains configuration, logging, and enumeration utilities
"""

from .config_loader import ConfigLoader
from .logger import Logger
from .enums import NoteAccent, DatabaseState

__all__ = ['ConfigLoader', 'Logger', 'NoteAccent', 'DatabaseState']
