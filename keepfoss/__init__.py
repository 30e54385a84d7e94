"""
KeepFOSS - Core Package
Local note store with JSON backup
"""

__version__ = "1.0.0"
__author__ = "KeepFOSS Development Team"

# Avoid package-wide re-exports to reduce import-time side effects.
# Import modules/classes explicitly at call sites.

__all__: list[str] = []
