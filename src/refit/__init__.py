"""
refit - batch source rewriting

refit walks a directory tree of source files and applies deterministic,
idempotent text transformations in place: blank-line normalization and
legacy identifier migration with import injection.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
