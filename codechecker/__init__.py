"""Near-duplicate detection for student code submissions."""

__version__ = "1.0.0"
