"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class DuelsimError(Exception):
    pass

class InvalidArgument(DuelsimError, ValueError):
    """Raised at the point of misuse (bad RNG bounds, bad seeds, unknown status kinds)."""

class ValidationError(DuelsimError):
    pass

class DataLoadError(DuelsimError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail
