# File: calendar_engine/models/api.py
"""
Data models for validation reports handed back to callers.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ValidationError:
    """Represents a validation error."""
    field: str
    message: str
    entry_index: Optional[int] = None

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"{self.field}[{self.entry_index}]: {self.message}"
        return f"{self.field}: {self.message}"

    def to_dict(self) -> dict:
        return {
            'field': self.field,
            'message': self.message,
            'index': self.entry_index,
        }
