"""Exceptions raised by the deck engine."""

from typing import List, Optional


class DeckError(Exception):
    """Base class for deck engine errors."""


class InvalidSpecError(DeckError, ValueError):
    """A spec value cannot produce valid geometry.

    Raised for non-positive dimensions, unusable stock lengths and stair
    heights that do not yield a finite, positive step height.
    """

    def __init__(self, message: str, section: Optional[str] = None):
        super().__init__(message)
        self.section = section


class MalformedImportError(DeckError, ValueError):
    """An imported spec document has missing or wrong-typed fields."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []
