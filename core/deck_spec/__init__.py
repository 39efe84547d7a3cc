"""Deck specification model.

Holds the user-editable DeckSpec, its document schema for imports, unit
helpers and the undo/redo history.

Usage:
    from core.deck_spec import DeckSpec, DeckShape, load_spec_document

    spec = DeckSpec(shape=DeckShape.L_SHAPED, width=16, length=12)
    doc = spec.to_dict()
    same = load_spec_document(doc)
"""

from .errors import DeckError, InvalidSpecError, MalformedImportError
from .history import SpecHistory
from .schema import DeckSpecDocument, load_spec_document
from .types import (
    AUTO_BOARD_LENGTH,
    BoardDirection,
    BoardPattern,
    DeckShape,
    DeckSpec,
    FurnitureItem,
    RailingStyle,
    StairType,
)
from .units import compose_length, format_length, split_length

__all__ = [
    # Spec
    "DeckSpec",
    "FurnitureItem",
    "DeckShape",
    "BoardDirection",
    "BoardPattern",
    "StairType",
    "RailingStyle",
    "AUTO_BOARD_LENGTH",
    # Import / history
    "DeckSpecDocument",
    "load_spec_document",
    "SpecHistory",
    # Errors
    "DeckError",
    "InvalidSpecError",
    "MalformedImportError",
    # Units
    "compose_length",
    "format_length",
    "split_length",
]
