"""API Routes"""

from . import decks, designs, health

__all__ = ["decks", "designs", "health"]
