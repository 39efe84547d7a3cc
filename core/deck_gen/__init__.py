"""Deck geometry generation.

Turns a DeckSpec into positioned primitive descriptors (boards, joists,
posts, railings, stairs, furniture, labels) plus material totals and a cost
estimate. Rendering is left to the caller.

Usage:
    from core.deck_gen import DeckGenerator
    from core.deck_spec import DeckSpec

    result = DeckGenerator().generate(DeckSpec(width=16, length=12))
    result.tally.board_feet
    result.to_scene().export_gltf("output/deck.glb")
"""

from .boards import BoardLayoutPlanner
from .composer import compose_sections
from .config import CostRates, GeneratorConfig
from .dimensions import DimensionLabeler
from .estimate import CostEstimate, estimate_cost
from .furniture import FURNITURE_DEFAULTS, FurnitureLibrary, FurniturePlacer
from .generator import BuildResult, DeckGenerator
from .picture_frame import PictureFrameGenerator
from .railings import RailingGenerator, RailSide
from .rebuild import RebuildController
from .stairs import StairGenerator
from .substructure import SubstructurePlanner
from .tally import MaterialTally
from .types import DeckScene, FootprintSection, GeneratedPart, Primitive

__all__ = [
    # Main API
    "DeckGenerator",
    "BuildResult",
    "GeneratorConfig",
    "RebuildController",
    # Geometry types
    "FootprintSection",
    "Primitive",
    "GeneratedPart",
    "DeckScene",
    "compose_sections",
    # Planners (for advanced usage)
    "BoardLayoutPlanner",
    "SubstructurePlanner",
    "PictureFrameGenerator",
    "RailingGenerator",
    "RailSide",
    "StairGenerator",
    "DimensionLabeler",
    # Furniture
    "FurnitureLibrary",
    "FurniturePlacer",
    "FURNITURE_DEFAULTS",
    # Materials and cost
    "MaterialTally",
    "CostRates",
    "CostEstimate",
    "estimate_cost",
]
