# core/deck_gen/furniture.py
"""Outdoor furniture library and placement on the deck surface."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Sequence

import trimesh

from core.deck_spec.errors import InvalidSpecError
from core.deck_spec.types import FurnitureItem

from .tally import MaterialTally
from .types import FootprintSection, GeneratedPart, Primitive


logger = logging.getLogger(__name__)


# Placeholder dimensions (feet) used when no asset file is available
FURNITURE_DEFAULTS: dict[str, dict[str, float]] = {
    "bench": {"width": 5.0, "depth": 1.5, "height": 1.5},
    "chair": {"width": 2.0, "depth": 2.0, "height": 3.0},
    "grill": {"width": 4.0, "depth": 2.0, "height": 3.5},
    "lounger": {"width": 2.5, "depth": 6.5, "height": 1.2},
    "planter": {"width": 2.0, "depth": 2.0, "height": 2.0},
    "table": {"width": 4.0, "depth": 3.0, "height": 2.5},
    "umbrella": {"width": 1.0, "depth": 1.0, "height": 7.5},
}


class FurnitureLibrary:
    """Furniture assets for the deck preview.

    Placement only needs dimensions, which come from FURNITURE_DEFAULTS.
    For export, a ``<type>.glb`` file in the assets directory replaces the
    placeholder box; when that file is missing or fails to load the
    placeholder is used instead.

    Usage:
        library = FurnitureLibrary()
        library.list_types()            # ['bench', 'chair', ...]
        library.get_dimensions("table")  # {'width': 4.0, 'depth': 3.0, 'height': 2.5}
        mesh = library.get_asset("table")
    """

    def __init__(self, assets_dir: str | Path | None = None):
        """Initialize the FurnitureLibrary.

        Args:
            assets_dir: Optional directory of .glb furniture assets. Defaults
                to assets/furniture/ relative to the project root.
        """
        if assets_dir:
            self.assets_dir = Path(assets_dir)
        else:
            self.assets_dir = Path(__file__).parent.parent.parent / "assets" / "furniture"

    def list_types(self) -> list[str]:
        """Sorted furniture type names that can be placed."""
        return sorted(FURNITURE_DEFAULTS.keys())

    def get_dimensions(self, furniture_type: str) -> dict[str, float] | None:
        """Width/depth/height of a furniture type, or None if unknown."""
        if furniture_type in FURNITURE_DEFAULTS:
            return FURNITURE_DEFAULTS[furniture_type].copy()
        return None

    def get_asset(self, furniture_type: str) -> trimesh.Trimesh | None:
        """Mesh for a furniture type with its base at y=0.

        Tries the .glb asset first and falls back to a placeholder box.
        Returns None for unknown types.
        """
        asset_path = self.assets_dir / f"{furniture_type}.glb"
        if asset_path.exists():
            try:
                loaded = trimesh.load(asset_path)
                if isinstance(loaded, trimesh.Scene):
                    meshes = list(loaded.geometry.values())
                    if meshes:
                        return trimesh.util.concatenate(meshes)
                else:
                    return loaded
            except Exception as e:
                logger.warning(f"Failed to load asset {asset_path}: {e}")

        if furniture_type in FURNITURE_DEFAULTS:
            return self._create_placeholder(FURNITURE_DEFAULTS[furniture_type])
        return None

    def _create_placeholder(self, dims: dict[str, float]) -> trimesh.Trimesh:
        """Box with the given dimensions, bottom face at y=0."""
        box = trimesh.creation.box(extents=[dims["width"], dims["height"], dims["depth"]])
        box.apply_translation([0, dims["height"] / 2, 0])
        return box


class FurniturePlacer:
    """Places furniture items on a section's deck surface.

    Positions are relative to the section centre. Items are not checked for
    overlaps with each other or for hanging over the deck edge.
    """

    def __init__(self, library: FurnitureLibrary | None = None):
        self.library = library or FurnitureLibrary()

    def layout(self, section: FootprintSection, items: Sequence[FurnitureItem]) -> GeneratedPart:
        """Generate furniture primitives for ``items``.

        Raises:
            InvalidSpecError: If an item type is not in the library.
        """
        primitives = []
        for item in items:
            dims = self.library.get_dimensions(item.type)
            if dims is None:
                raise InvalidSpecError(
                    f"Unknown furniture type '{item.type}'", section=section.name
                )
            primitives.append(
                Primitive.box(
                    (
                        section.offset_x + item.x,
                        section.level_height + dims["height"] / 2,
                        section.offset_z + item.z,
                    ),
                    (dims["width"], dims["height"], dims["depth"]),
                    rotation=(0.0, math.radians(item.rotation), 0.0),
                    material="furniture",
                    element_type="furniture",
                    source_id=section.name,
                    asset=item.type,
                )
            )
        return GeneratedPart(primitives, MaterialTally(furniture_count=len(primitives)))
