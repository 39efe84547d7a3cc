"""Joists, rim joists and support posts beneath a footprint section."""

import logging
import math
from typing import List, Optional

from core.deck_spec.types import BoardDirection

from .config import GeneratorConfig
from .tally import MaterialTally
from .types import FootprintSection, GeneratedPart, Primitive

logger = logging.getLogger(__name__)


class SubstructurePlanner:
    """Frames a footprint section.

    Joists run perpendicular to the decking boards. The spacing dimension is
    the axis the boards run along; the span dimension is the other one.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def joist_count(self, spacing_dim: float) -> int:
        """Interior joists for a spacing dimension (rims excluded).

        ``ceil(spacing_dim / joist_spacing)``, less one when the remainder
        is under half a spacing unit, never below one.
        """
        spacing = self.config.joist_spacing
        ratio = round(spacing_dim / spacing, 9)
        count = math.ceil(ratio)
        remainder = (ratio - math.floor(ratio)) * spacing
        if remainder < spacing / 2:
            count -= 1
        return max(count, 1)

    def post_positions(self, dim: float) -> List[float]:
        """Support post centres along one axis, relative to the section centre."""
        cfg = self.config
        count = math.floor(round(dim / cfg.support_post_spacing, 9)) + 1
        half = dim / 2 - cfg.support_post_size / 2
        return [
            min(-half + i * cfg.support_post_spacing, half)
            for i in range(count)
        ]

    def layout(
        self,
        section: FootprintSection,
        direction: BoardDirection = BoardDirection.HORIZONTAL,
    ) -> GeneratedPart:
        """Generate joists, rim joists and support posts for a section."""
        cfg = self.config
        joists_along_z = direction == BoardDirection.HORIZONTAL
        span = section.length if joists_along_z else section.width
        spacing_dim = section.width if joists_along_z else section.length

        count = self.joist_count(spacing_dim)
        y = section.level_height - cfg.board_thickness - cfg.joist_depth / 2

        offsets = [-spacing_dim / 2 + (i + 1) * spacing_dim / (count + 1) for i in range(count)]
        rim_offset = spacing_dim / 2 - cfg.joist_width / 2

        primitives = []
        for offset in offsets:
            primitives.append(self._joist(section, offset, span, y, joists_along_z, "joists"))
        for offset in (-rim_offset, rim_offset):
            primitives.append(self._joist(section, offset, span, y, joists_along_z, "rim_joists"))

        joist_feet = span * (count + 2)
        posts = self._posts(section)
        primitives.extend(posts.primitives)

        logger.debug(
            f"Section {section.name}: {count} joists + 2 rims, {len(posts)} support posts"
        )
        return GeneratedPart(
            primitives,
            MaterialTally(joist_feet=joist_feet) + posts.tally,
        )

    def _joist(
        self,
        section: FootprintSection,
        offset: float,
        span: float,
        y: float,
        along_z: bool,
        element_type: str,
    ) -> Primitive:
        cfg = self.config
        if along_z:
            position = (section.offset_x + offset, y, section.offset_z)
            size = (cfg.joist_width, cfg.joist_depth, span)
        else:
            position = (section.offset_x, y, section.offset_z + offset)
            size = (span, cfg.joist_depth, cfg.joist_width)
        return Primitive.box(
            position,
            size,
            material="framing",
            element_type=element_type,
            source_id=section.name,
        )

    def _posts(self, section: FootprintSection) -> GeneratedPart:
        cfg = self.config
        post_height = section.level_height - cfg.board_thickness - cfg.joist_depth
        if post_height <= 0:
            # Joists rest on grade
            return GeneratedPart()

        primitives = []
        for x in self.post_positions(section.width):
            for z in self.post_positions(section.length):
                primitives.append(
                    Primitive.box(
                        (section.offset_x + x, post_height / 2, section.offset_z + z),
                        (cfg.support_post_size, post_height, cfg.support_post_size),
                        material="framing",
                        element_type="posts",
                        source_id=section.name,
                    )
                )
        tally = MaterialTally(
            joist_feet=post_height * len(primitives),
            support_posts=len(primitives),
        )
        return GeneratedPart(primitives, tally)
