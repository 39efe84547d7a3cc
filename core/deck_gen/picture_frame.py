"""Picture-frame border boards around a footprint section."""

import logging
from typing import List, Optional, Tuple

from core.deck_spec.types import AUTO_BOARD_LENGTH, BoardDirection, BoardLength

from .boards import BoardLayoutPlanner
from .config import GeneratorConfig
from .types import FootprintSection, GeneratedPart

logger = logging.getLogger(__name__)


class PictureFrameGenerator:
    """Lays one border row along each edge of a section.

    Border rows are centred on the section edges and padded by one board
    width, so the rows overlap at the corners instead of being mitred.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        board_planner: Optional[BoardLayoutPlanner] = None,
    ):
        self.config = config or GeneratorConfig()
        self.board_planner = board_planner or BoardLayoutPlanner(self.config)

    def border_strips(
        self, section: FootprintSection
    ) -> List[Tuple[FootprintSection, BoardDirection]]:
        """The four single-row strips (top, bottom, left, right) with their run direction."""
        bw = self.config.board_width
        # Strip depth of one board keeps the planner at exactly one row
        strip = bw
        run_x = section.width + bw
        run_z = section.length + bw

        def make(name, width, length, x, z):
            return FootprintSection(
                name=f"{section.name}_frame_{name}",
                width=width,
                length=length,
                offset_x=x,
                offset_z=z,
                level_height=section.level_height,
            )

        return [
            (make("top", run_x, strip, section.offset_x, section.max_z), BoardDirection.HORIZONTAL),
            (make("bottom", run_x, strip, section.offset_x, section.min_z), BoardDirection.HORIZONTAL),
            (make("left", strip, run_z, section.min_x, section.offset_z), BoardDirection.VERTICAL),
            (make("right", strip, run_z, section.max_x, section.offset_z), BoardDirection.VERTICAL),
        ]

    def layout(
        self,
        section: FootprintSection,
        board_length: BoardLength = AUTO_BOARD_LENGTH,
        stock_lengths=None,
    ) -> GeneratedPart:
        """Generate the four border rows for a section."""
        part = GeneratedPart()
        for strip, direction in self.border_strips(section):
            part = part + self.board_planner.layout(
                strip,
                direction=direction,
                board_length=board_length,
                stock_lengths=stock_lengths,
                material="decking",
                element_type="frame",
            )
        logger.debug(f"Picture frame on {section.name}: {len(part)} boards")
        return part
