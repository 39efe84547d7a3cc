"""Decking board layout: rows, stock-length segmentation and patterns."""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from core.deck_spec.errors import InvalidSpecError
from core.deck_spec.types import (
    AUTO_BOARD_LENGTH,
    BoardDirection,
    BoardLength,
    BoardPattern,
)

from .config import GeneratorConfig
from .tally import MaterialTally
from .types import FootprintSection, GeneratedPart, Primitive

logger = logging.getLogger(__name__)

EPSILON = 1e-9


class BoardLayoutPlanner:
    """Lays decking boards over a footprint section.

    Boards run along the ``along`` axis (X for horizontal, Z for vertical)
    in rows stacked across the other axis. Each row is cut into segments
    taken from the available stock lengths.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def row_count(self, across_span: float) -> int:
        """Rows needed so the boards never under-cover the span."""
        if not across_span > 0:
            return 0
        return math.ceil(round(across_span / self.config.effective_board_width, 9))

    def segments(
        self,
        run: float,
        board_length: BoardLength = AUTO_BOARD_LENGTH,
        stock_lengths: Optional[Sequence[float]] = None,
    ) -> List[Tuple[float, float]]:
        """Cut a row of length ``run`` into ``(start, length)`` segments.

        In auto mode each segment is the longest stock length that still
        fits; when none fits the shortest stock length is used even if it
        overshoots the row end. An explicit length is clipped on the final
        segment only.
        """
        stock = self._check_stock(board_length, stock_lengths)
        auto = board_length == AUTO_BOARD_LENGTH

        result = []
        start = 0.0
        remaining = run
        while remaining > EPSILON:
            if auto:
                fitting = [s for s in stock if s <= remaining + EPSILON]
                piece = max(fitting) if fitting else min(stock)
                used = piece
            else:
                piece = stock[0]
                used = min(piece, remaining)
            result.append((start, used))
            start += used
            remaining -= piece
        return result

    def layout(
        self,
        section: FootprintSection,
        direction: BoardDirection = BoardDirection.HORIZONTAL,
        pattern: BoardPattern = BoardPattern.STANDARD,
        board_length: BoardLength = AUTO_BOARD_LENGTH,
        stock_lengths: Optional[Sequence[float]] = None,
        material: str = "decking",
        element_type: str = "boards",
    ) -> GeneratedPart:
        """Generate board primitives for a section.

        Args:
            section: Footprint to cover.
            direction: Board run direction.
            pattern: ``diagonal`` rotates each board 45 degrees in place and
                scales its plan size by sqrt(2).
            board_length: ``"auto"`` or an explicit stock length.
            stock_lengths: Stock list for auto mode (defaults to config).
            material: Material tag for the primitives.
            element_type: Scene group for the primitives.

        Returns:
            GeneratedPart with the boards and their linear feet.
        """
        cfg = self.config
        along_x = direction == BoardDirection.HORIZONTAL
        along_span = section.width if along_x else section.length
        across_span = section.length if along_x else section.width

        rows = self.row_count(across_span)
        if rows == 0 or not along_span > 0:
            return GeneratedPart()

        cuts = self.segments(along_span, board_length, stock_lengths)

        diagonal = pattern == BoardPattern.DIAGONAL
        scale = math.sqrt(2) if diagonal else 1.0
        rotation = (0.0, math.pi / 4, 0.0) if diagonal else (0.0, 0.0, 0.0)
        y = section.level_height - cfg.board_thickness / 2
        board_width = cfg.board_width * scale

        primitives = []
        board_feet = 0.0
        for row in range(rows):
            across = -across_span / 2 + row * cfg.effective_board_width + cfg.board_width / 2
            for start, length in cuts:
                along = -along_span / 2 + start + length / 2
                if along_x:
                    position = (section.offset_x + along, y, section.offset_z + across)
                    size = (length * scale, cfg.board_thickness, board_width)
                else:
                    position = (section.offset_x + across, y, section.offset_z + along)
                    size = (board_width, cfg.board_thickness, length * scale)
                primitives.append(
                    Primitive.box(
                        position,
                        size,
                        rotation=rotation,
                        material=material,
                        element_type=element_type,
                        source_id=section.name,
                    )
                )
                board_feet += length

        logger.debug(
            f"Section {section.name}: {rows} board rows, {len(primitives)} boards, "
            f"{board_feet:.1f} ft"
        )
        return GeneratedPart(primitives, MaterialTally(board_feet=board_feet))

    def _check_stock(
        self, board_length: BoardLength, stock_lengths: Optional[Sequence[float]]
    ) -> List[float]:
        if board_length == AUTO_BOARD_LENGTH:
            stock = list(stock_lengths if stock_lengths is not None else self.config.stock_lengths)
            if not stock:
                raise InvalidSpecError("No stock lengths available for auto board layout")
            if any(not s > 0 for s in stock):
                raise InvalidSpecError(f"Stock lengths must be positive: {stock}")
            return stock

        try:
            length = float(board_length)
        except (TypeError, ValueError):
            raise InvalidSpecError(f"Invalid board length: {board_length!r}") from None
        if not (math.isfinite(length) and length > 0):
            raise InvalidSpecError(f"Board length must be positive, got {board_length}")
        return [length]
