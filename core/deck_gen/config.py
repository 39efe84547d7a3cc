"""Generator and pricing configuration."""

import os
from dataclasses import dataclass, field
from typing import List


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_lengths(name: str, default: List[float]) -> List[float]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [float(part) for part in value.split(",") if part.strip()]


@dataclass
class GeneratorConfig:
    """Lumber sizes and layout constants for the deck generator (feet)."""

    # Decking boards
    board_width: float = 5.5 / 12
    board_thickness: float = 1 / 12
    board_gap: float = 0.05
    stock_lengths: List[float] = field(default_factory=lambda: [12.0, 16.0, 20.0])

    # Substructure
    joist_spacing: float = 16 / 12
    joist_width: float = 1.5 / 12
    joist_depth: float = 7.25 / 12
    support_post_spacing: float = 8.0
    support_post_size: float = 3.5 / 12

    # Railings
    railing_post_spacing: float = 6.0
    railing_post_size: float = 3.5 / 12
    railing_post_height: float = 3.0
    upper_rail_height: float = 2.5
    lower_rail_height: float = 1.0
    standard_rail_radius: float = 0.1
    cable_rail_radius: float = 0.02

    # Stairs
    stair_step_depth: float = 1.0
    tread_thickness: float = 1 / 12
    stringer_width: float = 1.5 / 12
    stringer_depth: float = 11.25 / 12
    spiral_tube_radius: float = 0.25
    spiral_samples_per_step: int = 8

    # Dimension labels
    label_offset: float = 1.0

    # Generation options
    generate_dimensions: bool = True
    generate_furniture: bool = True

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load overrides from DECK_* environment variables."""
        defaults = cls()
        return cls(
            board_width=_env_float("DECK_BOARD_WIDTH", defaults.board_width),
            board_thickness=_env_float("DECK_BOARD_THICKNESS", defaults.board_thickness),
            board_gap=_env_float("DECK_BOARD_GAP", defaults.board_gap),
            stock_lengths=_env_lengths("DECK_STOCK_LENGTHS", defaults.stock_lengths),
            joist_spacing=_env_float("DECK_JOIST_SPACING", defaults.joist_spacing),
            support_post_spacing=_env_float(
                "DECK_SUPPORT_POST_SPACING", defaults.support_post_spacing
            ),
            railing_post_spacing=_env_float(
                "DECK_RAILING_POST_SPACING", defaults.railing_post_spacing
            ),
            stair_step_depth=_env_float("DECK_STAIR_STEP_DEPTH", defaults.stair_step_depth),
        )

    @property
    def effective_board_width(self) -> float:
        """Board width plus the gap to the next row."""
        return self.board_width + self.board_gap


@dataclass
class CostRates:
    """Unit prices used for the estimate."""

    board_per_foot: float = 4.0
    joist_per_foot: float = 2.0
    rail_per_foot: float = 3.0
    railing_post: float = 50.0
    stair_step: float = 50.0
    furniture_item: float = 100.0
    waste_factor: float = 1.05

    @classmethod
    def from_env(cls) -> "CostRates":
        """Load overrides from DECK_COST_* environment variables."""
        defaults = cls()
        return cls(
            board_per_foot=_env_float("DECK_COST_BOARD_PER_FOOT", defaults.board_per_foot),
            joist_per_foot=_env_float("DECK_COST_JOIST_PER_FOOT", defaults.joist_per_foot),
            rail_per_foot=_env_float("DECK_COST_RAIL_PER_FOOT", defaults.rail_per_foot),
            railing_post=_env_float("DECK_COST_RAILING_POST", defaults.railing_post),
            stair_step=_env_float("DECK_COST_STAIR_STEP", defaults.stair_step),
            furniture_item=_env_float("DECK_COST_FURNITURE_ITEM", defaults.furniture_item),
            waste_factor=_env_float("DECK_WASTE_FACTOR", defaults.waste_factor),
        )

    def to_dict(self) -> dict:
        return {
            "board_per_foot": self.board_per_foot,
            "joist_per_foot": self.joist_per_foot,
            "rail_per_foot": self.rail_per_foot,
            "railing_post": self.railing_post,
            "stair_step": self.stair_step,
            "furniture_item": self.furniture_item,
            "waste_factor": self.waste_factor,
        }
