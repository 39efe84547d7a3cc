"""Cost estimate from a material tally."""

from dataclasses import dataclass
from typing import Optional

from .config import CostRates
from .tally import MaterialTally


@dataclass
class CostEstimate:
    """Priced line items for one build."""

    boards: float = 0.0
    joists: float = 0.0
    rails: float = 0.0
    railing_posts: float = 0.0
    stairs: float = 0.0
    furniture: float = 0.0
    waste_factor: float = 1.0
    square_feet: float = 0.0

    @property
    def subtotal(self) -> float:
        return (
            self.boards
            + self.joists
            + self.rails
            + self.railing_posts
            + self.stairs
            + self.furniture
        )

    @property
    def total(self) -> float:
        """Subtotal including the waste allowance."""
        return self.subtotal * self.waste_factor

    @property
    def cost_per_square_foot(self) -> float:
        if self.square_feet <= 0:
            return 0.0
        return self.total / self.square_feet

    def to_dict(self) -> dict:
        return {
            "boards": round(self.boards, 2),
            "joists": round(self.joists, 2),
            "rails": round(self.rails, 2),
            "railing_posts": round(self.railing_posts, 2),
            "stairs": round(self.stairs, 2),
            "furniture": round(self.furniture, 2),
            "subtotal": round(self.subtotal, 2),
            "waste_factor": self.waste_factor,
            "total": round(self.total, 2),
            "square_feet": round(self.square_feet, 2),
            "cost_per_square_foot": round(self.cost_per_square_foot, 2),
        }


def estimate_cost(
    tally: MaterialTally,
    square_feet: float = 0.0,
    rates: Optional[CostRates] = None,
) -> CostEstimate:
    """Price a tally. The waste factor applies to the whole subtotal."""
    rates = rates or CostRates()
    return CostEstimate(
        boards=tally.board_feet * rates.board_per_foot,
        joists=tally.joist_feet * rates.joist_per_foot,
        rails=tally.rail_feet * rates.rail_per_foot,
        railing_posts=tally.railing_posts * rates.railing_post,
        stairs=tally.stair_steps * rates.stair_step,
        furniture=tally.furniture_count * rates.furniture_item,
        waste_factor=rates.waste_factor,
        square_feet=square_feet,
    )
