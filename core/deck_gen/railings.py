"""Railing posts and rails along deck and stair edges."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from core.deck_spec.types import RailingStyle

from .config import GeneratorConfig
from .tally import MaterialTally
from .types import FootprintSection, GeneratedPart, Point3D, Primitive

logger = logging.getLogger(__name__)

# Posts closer than this are treated as the same post
POST_MERGE_DISTANCE = 1e-6


@dataclass(frozen=True)
class RailSide:
    """A straight railing run between two points on the walking surface."""

    start: Point3D
    end: Point3D

    @property
    def length(self) -> float:
        return float(np.linalg.norm(np.subtract(self.end, self.start)))

    def point_at(self, distance: float) -> np.ndarray:
        """Point ``distance`` feet from the start along the side."""
        if self.length == 0:
            return np.asarray(self.start, dtype=float)
        t = distance / self.length
        return np.asarray(self.start, dtype=float) + t * np.subtract(self.end, self.start)


def perimeter_sides(section: FootprintSection) -> List[RailSide]:
    """The four edges of a section as a closed loop at deck height."""
    y = section.level_height
    corners = [
        (section.min_x, y, section.min_z),
        (section.max_x, y, section.min_z),
        (section.max_x, y, section.max_z),
        (section.min_x, y, section.max_z),
    ]
    return [RailSide(corners[i], corners[(i + 1) % 4]) for i in range(4)]


class RailingGenerator:
    """Places posts every ``railing_post_spacing`` feet and two rail tiers.

    Every side gets a post at both ends. Sides that meet share their corner
    post, so a closed perimeter never double-counts corners.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def rail_radius(self, style: RailingStyle) -> float:
        if style == RailingStyle.CABLE:
            return self.config.cable_rail_radius
        return self.config.standard_rail_radius

    def stations(self, length: float) -> List[float]:
        """Post distances along a side of ``length`` feet, both ends included."""
        spacing = self.config.railing_post_spacing
        if length <= POST_MERGE_DISTANCE:
            return [0.0]
        result = []
        distance = 0.0
        while distance < length - POST_MERGE_DISTANCE:
            result.append(distance)
            distance += spacing
        result.append(length)
        return result

    def layout(
        self,
        section: FootprintSection,
        style: RailingStyle = RailingStyle.STANDARD,
    ) -> GeneratedPart:
        """Rail the full perimeter of a section."""
        return self.layout_run(perimeter_sides(section), style, source_id=section.name)

    def layout_run(
        self,
        sides: Sequence[RailSide],
        style: RailingStyle = RailingStyle.STANDARD,
        source_id: str = "",
    ) -> GeneratedPart:
        """Generate posts and rails along a sequence of sides."""
        cfg = self.config
        radius = self.rail_radius(style)
        material = "cable" if style == RailingStyle.CABLE else "railing"
        tiers = (cfg.upper_rail_height, cfg.lower_rail_height)
        lift = np.array([0.0, 1.0, 0.0])

        post_points: List[np.ndarray] = []
        primitives = []
        rail_feet = 0.0

        for side in sides:
            points = [side.point_at(d) for d in self.stations(side.length)]
            for point in points:
                if any(np.linalg.norm(point - p) < POST_MERGE_DISTANCE for p in post_points):
                    continue
                post_points.append(point)
                primitives.append(
                    Primitive.box(
                        point + lift * cfg.railing_post_height / 2,
                        (cfg.railing_post_size, cfg.railing_post_height, cfg.railing_post_size),
                        material="railing",
                        element_type="railing_posts",
                        source_id=source_id,
                    )
                )

            for p0, p1 in zip(points, points[1:]):
                segment = float(np.linalg.norm(p1 - p0))
                for tier in tiers:
                    primitives.append(
                        Primitive.cylinder_between(
                            p0 + lift * tier,
                            p1 + lift * tier,
                            radius,
                            material=material,
                            element_type="rails",
                            source_id=source_id,
                        )
                    )
                rail_feet += segment * len(tiers)

        logger.debug(
            f"Railing {source_id}: {len(post_points)} posts, {rail_feet:.1f} ft of rail"
        )
        return GeneratedPart(
            primitives,
            MaterialTally(rail_feet=rail_feet, railing_posts=len(post_points)),
        )
