"""Straight and spiral stairs from a deck edge down to grade."""

import logging
import math
from typing import List, Optional

import numpy as np
from scipy.interpolate import CubicSpline

from core.deck_spec.errors import InvalidSpecError
from core.deck_spec.types import RailingStyle, StairType

from .config import GeneratorConfig
from .railings import RailingGenerator, RailSide
from .tally import MaterialTally
from .types import FootprintSection, GeneratedPart, Primitive

logger = logging.getLogger(__name__)

SPIRAL_STEP_ANGLE = math.radians(45)


class StairGenerator:
    """Builds stairs on the front (+Z) edge of a section, centred on it.

    Straight stairs descend away from the deck one ``stair_step_depth`` per
    step. Spiral stairs sweep a tube through control points that turn 45
    degrees and rise one step height per step.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        railing_generator: Optional[RailingGenerator] = None,
    ):
        self.config = config or GeneratorConfig()
        self.railing_generator = railing_generator or RailingGenerator(self.config)

    def layout(
        self,
        section: FootprintSection,
        steps: int,
        width: float,
        stair_type: StairType = StairType.STRAIGHT,
        railings: bool = False,
        railing_style: RailingStyle = RailingStyle.STANDARD,
    ) -> GeneratedPart:
        """Generate a stair for ``section`` and, optionally, its railings.

        Raises:
            InvalidSpecError: If the step count, width or deck height cannot
                give a finite, positive step height.
        """
        step_height = self.step_height(section.level_height, steps)
        if not width > 0:
            raise InvalidSpecError(
                f"Stair width must be positive, got {width}", section=section.name
            )

        if stair_type == StairType.SPIRAL:
            part, sides = self._spiral(section, steps, width, step_height)
        else:
            part, sides = self._straight(section, steps, width, step_height)

        if railings:
            part = part + self.railing_generator.layout_run(
                sides, railing_style, source_id=f"{section.name}_stairs"
            )
        return part

    @staticmethod
    def step_height(height: float, steps: int) -> float:
        if steps < 1:
            raise InvalidSpecError(f"Stairs need at least one step, got {steps}")
        if not height > 0:
            raise InvalidSpecError(f"Stairs need a positive deck height, got {height}")
        step_height = height / steps
        if not math.isfinite(step_height) or step_height <= 0:
            raise InvalidSpecError(f"Invalid step height {step_height}")
        return step_height

    def _straight(
        self, section: FootprintSection, steps: int, width: float, step_height: float
    ):
        cfg = self.config
        source_id = f"{section.name}_stairs"
        depth = cfg.stair_step_depth
        edge_z = section.max_z
        cx = section.offset_x
        deck_height = section.level_height
        run = steps * depth

        primitives = []
        for i in range(steps):
            z = edge_z + (steps - i - 0.5) * depth
            y = i * step_height + cfg.tread_thickness / 2
            primitives.append(
                Primitive.box(
                    (cx, y, z),
                    (width, cfg.tread_thickness, depth),
                    material="decking",
                    element_type="stair_treads",
                    source_id=source_id,
                )
            )

        # Stringers run from the deck edge at deck height to grade at the foot
        stringer_length = math.hypot(run, deck_height)
        pitch = math.atan2(deck_height, run)
        side_offset = width / 2 - cfg.stringer_width / 2
        for sign in (-1, 1):
            primitives.append(
                Primitive.box(
                    (cx + sign * side_offset, deck_height / 2, edge_z + run / 2),
                    (cfg.stringer_width, cfg.stringer_depth, stringer_length),
                    rotation=(pitch, 0.0, 0.0),
                    material="framing",
                    element_type="stringers",
                    source_id=source_id,
                )
            )

        sides = [
            RailSide(
                (cx + sign * width / 2, deck_height, edge_z),
                (cx + sign * width / 2, 0.0, edge_z + run),
            )
            for sign in (-1, 1)
        ]
        tally = MaterialTally(stair_feet=steps * width, stair_steps=steps)
        logger.debug(f"Straight stair on {section.name}: {steps} steps, rise {step_height:.3f} ft")
        return GeneratedPart(primitives, tally), sides

    def spiral_path(
        self, section: FootprintSection, steps: int, width: float, step_height: float
    ) -> np.ndarray:
        """Sampled centre line of the spiral tread tube."""
        radius = width / 2
        cx, cz = self._spiral_centre(section, width)
        index = np.arange(steps, dtype=float)
        angles = index * SPIRAL_STEP_ANGLE
        control = np.column_stack(
            [cx + radius * np.cos(angles), index * step_height, cz + radius * np.sin(angles)]
        )
        if steps < 2:
            return control

        spline = CubicSpline(index, control)
        samples = np.linspace(0, steps - 1, (steps - 1) * self.config.spiral_samples_per_step + 1)
        return spline(samples)

    def _spiral_centre(self, section: FootprintSection, width: float):
        return section.offset_x, section.max_z + width / 2

    def _spiral(
        self, section: FootprintSection, steps: int, width: float, step_height: float
    ):
        cfg = self.config
        source_id = f"{section.name}_stairs"
        cx, cz = self._spiral_centre(section, width)
        deck_height = section.level_height

        primitives = [
            Primitive.cylinder(
                (cx, deck_height / 2, cz),
                cfg.support_post_size / 2,
                deck_height,
                material="framing",
                element_type="stair_column",
                source_id=source_id,
            )
        ]

        path = self.spiral_path(section, steps, width, step_height)
        if len(path) < 2:
            # A single step is one round tread
            primitives.append(
                Primitive.cylinder(
                    (cx, cfg.tread_thickness / 2, cz),
                    width / 2,
                    cfg.tread_thickness,
                    material="decking",
                    element_type="stair_treads",
                    source_id=source_id,
                )
            )
            arc_length = width
        else:
            primitives.append(
                Primitive.tube(
                    path,
                    cfg.spiral_tube_radius,
                    material="decking",
                    element_type="stair_treads",
                    source_id=source_id,
                )
            )
            arc_length = float(np.sum(np.linalg.norm(np.diff(path, axis=0), axis=1)))

        sides = self._spiral_sides(path, cx, cz)
        tally = MaterialTally(stair_feet=arc_length, stair_steps=steps)
        logger.debug(f"Spiral stair on {section.name}: {steps} steps, arc {arc_length:.2f} ft")
        return GeneratedPart(primitives, tally), sides

    def _spiral_sides(self, path: np.ndarray, cx: float, cz: float) -> List[RailSide]:
        """Rail sides along the outside of the helix, one per control step."""
        step = self.config.spiral_samples_per_step
        control = path[::step] if len(path) > 1 else path
        if len(control) < 2:
            return []

        outward = []
        for x, y, z in control:
            direction = np.array([x - cx, 0.0, z - cz])
            norm = np.linalg.norm(direction)
            if norm > 0:
                direction /= norm
            outward.append(np.array([x, y, z]) + direction * self.config.spiral_tube_radius)

        return [
            RailSide(tuple(outward[i]), tuple(outward[i + 1]))
            for i in range(len(outward) - 1)
        ]
