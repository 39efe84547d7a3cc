"""Main deck generator that orchestrates the planners."""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from core.deck_spec.errors import InvalidSpecError
from core.deck_spec.types import DeckSpec

from .boards import BoardLayoutPlanner
from .composer import compose_sections
from .config import CostRates, GeneratorConfig
from .dimensions import DimensionLabeler
from .estimate import CostEstimate, estimate_cost
from .furniture import FurnitureLibrary, FurniturePlacer
from .picture_frame import PictureFrameGenerator
from .railings import RailingGenerator
from .stairs import StairGenerator
from .substructure import SubstructurePlanner
from .tally import MaterialTally
from .types import DeckScene, FootprintSection, GeneratedPart, Primitive, hex_to_rgba

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Everything one build pass produced.

    A build with errors is still usable: primitives generated before a
    failure are kept.
    """

    primitives: List[Primitive] = field(default_factory=list)
    tally: MaterialTally = field(default_factory=MaterialTally)
    sections: List[FootprintSection] = field(default_factory=list)
    square_feet: float = 0.0
    cost: CostEstimate = field(default_factory=CostEstimate)
    errors: List[str] = field(default_factory=list)
    color: str = "#8b4513"

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[str]:
        """All failures as one human-readable message."""
        if not self.errors:
            return None
        if len(self.errors) == 1:
            return f"Deck build failed: {self.errors[0]}"
        return f"Deck build failed ({len(self.errors)} problems): " + "; ".join(self.errors)

    def to_scene(self) -> DeckScene:
        """Group the primitives for a renderer."""
        scene = DeckScene(metadata={"square_feet": self.square_feet})
        scene.colors["decking"] = hex_to_rgba(self.color)
        for primitive in self.primitives:
            scene.add(primitive)
        return scene

    def to_dict(self, include_primitives: bool = True) -> dict:
        data = {
            "ok": self.ok,
            "error": self.error,
            "errors": list(self.errors),
            "sections": [s.to_dict() for s in self.sections],
            "primitive_count": len(self.primitives),
            "tally": self.tally.to_dict(),
            "square_feet": round(self.square_feet, 2),
            "cost": self.cost.to_dict(),
        }
        if include_primitives:
            data["primitives"] = [p.to_dict() for p in self.primitives]
        return data


class DeckGenerator:
    """
    Generates deck geometry and material totals from a DeckSpec.

    Pipeline:
    1. Split the deck into footprint sections for its shape
    2. Per section: substructure, boards, picture frame, railings
    3. Stairs and furniture on the primary section
    4. Dimension labels
    5. Fold the tallies and price them

    Every call starts from an empty primitive list and a zero tally.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        rates: Optional[CostRates] = None,
        furniture_library: Optional[FurnitureLibrary] = None,
    ):
        self.config = config or GeneratorConfig()
        self.rates = rates or CostRates()

        # Initialize sub-generators
        self.substructure_planner = SubstructurePlanner(self.config)
        self.board_planner = BoardLayoutPlanner(self.config)
        self.picture_frame = PictureFrameGenerator(self.config, self.board_planner)
        self.railing_generator = RailingGenerator(self.config)
        self.stair_generator = StairGenerator(self.config, self.railing_generator)
        self.furniture_placer = FurniturePlacer(furniture_library)
        self.dimension_labeler = DimensionLabeler(self.config)

    def generate(self, spec: DeckSpec) -> BuildResult:
        """
        Build the deck described by ``spec``.

        Args:
            spec: Deck specification (not modified)

        Returns:
            BuildResult with primitives, totals, cost and any errors
        """
        result = BuildResult(color=spec.color)
        parts: List[GeneratedPart] = []

        problems = spec.validate()
        if problems:
            logger.warning(f"Building spec with {len(problems)} problem(s): " + "; ".join(problems))

        try:
            sections = compose_sections(spec)
        except InvalidSpecError as e:
            result.errors.append(str(e))
            logger.error(f"Could not compose deck sections: {e}")
            return result

        result.sections = sections
        built: List[FootprintSection] = []

        for section in sections:
            build = partial(self._build_section, section, spec, built)
            if self._run(section.name, result, parts, build):
                built.append(section)

        primary = sections[0]
        if primary not in built:
            for feature, wanted in (
                ("stairs", spec.stairs),
                ("furniture", bool(spec.furniture) and self.config.generate_furniture),
            ):
                if wanted:
                    result.errors.append(f"{primary.name} {feature}: skipped, primary section failed")
                    logger.warning(f"Skipping {primary.name} {feature}: primary section failed")

        if spec.stairs and primary in built:
            self._run(
                f"{primary.name} stairs",
                result,
                parts,
                lambda: [
                    self.stair_generator.layout(
                        primary,
                        steps=spec.stair_steps,
                        width=spec.stair_width,
                        stair_type=spec.stair_type,
                        railings=spec.railings,
                        railing_style=spec.railing_style,
                    )
                ],
            )

        if spec.furniture and self.config.generate_furniture and primary in built:
            self._run(
                f"{primary.name} furniture",
                result,
                parts,
                lambda: [self.furniture_placer.layout(primary, spec.furniture)],
            )

        if spec.show_dimensions and self.config.generate_dimensions:
            for section in built:
                parts.append(self.dimension_labeler.layout(section))

        for part in parts:
            result.primitives.extend(part.primitives)
        result.tally = MaterialTally.total(part.tally for part in parts)
        result.square_feet = sum(section.area for section in built)
        result.cost = estimate_cost(result.tally, result.square_feet, self.rates)

        logger.info(
            f"Built {spec.shape.value} deck: {len(built)}/{len(sections)} sections, "
            f"{len(result.primitives)} primitives, total ${result.cost.total:.2f}"
        )
        return result

    def _build_section(
        self,
        section: FootprintSection,
        spec: DeckSpec,
        built: Sequence[FootprintSection] = (),
    ) -> Iterator[GeneratedPart]:
        """Yield the parts of one section as each generator finishes.

        Raises InvalidSpecError if the section is unbuildable or its plan
        overlaps a section already built.
        """
        section.validate()
        for other in built:
            if section.overlaps(other):
                raise InvalidSpecError(
                    f"Section '{section.name}' overlaps '{other.name}'",
                    section=section.name,
                )
        stock_lengths = self.config.stock_lengths

        yield self.substructure_planner.layout(section, spec.board_direction)
        yield self.board_planner.layout(
            section,
            direction=spec.board_direction,
            pattern=spec.board_pattern,
            board_length=spec.board_length,
            stock_lengths=stock_lengths,
        )
        if spec.picture_frame:
            yield self.picture_frame.layout(section, spec.board_length, stock_lengths)
        if spec.railings:
            yield self.railing_generator.layout(section, spec.railing_style)

    def _run(
        self,
        name: str,
        result: BuildResult,
        parts: List[GeneratedPart],
        step: Callable[[], Iterable[GeneratedPart]],
    ) -> bool:
        """Run a generation step, recording failures instead of raising.

        Parts produced before a failure are kept.
        """
        try:
            for part in step():
                parts.append(part)
            return True
        except (InvalidSpecError, ValueError) as e:
            result.errors.append(f"{name}: {e}")
            logger.warning(f"Skipping {name}: {e}")
            return False
