"""Footprint sections for each deck shape."""

from typing import Callable, Dict, List

from core.deck_spec.errors import InvalidSpecError
from core.deck_spec.types import DeckShape, DeckSpec

from .types import FootprintSection

PRIMARY = "primary"
WING = "wing"
SECOND_LEVEL = "second_level"


def _primary(spec: DeckSpec) -> FootprintSection:
    return FootprintSection(
        name=PRIMARY,
        width=spec.width,
        length=spec.length,
        level_height=spec.height,
    )


def _rectangular(spec: DeckSpec) -> List[FootprintSection]:
    return [_primary(spec)]


def _l_shaped(spec: DeckSpec) -> List[FootprintSection]:
    # Wing against the +X edge, its far (-Z) edge flush with the primary corner
    wing = FootprintSection(
        name=WING,
        width=spec.wing_width,
        length=spec.wing_length,
        offset_x=(spec.width + spec.wing_width) / 2,
        offset_z=(spec.wing_length - spec.length) / 2,
        level_height=spec.height,
    )
    return [_primary(spec), wing]


def _t_shaped(spec: DeckSpec) -> List[FootprintSection]:
    # Wing centred on the +Z edge
    wing = FootprintSection(
        name=WING,
        width=spec.wing_width,
        length=spec.wing_length,
        offset_x=0.0,
        offset_z=(spec.length + spec.wing_length) / 2,
        level_height=spec.height,
    )
    return [_primary(spec), wing]


def _multi_level(spec: DeckSpec) -> List[FootprintSection]:
    # Second level behind the primary (-Z), adjacent and raised
    second = FootprintSection(
        name=SECOND_LEVEL,
        width=spec.second_width,
        length=spec.second_length,
        offset_x=0.0,
        offset_z=-(spec.length + spec.second_length) / 2,
        level_height=spec.height + spec.second_height_offset,
    )
    return [_primary(spec), second]


SECTION_BUILDERS: Dict[DeckShape, Callable[[DeckSpec], List[FootprintSection]]] = {
    DeckShape.RECTANGULAR: _rectangular,
    DeckShape.L_SHAPED: _l_shaped,
    DeckShape.T_SHAPED: _t_shaped,
    DeckShape.MULTI_LEVEL: _multi_level,
}


def compose_sections(spec: DeckSpec) -> List[FootprintSection]:
    """Footprint sections for the spec's shape, primary section first."""
    try:
        builder = SECTION_BUILDERS[spec.shape]
    except KeyError:
        raise InvalidSpecError(f"Unsupported deck shape: {spec.shape!r}") from None
    return builder(spec)
