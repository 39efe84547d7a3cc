"""Dimension labels for footprint sections."""

from typing import Optional

from core.deck_spec.units import format_length

from .config import GeneratorConfig
from .types import FootprintSection, GeneratedPart, Primitive


class DimensionLabeler:
    """Adds width and length sprites just outside a section's edges."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def layout(self, section: FootprintSection) -> GeneratedPart:
        offset = self.config.label_offset
        y = section.level_height + offset / 2
        return GeneratedPart(
            [
                Primitive.sprite(
                    (section.offset_x, y, section.min_z - offset),
                    format_length(section.width),
                    source_id=section.name,
                ),
                Primitive.sprite(
                    (section.min_x - offset, y, section.offset_z),
                    format_length(section.length),
                    source_id=section.name,
                ),
            ]
        )
