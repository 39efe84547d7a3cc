"""Deck specification data classes."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

AUTO_BOARD_LENGTH = "auto"

BoardLength = Union[str, float]


class DeckShape(Enum):
    """Deck footprint topology."""
    RECTANGULAR = "rectangular"
    L_SHAPED = "l-shaped"
    T_SHAPED = "t-shaped"
    MULTI_LEVEL = "multi-level"


class BoardDirection(Enum):
    """Direction the decking boards run in plan."""
    HORIZONTAL = "horizontal"  # along X
    VERTICAL = "vertical"  # along Z


class BoardPattern(Enum):
    """Decking board pattern."""
    STANDARD = "standard"
    DIAGONAL = "diagonal"


class StairType(Enum):
    """Stair construction."""
    STRAIGHT = "straight"
    SPIRAL = "spiral"


class RailingStyle(Enum):
    """Railing infill style."""
    STANDARD = "standard"
    CABLE = "cable"


@dataclass
class FurnitureItem:
    """A furniture piece placed on the primary deck surface."""

    type: str = "chair"
    x: float = 0.0  # feet from primary section centre
    z: float = 0.0
    rotation: float = 0.0  # degrees about the vertical axis

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "x": self.x,
            "z": self.z,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FurnitureItem":
        return cls(
            type=data.get("type", "chair"),
            x=data.get("x", 0.0),
            z=data.get("z", 0.0),
            rotation=data.get("rotation", 0.0),
        )


@dataclass
class DeckSpec:
    """Everything the engine needs to build a deck.

    Dimensions are in feet. ``width`` is the X extent and ``length`` the Z
    extent of the primary footprint; ``height`` is the elevation of the
    primary deck surface above grade.
    """

    shape: DeckShape = DeckShape.RECTANGULAR
    width: float = 12.0
    length: float = 12.0
    wing_width: float = 6.0
    wing_length: float = 6.0
    second_width: float = 6.0
    second_length: float = 6.0
    second_height_offset: float = 1.0
    height: float = 1.0

    board_direction: BoardDirection = BoardDirection.HORIZONTAL
    board_pattern: BoardPattern = BoardPattern.STANDARD
    board_length: BoardLength = AUTO_BOARD_LENGTH

    picture_frame: bool = False
    railings: bool = False
    stairs: bool = False
    stair_steps: int = 3
    stair_width: float = 4.0
    stair_type: StairType = StairType.STRAIGHT
    railing_style: RailingStyle = RailingStyle.STANDARD

    show_dimensions: bool = True
    color: str = "#8b4513"
    furniture: List[FurnitureItem] = field(default_factory=list)

    @property
    def is_auto_board_length(self) -> bool:
        return self.board_length == AUTO_BOARD_LENGTH

    @property
    def step_height(self) -> float:
        """Rise of a single stair step."""
        if self.stair_steps < 1:
            return math.inf
        return self.height / self.stair_steps

    def validate(self) -> List[str]:
        """Return a list of violated invariants (empty when valid)."""
        problems = []
        dimensions = {
            "width": self.width,
            "length": self.length,
            "height": self.height,
        }
        if self.shape in (DeckShape.L_SHAPED, DeckShape.T_SHAPED):
            dimensions["wingWidth"] = self.wing_width
            dimensions["wingLength"] = self.wing_length
        if self.shape == DeckShape.MULTI_LEVEL:
            dimensions["secondWidth"] = self.second_width
            dimensions["secondLength"] = self.second_length
            dimensions["secondHeightOffset"] = self.second_height_offset

        for name, value in dimensions.items():
            if not (math.isfinite(value) and value > 0):
                problems.append(f"{name} must be finite and positive, got {value}")

        if not self.is_auto_board_length:
            if not isinstance(self.board_length, (int, float)) or self.board_length <= 0:
                problems.append(
                    f"boardLength must be 'auto' or a positive length, got {self.board_length!r}"
                )

        if self.stairs:
            if self.stair_steps < 1:
                problems.append(f"stairSteps must be at least 1, got {self.stair_steps}")
            if not (math.isfinite(self.stair_width) and self.stair_width > 0):
                problems.append(f"stairWidth must be finite and positive, got {self.stair_width}")
            if not math.isfinite(self.step_height) or self.step_height <= 0:
                problems.append("stair step height must be finite and positive")

        return problems

    def to_dict(self) -> dict:
        """Serialize to the plain key-value document used for history and export."""
        return {
            "shape": self.shape.value,
            "width": self.width,
            "length": self.length,
            "wingWidth": self.wing_width,
            "wingLength": self.wing_length,
            "secondWidth": self.second_width,
            "secondLength": self.second_length,
            "secondHeightOffset": self.second_height_offset,
            "height": self.height,
            "boardDirection": self.board_direction.value,
            "boardPattern": self.board_pattern.value,
            "boardLength": self.board_length,
            "pictureFrame": self.picture_frame,
            "railings": self.railings,
            "stairs": self.stairs,
            "stairSteps": self.stair_steps,
            "stairWidth": self.stair_width,
            "stairType": self.stair_type.value,
            "railingStyle": self.railing_style.value,
            "showDimensions": self.show_dimensions,
            "color": self.color,
            "furniture": [item.to_dict() for item in self.furniture],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DeckSpec":
        """Create a DeckSpec from a trusted document.

        Missing keys take their defaults. Untrusted documents should go
        through :func:`core.deck_spec.schema.load_spec_document` instead.
        """
        defaults = cls()
        return cls(
            shape=DeckShape(data.get("shape", defaults.shape.value)),
            width=data.get("width", defaults.width),
            length=data.get("length", defaults.length),
            wing_width=data.get("wingWidth", defaults.wing_width),
            wing_length=data.get("wingLength", defaults.wing_length),
            second_width=data.get("secondWidth", defaults.second_width),
            second_length=data.get("secondLength", defaults.second_length),
            second_height_offset=data.get("secondHeightOffset", defaults.second_height_offset),
            height=data.get("height", defaults.height),
            board_direction=BoardDirection(
                data.get("boardDirection", defaults.board_direction.value)
            ),
            board_pattern=BoardPattern(data.get("boardPattern", defaults.board_pattern.value)),
            board_length=data.get("boardLength", defaults.board_length),
            picture_frame=data.get("pictureFrame", defaults.picture_frame),
            railings=data.get("railings", defaults.railings),
            stairs=data.get("stairs", defaults.stairs),
            stair_steps=data.get("stairSteps", defaults.stair_steps),
            stair_width=data.get("stairWidth", defaults.stair_width),
            stair_type=StairType(data.get("stairType", defaults.stair_type.value)),
            railing_style=RailingStyle(data.get("railingStyle", defaults.railing_style.value)),
            show_dimensions=data.get("showDimensions", defaults.show_dimensions),
            color=data.get("color", defaults.color),
            furniture=[FurnitureItem.from_dict(f) for f in data.get("furniture", [])],
        )

    def copy(self) -> "DeckSpec":
        """Independent copy with value semantics."""
        return DeckSpec.from_dict(self.to_dict())
