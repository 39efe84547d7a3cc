"""Validation schema for imported deck spec documents."""

import logging
from typing import Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedImportError
from .types import (
    AUTO_BOARD_LENGTH,
    BoardDirection,
    BoardPattern,
    DeckShape,
    DeckSpec,
    FurnitureItem,
    RailingStyle,
    StairType,
)

logger = logging.getLogger(__name__)


class FurnitureDocument(BaseModel):
    """Furniture entry in a spec document."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    type: str = "chair"
    x: float = 0.0
    z: float = 0.0
    rotation: float = 0.0


class DeckSpecDocument(BaseModel):
    """Spec document as exchanged over the API and in export files.

    Unknown keys are ignored and missing keys take the DeckSpec defaults.
    Non-finite numbers (Infinity, NaN) are rejected like any other bad value.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    shape: DeckShape = DeckShape.RECTANGULAR
    width: float = Field(12.0, gt=0)
    length: float = Field(12.0, gt=0)
    wing_width: float = Field(6.0, gt=0, alias="wingWidth")
    wing_length: float = Field(6.0, gt=0, alias="wingLength")
    second_width: float = Field(6.0, gt=0, alias="secondWidth")
    second_length: float = Field(6.0, gt=0, alias="secondLength")
    second_height_offset: float = Field(1.0, gt=0, alias="secondHeightOffset")
    height: float = Field(1.0, gt=0)

    board_direction: BoardDirection = Field(BoardDirection.HORIZONTAL, alias="boardDirection")
    board_pattern: BoardPattern = Field(BoardPattern.STANDARD, alias="boardPattern")
    board_length: Union[Literal["auto"], float] = Field(AUTO_BOARD_LENGTH, alias="boardLength")

    picture_frame: bool = Field(False, alias="pictureFrame")
    railings: bool = False
    stairs: bool = False
    stair_steps: int = Field(3, ge=1, alias="stairSteps")
    stair_width: float = Field(4.0, gt=0, alias="stairWidth")
    stair_type: StairType = Field(StairType.STRAIGHT, alias="stairType")
    railing_style: RailingStyle = Field(RailingStyle.STANDARD, alias="railingStyle")

    show_dimensions: bool = Field(True, alias="showDimensions")
    color: str = Field("#8b4513", pattern=r"^#[0-9a-fA-F]{6}$")
    furniture: List[FurnitureDocument] = Field(default_factory=list)

    @field_validator("board_length")
    @classmethod
    def board_length_must_be_positive(cls, v: Union[str, float]) -> Union[str, float]:
        """Explicit stock lengths must be positive."""
        if v != AUTO_BOARD_LENGTH and v <= 0:
            raise ValueError("boardLength must be 'auto' or a positive length")
        return v

    def to_spec(self) -> DeckSpec:
        """Convert the validated document into a DeckSpec."""
        values = self.model_dump(exclude={"furniture"})
        return DeckSpec(
            **values,
            furniture=[FurnitureItem(**item.model_dump()) for item in self.furniture],
        )


def load_spec_document(data: Any, lenient: bool = False) -> DeckSpec:
    """Validate an untrusted spec document and build a DeckSpec.

    Args:
        data: Decoded JSON document.
        lenient: When True, fields that fail validation are replaced by their
            defaults (with a warning) instead of rejecting the document.

    Returns:
        The validated DeckSpec.

    Raises:
        MalformedImportError: If the document is not an object, or a field is
            invalid and ``lenient`` is False.
    """
    if not isinstance(data, dict):
        raise MalformedImportError(
            f"Spec document must be an object, got {type(data).__name__}"
        )

    try:
        return DeckSpecDocument.model_validate(data).to_spec()
    except ValidationError as e:
        bad_fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        if not lenient or not bad_fields:
            raise MalformedImportError(
                f"Invalid spec fields: {', '.join(bad_fields) or 'document'}",
                fields=bad_fields,
            ) from e

    logger.warning(f"Defaulting invalid spec fields on import: {', '.join(bad_fields)}")
    cleaned = {k: v for k, v in data.items() if k not in bad_fields}
    try:
        return DeckSpecDocument.model_validate(cleaned).to_spec()
    except ValidationError as e:
        raise MalformedImportError(
            "Spec document could not be repaired", fields=bad_fields
        ) from e
