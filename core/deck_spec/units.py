"""Length helpers for feet/inch form values."""

import math


def compose_length(feet: float, inches: float = 0.0) -> float:
    """Combine a feet field and an inches field into decimal feet."""
    return float(feet) + float(inches) / 12.0


def split_length(value: float) -> tuple[int, float]:
    """Split decimal feet into whole feet and remaining inches.

    Inches are rounded to a quarter inch; a rounded value of 12 carries into
    the feet.
    """
    sign = -1 if value < 0 else 1
    value = abs(value)
    feet = math.floor(value)
    inches = round((value - feet) * 12 * 4) / 4
    if inches >= 12:
        feet += 1
        inches = 0.0
    return sign * feet, inches


def format_length(value: float) -> str:
    """Format decimal feet as a label such as ``12' 6"``."""
    feet, inches = split_length(value)
    if inches == int(inches):
        return f"{feet}' {int(inches)}\""
    return f"{feet}' {inches:g}\""
