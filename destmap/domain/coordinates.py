"""Parsing for the single ``"<lat>, <lon>"`` coordinate field."""

from __future__ import annotations

from typing import Optional

from .entities import Coordinates
from .errors import ValidationError

INVALID_COORDINATES_MESSAGE = "Invalid latitude/longitude"


def parse_coordinates(raw: Optional[str]) -> Coordinates:
    """Split ``raw`` on commas and require exactly two non-empty tokens.

    Tokens are only trimmed. Numeric format and range are not checked, so
    ``"north, 77"`` passes and is forwarded verbatim.

    Raises:
        ValidationError: when the field is empty, has no comma, has more than
            two components, or either component is blank.
    """
    parts = [token.strip() for token in (raw or "").split(",")]
    if len(parts) != 2 or not all(parts):
        raise ValidationError("INVALID_COORDINATES", INVALID_COORDINATES_MESSAGE)
    return Coordinates(latitude=parts[0], longitude=parts[1])


def format_coordinates(latitude: float, longitude: float) -> str:
    """Render provider geometry the way the form field expects it."""
    return f"{_number_token(latitude)}, {_number_token(longitude)}"


def _number_token(value: float) -> str:
    # Integral degrees render without a trailing ".0".
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


__all__ = ["INVALID_COORDINATES_MESSAGE", "format_coordinates", "parse_coordinates"]
