"""
Input checks shared by the repositories.

Inputs normally arrive already parsed by the API schemas; these checks run
again at the storage boundary so no caller can write out-of-range data.
"""

from typing import Optional, Union

from talentledger.errors import ValidationError
from .models import (
    Dimension,
    DIMENSIONS,
    SCORE_MIN,
    SCORE_MAX,
    POINTS_MIN,
    POINTS_MAX,
)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_dimension(value: Union[str, Dimension]) -> Dimension:
    """Coerce to Dimension or raise ValidationError."""
    try:
        return Dimension(value)
    except ValueError:
        raise ValidationError(
            "Invalid adjustment type",
            detail=f"Expected one of {', '.join(DIMENSIONS)}, got {value!r}",
        )


def validate_score(value, field_name: str) -> int:
    if not _is_int(value) or not SCORE_MIN <= value <= SCORE_MAX:
        raise ValidationError(
            f"Invalid {field_name}",
            detail=f"{field_name} must be an integer between {SCORE_MIN} and {SCORE_MAX}",
        )
    return value


def validate_points(value) -> int:
    if not _is_int(value) or not POINTS_MIN <= value <= POINTS_MAX:
        raise ValidationError(
            "Invalid points",
            detail=f"points must be an integer between {POINTS_MIN} and {POINTS_MAX}",
        )
    return value


def validate_text(value: Optional[str], field_name: str) -> str:
    """Require a non-blank string. Returns it unchanged."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value


def normalize_affiliation(value: Optional[str]) -> Optional[str]:
    """Empty affiliation is stored as NULL."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Invalid affiliation")
    return value if value.strip() else None
