"""Score validation and display helpers."""

import math
import numbers
from typing import Optional

from core.models import Score
from utils.error_handler import InvalidScore

def validate_score(value: object, student: Optional[str] = None) -> Score:
    """Returns value unchanged if it is a finite real number.

    Raises:
        InvalidScore: For None, booleans, non-numeric values, NaN and infinities.
    """
    who = f" for {student}" if student else ""
    if value is None:
        raise InvalidScore(f"Missing score{who}.", value=value, student=student)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidScore(f"Score{who} is not numeric: {value!r}", value=value, student=student)
    if not math.isfinite(value):
        raise InvalidScore(f"Score{who} is not finite: {value!r}", value=value, student=student)
    return value

def format_score(value: Score) -> str:
    """Formats a score the way it is shown to readers: 95.0 -> '95', 92.5 -> '92.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
