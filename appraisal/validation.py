"""
Input sanitization for valuation and search requests.

Form inputs never raise: malformed numbers collapse to 0 and the
calculators treat 0 as "not provided".
"""

import math
import re
from typing import Any

# Upper bound accepted for any single area input (m²)
MAX_AREA = 999999

_NON_NUMERIC = re.compile(r"[^\d.]")
_LEADING_NUMBER = re.compile(r"\d*\.?\d*")


def sanitize_numeric_input(value: Any) -> float:
    """
    Coerce a form value to a non-negative finite float.

    Strings are stripped of everything except digits and the decimal
    point, then the leading number is parsed ("1.2.3" reads as 1.2).
    NaN, infinities, negatives and anything unparsable become 0.
    """
    if isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        try:
            number = float(_LEADING_NUMBER.match(cleaned).group())
        except ValueError:
            return 0.0
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def validate_coordinates(lat: float, lng: float) -> bool:
    """Check coordinates are in range and not the (0, 0) null island default."""
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180 and lat != 0 and lng != 0


def validate_area(area: float) -> bool:
    """Check an area is a positive number below MAX_AREA."""
    try:
        area = float(area)
    except (TypeError, ValueError):
        return False
    return not math.isnan(area) and 0 < area < MAX_AREA
