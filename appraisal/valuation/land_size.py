"""
Land size diminishing factor.

Larger parcels sell for less per m². The factor is piecewise-linear:

    area < 100 m²          -> 1.0
    100 m² .. 2000 m²      -> linear from 1.0 down to 0.50
    area > 2000 m²         -> 0.50
"""

from appraisal.validation import sanitize_numeric_input

LAND_SIZE_START_SQM = 100.0
LAND_SIZE_END_SQM = 2000.0
LAND_SIZE_MIN_FACTOR = 0.50


def land_size_factor(area_sqm: float) -> float:
    """
    Return the unit-price multiplier for a parcel of ``area_sqm``.

    Invalid areas (NaN, negative) are treated as 0 and get the full factor.
    """
    area = sanitize_numeric_input(area_sqm)

    if area < LAND_SIZE_START_SQM:
        return 1.0

    if area > LAND_SIZE_END_SQM:
        return LAND_SIZE_MIN_FACTOR

    span = LAND_SIZE_END_SQM - LAND_SIZE_START_SQM
    reduction = 1.0 - LAND_SIZE_MIN_FACTOR
    return 1.0 - (area - LAND_SIZE_START_SQM) / span * reduction
