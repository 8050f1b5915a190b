# Epley estimate of a one-rep max, used as the common strength score
# Formula: 1RM = w * (1 + r / 30), rounded half-up to a whole number.
# A heavy low-rep set and a lighter high-rep set land on the same scale.

import math
from numbers import Integral, Real

from .constants import EPLEY_REPS_DIVISOR
from .errors import InvalidInputError


def _validate_weight(weight_kg) -> float:
    if isinstance(weight_kg, bool) or not isinstance(weight_kg, Real):
        raise InvalidInputError(f"weight_kg must be a number, got {weight_kg!r}")
    weight = float(weight_kg)
    if not math.isfinite(weight) or weight <= 0:
        raise InvalidInputError(f"weight_kg must be positive, got {weight_kg!r}")
    return weight


def _validate_reps(reps) -> int:
    if isinstance(reps, bool):
        raise InvalidInputError(f"reps must be an integer, got {reps!r}")
    if isinstance(reps, Real) and not isinstance(reps, Integral):
        if not math.isfinite(reps) or reps != int(reps):
            raise InvalidInputError(f"reps must be a whole number, got {reps!r}")
        reps = int(reps)
    if not isinstance(reps, Integral):
        raise InvalidInputError(f"reps must be an integer, got {reps!r}")
    if reps < 1:
        raise InvalidInputError(f"reps must be 1 or greater, got {reps!r}")
    return int(reps)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (no banker's rounding)."""
    return int(math.floor(value + 0.5))


def score(weight_kg: float, reps: int) -> int:
    """
    Strength score of a single set: the rounded Epley 1RM estimate.

    Raises InvalidInputError if weight_kg is not a positive finite number
    or reps is not a whole number >= 1.
    """
    weight = _validate_weight(weight_kg)
    reps = _validate_reps(reps)
    return round_half_up(weight * (1 + reps / EPLEY_REPS_DIVISOR))


def score_entry(entry) -> int:
    return score(entry.weight_kg, entry.reps)


def format_weight(weight_kg: float) -> str:
    weight = float(weight_kg)
    if weight.is_integer():
        return str(int(weight))
    return f"{weight:g}"


def format_lift_label(weight_kg: float, reps: int) -> str:
    """Display label such as '100×5' or '72.5×3'."""
    return f"{format_weight(weight_kg)}×{int(reps)}"
