"""
Inning / outs bookkeeping.

Pure functions: they compute new values and never touch a GameState themselves.
Reaching three outs does NOT advance the inning. The caller gets a ready_to_advance signal and
advancing is a separate, explicit action (the operator may still want to record a late run first).
"""

from dataclasses import dataclass

from src.core.exceptions import OutOfRangeValueError
from src.core.shared_types import InningHalf

MAX_OUTS = 3


@dataclass(frozen=True)
class OutsChange:
    outs: int
    ready_to_advance: bool


def set_outs(current: int, target: int) -> OutsChange:
    """
    Set the out count for the current half-inning.
    ----

    Filling the next out(s) and jumping back to a lower count (correcting a mis-tap) are both accepted.
    Jumping back implicitly un-records every out above the new value.
    """
    _check_outs(current, "current")
    _check_outs(target, "target")
    return OutsChange(outs=target, ready_to_advance=target == MAX_OUTS)


def add_outs(current: int, count: int = 1) -> OutsChange:
    """Record 1-3 outs on a single play (double play, triple play). Never goes past three."""
    if not _is_int(count) or not 1 <= count <= MAX_OUTS:
        raise OutOfRangeValueError(
            f"Out count must be a whole number between 1 and {MAX_OUTS}, got {count!r}."
        )
    _check_outs(current, "current")
    return set_outs(current, min(current + count, MAX_OUTS))


def toggle_out(current: int, out_number: int) -> OutsChange:
    """
    Tap on one of the three out markers.
    ----

    Tapping a recorded out clears it and every out after it, tapping an empty one fills up to it.
    """
    if not _is_int(out_number) or not 1 <= out_number <= MAX_OUTS:
        raise OutOfRangeValueError(
            f"Out marker must be between 1 and {MAX_OUTS}, got {out_number!r}."
        )
    target = out_number - 1 if out_number <= current else out_number
    return set_outs(current, target)


def advance_half_inning(inning: int, half: InningHalf) -> tuple[int, InningHalf]:
    """top -> bottom of the same inning. bottom -> top of the next inning.

    NOTE the out count goes back to 0 together with this transition. The caller must apply both at once.
    """
    _check_inning(inning)
    if half == InningHalf.TOP:
        return inning, InningHalf.BOTTOM
    return inning + 1, InningHalf.TOP


def force_half_inning(inning: int, half: InningHalf) -> tuple[int, InningHalf]:
    """Jump straight to a given inning/half (corrections). Outs reset like any other advance."""
    _check_inning(inning)
    return inning, parse_half(half)


def parse_half(value: object) -> InningHalf:
    """InningHalf from its name (top / bottom). Anything else is out of range."""
    if not isinstance(value, str) or value.lower() not in {h.value for h in InningHalf}:
        raise OutOfRangeValueError(
            f"Half-inning must be one of {[h.value for h in InningHalf]}, got {value!r}."
        )
    return InningHalf(value.lower())


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_outs(value: int, label: str) -> None:
    if not _is_int(value) or not 0 <= value <= MAX_OUTS:
        raise OutOfRangeValueError(
            f"Outs ({label}) must be between 0 and {MAX_OUTS}, got {value!r}."
        )


def _check_inning(inning: int) -> None:
    if not _is_int(inning) or inning < 1:
        raise OutOfRangeValueError(f"Inning must be at least 1, got {inning!r}.")
