"""Unit tests for src/scoring/innings.py"""

import pytest

from src.core.exceptions import OutOfRangeValueError
from src.core.shared_types import InningHalf
from src.scoring.innings import (
    MAX_OUTS,
    OutsChange,
    add_outs,
    advance_half_inning,
    force_half_inning,
    parse_half,
    set_outs,
    toggle_out,
)


# -- SET OUTS --
@pytest.mark.parametrize("current, target", [(0, 1), (1, 2), (2, 3), (0, 2)])
def test_filling_outs(current: int, target: int) -> None:
    change = set_outs(current, target)
    assert change.outs == target


@pytest.mark.parametrize("current, target", [(3, 0), (2, 1), (3, 1), (1, 0)])
def test_jumping_back_to_lower_count(current: int, target: int) -> None:
    """Correcting a mis-tap un-records every out above the new value."""
    change = set_outs(current, target)
    assert change == OutsChange(outs=target, ready_to_advance=False)


def test_third_out_signals_ready_to_advance() -> None:
    """Three outs does not advance anything by itself. It just flags it."""
    assert set_outs(2, 3) == OutsChange(outs=MAX_OUTS, ready_to_advance=True)
    assert set_outs(0, 3).ready_to_advance


@pytest.mark.parametrize("current", [0, 1, 2])
def test_no_ready_signal_below_three_outs(current: int) -> None:
    assert not set_outs(current, current).ready_to_advance


@pytest.mark.parametrize("target", [-1, 4, 10, 2.5, True, "2"])
def test_outs_out_of_range(target: object) -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = set_outs(1, target)  # type: ignore[arg-type]


# -- ADD OUTS --
def test_double_play() -> None:
    assert add_outs(1, 2) == OutsChange(outs=3, ready_to_advance=True)


def test_adding_outs_never_goes_past_three() -> None:
    assert add_outs(2, 3).outs == MAX_OUTS


def test_single_out_by_default() -> None:
    assert add_outs(0).outs == 1


@pytest.mark.parametrize("count", [0, 4, -1])
def test_invalid_out_count(count: int) -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = add_outs(0, count)


# -- TOGGLE OUT --
@pytest.mark.parametrize(
    "current, out_number, expected",
    [
        (0, 1, 1),  # fill the first marker
        (0, 3, 3),  # fill up to the third marker at once
        (1, 2, 2),
        (2, 2, 1),  # tap a filled marker: clears it
        (3, 1, 0),  # tap the first filled marker: clears all
        (2, 1, 0),
    ],
)
def test_toggle_out(current: int, out_number: int, expected: int) -> None:
    assert toggle_out(current, out_number).outs == expected


def test_toggle_to_three_outs_signals_ready() -> None:
    assert toggle_out(2, 3).ready_to_advance


@pytest.mark.parametrize("out_number", [0, 4])
def test_toggle_unknown_marker(out_number: int) -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = toggle_out(1, out_number)


# -- ADVANCE HALF INNING --
def test_top_goes_to_bottom_of_same_inning() -> None:
    assert advance_half_inning(3, InningHalf.TOP) == (3, InningHalf.BOTTOM)


def test_bottom_goes_to_top_of_next_inning() -> None:
    assert advance_half_inning(3, InningHalf.BOTTOM) == (4, InningHalf.TOP)


def test_full_game_of_half_innings() -> None:
    """18 advances from the top of the 1st lands on the top of the 10th (extra innings)."""
    inning, half = 1, InningHalf.TOP
    for _ in range(18):
        inning, half = advance_half_inning(inning, half)
    assert (inning, half) == (10, InningHalf.TOP)


def test_advance_from_invalid_inning() -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = advance_half_inning(0, InningHalf.TOP)


# -- FORCE HALF INNING --
def test_force_half_inning() -> None:
    assert force_half_inning(7, InningHalf.BOTTOM) == (7, InningHalf.BOTTOM)
    assert force_half_inning(2, "top") == (2, InningHalf.TOP)  # type: ignore[arg-type]


def test_force_invalid_inning() -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = force_half_inning(-2, InningHalf.TOP)


@pytest.mark.parametrize("value, expected", [("top", InningHalf.TOP), ("Bottom", InningHalf.BOTTOM)])
def test_parse_half(value: str, expected: InningHalf) -> None:
    assert parse_half(value) == expected


@pytest.mark.parametrize("value", ["middle", "", None, 1])
def test_parse_unknown_half(value: object) -> None:
    with pytest.raises(OutOfRangeValueError):
        _ = parse_half(value)
    with pytest.raises(OutOfRangeValueError):
        _ = force_half_inning(4, value)  # type: ignore[arg-type]
