"""Per-game-mode point calculation.

The three modes form a closed set (``GameMode``). ``strategy_for`` resolves a
mode to its delta function; a new mode means a new enum member plus a branch
there. Every function returns the *effective* delta, i.e. the value that is
persisted on the duel and applied to the player's stats as-is.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Callable

from duelytics.core.errors import ValidationError

POINTS_QUANTUM = Decimal("0.01")
# NUMERIC(10,2)
MAX_POINTS = Decimal("99999999.99")


class GameMode(str, Enum):
    LADDER = "ladder"
    RATED = "rated"
    DUELIST_CUP = "duelist_cup"


class DuelResult(str, Enum):
    WIN = "win"
    LOSS = "loss"

    @property
    def sign(self) -> int:
        return 1 if self is DuelResult.WIN else -1


DeltaFn = Callable[[DuelResult, object, Decimal | None], Decimal]


def parse_game_mode(value) -> GameMode:
    try:
        return GameMode(value)
    except ValueError:
        raise ValidationError(f"Unsupported game mode: {value}")


def parse_result(value) -> DuelResult:
    try:
        return DuelResult(value)
    except ValueError:
        raise ValidationError("result must be 'win' or 'loss'")


def to_points(value) -> Decimal:
    """Coerce a stored/declared point value to a 2-decimal Decimal."""
    if value is None or isinstance(value, bool):
        raise ValidationError("points value must be numeric")
    try:
        out = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("points value must be numeric")
    if not out.is_finite():
        raise ValidationError("points value must be a finite number")
    try:
        return out.quantize(POINTS_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("points value out of range")


def requires_magnitude(mode: GameMode) -> bool:
    return mode in (GameMode.RATED, GameMode.DUELIST_CUP)


def _declared_magnitude(declared_magnitude) -> Decimal:
    if declared_magnitude is None or (isinstance(declared_magnitude, str) and not declared_magnitude.strip()):
        raise ValidationError("pointsInput is required for rated and duelist_cup sessions")
    magnitude = abs(to_points(declared_magnitude))
    if magnitude > MAX_POINTS:
        raise ValidationError("pointsInput is too large")
    return magnitude


def _check_total(current: Decimal, delta: Decimal) -> Decimal:
    if abs(current + delta) > MAX_POINTS:
        raise ValidationError("Resulting points are out of range")
    return delta


def _ladder_delta(result: DuelResult, declared_magnitude, current_points: Decimal | None) -> Decimal:
    return Decimal(result.sign)


def _rated_delta(result: DuelResult, declared_magnitude, current_points: Decimal | None) -> Decimal:
    delta = result.sign * _declared_magnitude(declared_magnitude)
    current = to_points(current_points if current_points is not None else 0)
    return _check_total(current, delta)


def _cup_delta(result: DuelResult, declared_magnitude, current_points: Decimal | None) -> Decimal:
    raw = result.sign * _declared_magnitude(declared_magnitude)
    current = to_points(current_points if current_points is not None else 0)
    return _check_total(current, max(Decimal("0.00"), current + raw) - current)


def strategy_for(mode: GameMode) -> DeltaFn:
    if mode is GameMode.LADDER:
        return _ladder_delta
    if mode is GameMode.RATED:
        return _rated_delta
    if mode is GameMode.DUELIST_CUP:
        return _cup_delta
    raise ValidationError(f"Unsupported game mode: {mode}")


def compute_delta(mode, result, declared_magnitude=None, current_points=None) -> Decimal:
    """Signed delta for one duel.

    ladder: +1/-1, magnitude ignored.
    rated: +/-|magnitude|, no floor.
    duelist_cup: +/-|magnitude| clamped so that current_points + delta >= 0.
    """
    game_mode = parse_game_mode(mode)
    duel_result = parse_result(result)
    return strategy_for(game_mode)(duel_result, declared_magnitude, current_points)


def starting_points(mode: GameMode, starting_rating) -> Decimal:
    if mode is GameMode.RATED:
        return to_points(starting_rating)
    return Decimal("0.00")


def check_declared_magnitude(mode: GameMode, declared_magnitude) -> None:
    """Raise ValidationError up front, before anything is written."""
    if requires_magnitude(mode):
        _declared_magnitude(declared_magnitude)
