from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import AliasChoices, Field

from duelytics.schemas.common import CamelModel

class DuelSubmitIn(CamelModel):
    session_id: int
    player_deck_id: int
    opponent_deck_id: int  # may equal player_deck_id (mirror match)
    result: Literal["win", "loss"]
    coin_flip_won: bool = False
    went_first: bool = False

    # rated / duelist_cup only; older clients send it as pointsChange
    points_input: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("pointsInput", "pointsChange", "points_input"),
    )

class TierProgressionOut(CamelModel):
    type: Literal["none", "promotion", "demotion"] = "none"
    from_tier: str | None = None
    to_tier: str | None = None
    message: str | None = None

class DuelSubmitOut(CamelModel):
    success: bool = True
    duel_id: int
    game_mode: str
    result: str
    points_change: float
    tier_progression: TierProgressionOut
    message: str

class DuelRowOut(CamelModel):
    id: int
    player_deck_id: int
    player_deck_name: str
    opponent_deck_id: int
    opponent_deck_name: str
    coin_flip_won: bool
    went_first: bool
    result: str
    points_change: float
    created_at: datetime

class DuelHistoryOut(CamelModel):
    success: bool = True
    duels: list[DuelRowOut]
