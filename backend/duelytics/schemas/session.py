from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from duelytics.schemas.common import CamelModel

GameModeLiteral = Literal["ladder", "rated", "duelist_cup"]

class SessionCreateIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    game_mode: GameModeLiteral
    starts_at: datetime
    ends_at: datetime
    starting_rating: Decimal | None = Field(None, ge=0)
    point_value: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_window(self):
        if self.ends_at <= self.starts_at:
            raise ValueError("endsAt must be after startsAt")
        return self

class SessionOut(BaseModel):
    id: int
    name: str
    game_mode: str
    status: str
    admin_user_id: str
    starts_at: datetime
    ends_at: datetime
    starting_rating: float
    point_value: float

class SessionListOut(BaseModel):
    success: bool = True
    sessions: list[SessionOut]

class SessionDetailOut(BaseModel):
    success: bool = True
    session: SessionOut

class SessionCreateOut(BaseModel):
    success: bool = True
    message: str
    session: SessionOut

class SessionJoinIn(CamelModel):
    session_id: int
    initial_tier_id: int | None = None
    initial_net_wins: int | None = None

class SessionRefOut(BaseModel):
    id: int
    name: str
    game_mode: str

class SessionJoinOut(BaseModel):
    success: bool = True
    message: str
    session: SessionRefOut
