from datetime import datetime

from pydantic import BaseModel, Field

class DeckIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)

class DeckOut(BaseModel):
    id: int
    name: str
    created_at: datetime

class DeckListOut(BaseModel):
    success: bool = True
    decks: list[DeckOut]

class DeckSavedOut(BaseModel):
    success: bool = True
    message: str
    deck: DeckOut

class DeckStats(BaseModel):
    wins: int
    losses: int
    total_games: int
    win_rate: float

class DeckStatsOut(BaseModel):
    success: bool = True
    stats: DeckStats
