from datetime import datetime

from pydantic import BaseModel

class PlayerStatsOut(BaseModel):
    session_id: int
    user_id: str
    total_games: int
    total_wins: int
    total_losses: int
    current_points: float
    current_tier_id: int | None
    current_tier: str | None
    current_net_wins: int
    last_updated: datetime

class PlayerStatsEnvelope(BaseModel):
    success: bool = True
    stats: PlayerStatsOut

class ParticipantRowOut(BaseModel):
    user_id: str
    joined_at: datetime
    total_games: int | None
    total_wins: int | None
    total_losses: int | None
    current_points: float | None
    current_net_wins: int | None
    tier_name: str | None

class ParticipantsOut(BaseModel):
    success: bool = True
    participants: list[ParticipantRowOut]
