"""SQL for the duel submission path.

One repository instance wraps one database session, i.e. one unit of work:
everything written between ``lock_stats`` and ``commit`` lands together or not
at all.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import sqlalchemy as sa
from sqlalchemy.orm import Session

from duelytics.services.audit import audit

_STATS_COLUMNS = """
    session_id, user_id, total_games, total_wins, current_points,
    current_tier_id, current_net_wins, last_updated
"""


class DuelRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, session_id: int):
        return self.db.execute(sa.text("""
            SELECT id, name, game_mode, status, admin_user_id, starts_at, ends_at,
                   starting_rating, point_value
            FROM sessions
            WHERE id=:s
        """), {"s": session_id}).mappings().first()

    def get_participant(self, session_id: int, user_id: str):
        return self.db.execute(sa.text("""
            SELECT session_id, user_id, joined_at, initial_tier_id, initial_net_wins
            FROM session_participants
            WHERE session_id=:s AND user_id=:u
        """), {"s": session_id, "u": user_id}).mappings().first()

    def existing_deck_ids(self, deck_ids: Iterable[int]) -> set[int]:
        ids = sorted({int(d) for d in deck_ids})
        if not ids:
            return set()
        ids_bp = sa.bindparam("ids", expanding=True)
        rows = self.db.execute(
            sa.text("SELECT id FROM decks WHERE id IN :ids").bindparams(ids_bp),
            {"ids": ids},
        ).scalars().all()
        return {int(r) for r in rows}

    def ensure_stats(self, session_id: int, user_id: str, values: dict) -> None:
        self.db.execute(sa.text("""
            INSERT INTO player_session_stats (session_id, user_id, current_points, current_tier_id, current_net_wins)
            VALUES (:s, :u, :p, :t, :n)
            ON CONFLICT (session_id, user_id) DO NOTHING
        """), {
            "s": session_id,
            "u": user_id,
            "p": values["current_points"],
            "t": values["current_tier_id"],
            "n": values["current_net_wins"],
        })

    def lock_stats(self, session_id: int, user_id: str):
        # Row lock serializes submissions of the same participant until commit/rollback.
        return self.db.execute(sa.text(f"""
            SELECT {_STATS_COLUMNS}
            FROM player_session_stats
            WHERE session_id=:s AND user_id=:u
            FOR UPDATE
        """), {"s": session_id, "u": user_id}).mappings().first()

    def insert_duel(
        self,
        *,
        session_id: int,
        user_id: str,
        player_deck_id: int,
        opponent_deck_id: int,
        coin_flip_won: bool,
        went_first: bool,
        result: str,
        points_change: Decimal,
    ) -> int:
        return self.db.execute(sa.text("""
            INSERT INTO duels (
                session_id, user_id, player_deck_id, opponent_deck_id,
                coin_flip_won, went_first, result, points_change
            ) VALUES (:s, :u, :pd, :od, :cf, :wf, :r, :pc)
            RETURNING id
        """), {
            "s": session_id,
            "u": user_id,
            "pd": player_deck_id,
            "od": opponent_deck_id,
            "cf": coin_flip_won,
            "wf": went_first,
            "r": result,
            "pc": points_change,
        }).scalar_one()

    def update_stats(self, session_id: int, user_id: str, *, won: bool, net_wins_delta: int, points_delta: Decimal):
        return self.db.execute(sa.text(f"""
            UPDATE player_session_stats
            SET total_games = total_games + 1,
                total_wins = total_wins + :w,
                current_net_wins = current_net_wins + :nw,
                current_points = current_points + :pd,
                last_updated = now()
            WHERE session_id=:s AND user_id=:u
            RETURNING {_STATS_COLUMNS}
        """), {
            "s": session_id,
            "u": user_id,
            "w": 1 if won else 0,
            "nw": net_wins_delta,
            "pd": points_delta,
        }).mappings().first()

    def set_ladder_position(self, session_id: int, user_id: str, tier_id: int, net_wins: int) -> None:
        self.db.execute(sa.text("""
            UPDATE player_session_stats
            SET current_tier_id=:t, current_net_wins=:n, last_updated=now()
            WHERE session_id=:s AND user_id=:u
        """), {"s": session_id, "u": user_id, "t": tier_id, "n": net_wins})

    def load_tiers(self):
        return self.db.execute(sa.text("""
            SELECT id, tier_name, wins_required, can_demote_from, sort_order
            FROM ladder_tiers
            ORDER BY sort_order
        """)).mappings().all()

    def audit(self, actor_user_id: str | None, entity_type: str, entity_id, action: str, data: dict | None = None) -> None:
        audit(self.db, actor_user_id, entity_type, entity_id, action, data)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
