"""Recompute each stats row from the duel log and report drift.

games and wins are recounted for every session; current_points is rebuilt for
rated and duelist_cup sessions.
"""
import sqlalchemy as sa

from duelytics.db.session import SessionLocal
from duelytics.services.scoring import parse_game_mode, to_points
from duelytics.services.stats import rebuilt_points


def load_rows(db):
    return db.execute(sa.text("""
        SELECT
            pss.session_id,
            pss.user_id,
            s.game_mode,
            s.starting_rating,
            pss.total_games,
            pss.total_wins,
            pss.current_points,
            count(d.id)::int AS duel_games,
            count(d.id) FILTER (WHERE d.result='win')::int AS duel_wins,
            coalesce(sum(d.points_change), 0) AS duel_points
        FROM player_session_stats pss
        JOIN sessions s ON s.id = pss.session_id
        LEFT JOIN duels d ON d.session_id = pss.session_id AND d.user_id = pss.user_id
        GROUP BY pss.session_id, pss.user_id, s.game_mode, s.starting_rating,
                 pss.total_games, pss.total_wins, pss.current_points
        ORDER BY pss.session_id, pss.user_id
    """)).mappings().all()


def find_mismatches(rows):
    out = []
    for r in rows:
        expected_points = rebuilt_points(parse_game_mode(r["game_mode"]), r["starting_rating"], r["duel_points"])
        if (
            r["total_games"] != r["duel_games"]
            or r["total_wins"] != r["duel_wins"]
            or (expected_points is not None and to_points(r["current_points"]) != expected_points)
        ):
            out.append({**r, "expected_points": expected_points})
    return out


def main():
    db = SessionLocal()
    try:
        rows = find_mismatches(load_rows(db))
        for r in rows:
            print(
                f"session={r['session_id']} user={r['user_id']} "
                f"stats={r['total_games']}g/{r['total_wins']}w/{r['current_points']}p "
                f"duels={r['duel_games']}g/{r['duel_wins']}w/{r['expected_points']}p"
            )
        print(f"ok: {len(rows)} mismatched stats rows")
    finally:
        db.close()


if __name__ == "__main__":
    main()
