"""init core schema: sessions, tiers, participants, stats, decks, duels

Revision ID: 0001_init_core
Revises: 
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init_core"
down_revision = None
branch_labels = None
depends_on = None

# (band, wins_required); each band has tiers 5..1 except Rookie (2..1).
# Tier 5 of every band is a floor: falling below it does not demote.
_BANDS = [
    ("Rookie", 2, 2),
    ("Bronze", 5, 3),
    ("Silver", 5, 4),
    ("Gold", 5, 5),
    ("Platinum", 5, 5),
    ("Diamond", 5, 5),
    ("Master", 5, 5),
]


def _tier_rows():
    rows = []
    order = 0
    for band, count, wins in _BANDS:
        for n in range(count, 0, -1):
            rows.append({
                "tier_name": f"{band} {n}",
                "wins_required": wins,
                "can_demote_from": band != "Rookie" and n != count,
                "sort_order": order,
            })
            order += 1
    return rows


def upgrade():
    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("game_mode", sa.Text, nullable=False),
        sa.Column("admin_user_id", sa.Text, nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("starting_rating", sa.Numeric(10, 2), nullable=False, server_default="1500"),
        sa.Column("point_value", sa.Numeric(10, 2), nullable=False, server_default="7"),
        sa.Column("status", sa.Text, nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("game_mode in ('ladder','rated','duelist_cup')", name="ck_session_game_mode"),
        sa.CheckConstraint("status in ('active','archived')", name="ck_session_status"),
        sa.CheckConstraint("ends_at > starts_at", name="ck_session_window"),
    )
    op.create_index("ix_sessions_status_created", "sessions", ["status", sa.text("created_at DESC")])

    # game_mode is fixed once the session exists
    op.execute("""
        CREATE FUNCTION sessions_game_mode_immutable() RETURNS trigger AS $$
        BEGIN
            IF NEW.game_mode <> OLD.game_mode THEN
                RAISE EXCEPTION 'sessions.game_mode is immutable';
            END IF;
            IF OLD.status = 'archived' AND NEW.status <> 'archived' THEN
                RAISE EXCEPTION 'archived sessions cannot be reactivated';
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)
    op.execute("""
        CREATE TRIGGER trg_sessions_immutable
        BEFORE UPDATE ON sessions
        FOR EACH ROW EXECUTE FUNCTION sessions_game_mode_immutable()
    """)

    tiers = op.create_table(
        "ladder_tiers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tier_name", sa.Text, nullable=False, unique=True),
        sa.Column("wins_required", sa.Integer, nullable=False),
        sa.Column("can_demote_from", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("sort_order", sa.Integer, nullable=False, unique=True),
        sa.CheckConstraint("wins_required > 0", name="ck_ladder_tier_wins_required"),
        sa.CheckConstraint("sort_order >= 0", name="ck_ladder_tier_sort_order"),
    )
    op.bulk_insert(tiers, _tier_rows())

    op.create_table(
        "session_participants",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("initial_tier_id", sa.Integer, sa.ForeignKey("ladder_tiers.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("initial_net_wins", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_session_participant"),
    )
    op.create_index("ix_session_participants_user", "session_participants", ["user_id"])

    op.create_table(
        "player_session_stats",
        sa.Column("session_id", sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.Text, primary_key=True),
        sa.Column("total_games", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_wins", sa.Integer, nullable=False, server_default="0"),
        sa.Column("current_points", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("current_tier_id", sa.Integer, sa.ForeignKey("ladder_tiers.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("current_net_wins", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("total_wins >= 0 AND total_wins <= total_games", name="ck_stats_wins_le_games"),
    )
    op.create_index("ix_stats_session_points", "player_session_stats", ["session_id", sa.text("current_points DESC")])

    op.create_table(
        "decks",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("created_by", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "duels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("player_deck_id", sa.Integer, sa.ForeignKey("decks.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("opponent_deck_id", sa.Integer, sa.ForeignKey("decks.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("coin_flip_won", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("went_first", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("result", sa.Text, nullable=False),
        sa.Column("points_change", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("result in ('win','loss')", name="ck_duel_result"),
    )
    op.create_index("ix_duels_session_user_created", "duels", ["session_id", "user_id", sa.text("created_at DESC")])
    op.create_index("ix_duels_player_deck", "duels", ["player_deck_id"])
    op.create_index("ix_duels_opponent_deck", "duels", ["opponent_deck_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("actor_user_id", sa.Text, nullable=True),
        sa.Column("entity_type", sa.Text, nullable=False),
        sa.Column("entity_id", sa.Text, nullable=False),
        sa.Column("action", sa.Text, nullable=False),
        sa.Column("data", sa.JSON, nullable=False, server_default=sa.text("'{}'::json")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])
    op.create_index("ix_audit_actor_created", "audit_log", ["actor_user_id", sa.text("created_at DESC")])


def downgrade():
    op.drop_table("audit_log")
    op.drop_table("duels")
    op.drop_table("decks")
    op.drop_table("player_session_stats")
    op.drop_table("session_participants")
    op.drop_table("ladder_tiers")
    op.execute("DROP TRIGGER IF EXISTS trg_sessions_immutable ON sessions")
    op.execute("DROP FUNCTION IF EXISTS sessions_game_mode_immutable()")
    op.drop_table("sessions")
