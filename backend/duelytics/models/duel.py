import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from duelytics.db.base import Base

class Duel(Base):
    __tablename__ = "duels"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(sa.Text, nullable=False)

    # decks in use cannot be deleted
    player_deck_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("decks.id", ondelete="RESTRICT"), nullable=False)
    opponent_deck_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("decks.id", ondelete="RESTRICT"), nullable=False)

    coin_flip_won: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, server_default=sa.text("false"))
    went_first: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, server_default=sa.text("false"))
    result: Mapped[str] = mapped_column(sa.Text, nullable=False)
    points_change: Mapped[float] = mapped_column(sa.Numeric(10, 2), nullable=False)  # effective delta

    created_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))

    __table_args__ = (
        sa.CheckConstraint("result in ('win','loss')", name="ck_duel_result"),
        sa.Index("ix_duels_session_user_created", "session_id", "user_id", sa.text("created_at DESC")),
        sa.Index("ix_duels_player_deck", "player_deck_id"),
        sa.Index("ix_duels_opponent_deck", "opponent_deck_id"),
    )
