import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from duelytics.db.base import Base

class SessionParticipant(Base):
    __tablename__ = "session_participants"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(sa.Text, nullable=False)
    joined_at: Mapped[sa.DateTime] = mapped_column(sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))

    # ladder only
    initial_tier_id: Mapped[int | None] = mapped_column(sa.Integer, sa.ForeignKey("ladder_tiers.id", ondelete="RESTRICT"), nullable=True)
    initial_net_wins: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="0")

    __table_args__ = (
        sa.UniqueConstraint("session_id", "user_id", name="uq_session_participant"),
        sa.Index("ix_session_participants_user", "user_id"),
    )
