import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import sqlalchemy as sa

from duelytics.api.deps import require_admin
from duelytics.core.errors import NotFoundError, StateError
from duelytics.core.security import Identity
from duelytics.db.session import get_db
from duelytics.schemas.common import OkOut
from duelytics.schemas.deck import DeckIn, DeckListOut, DeckOut, DeckSavedOut, DeckStats, DeckStatsOut
from duelytics.services.audit import audit

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_deck(db: Session, deck_id: int):
    row = db.execute(sa.text("SELECT id, name, created_at FROM decks WHERE id=:d"), {"d": deck_id}).mappings().first()
    if not row:
        raise NotFoundError("Deck not found")
    return row


def _assert_name_free(db: Session, name: str, exclude_id: int | None = None):
    taken = db.execute(sa.text("""
        SELECT 1 FROM decks WHERE lower(name)=lower(:n) AND (CAST(:x AS integer) IS NULL OR id <> :x)
    """), {"n": name, "x": exclude_id}).first()
    if taken:
        raise StateError("Deck name already exists")


@router.get("", response_model=DeckListOut)
def list_decks(db: Session = Depends(get_db)):
    rows = db.execute(sa.text("SELECT id, name, created_at FROM decks ORDER BY name ASC")).mappings().all()
    return DeckListOut(decks=[DeckOut(**r) for r in rows])


@router.post("", response_model=DeckSavedOut, status_code=201)
def create_deck(payload: DeckIn, identity: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    name = payload.name.strip()
    _assert_name_free(db, name)
    try:
        row = db.execute(sa.text("""
            INSERT INTO decks (name, created_by)
            VALUES (:n, :u)
            RETURNING id, name, created_at
        """), {"n": name, "u": identity.user_id}).mappings().first()
        audit(db, identity.user_id, "deck", row["id"], "created", {"name": name})
        db.commit()
    except IntegrityError:
        db.rollback()
        raise StateError("Deck name already exists")

    logger.info("deck created: %s by %s", name, identity.username)
    return DeckSavedOut(message=f'Deck "{name}" created successfully', deck=DeckOut(**row))


@router.patch("/{deck_id}", response_model=DeckSavedOut)
def rename_deck(deck_id: int, payload: DeckIn, identity: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    _get_deck(db, deck_id)
    name = payload.name.strip()
    _assert_name_free(db, name, exclude_id=deck_id)
    try:
        row = db.execute(sa.text("""
            UPDATE decks SET name=:n WHERE id=:d
            RETURNING id, name, created_at
        """), {"n": name, "d": deck_id}).mappings().first()
        audit(db, identity.user_id, "deck", deck_id, "renamed", {"name": name})
        db.commit()
    except IntegrityError:
        db.rollback()
        raise StateError("Deck name already exists")
    return DeckSavedOut(message=f'Deck "{name}" updated successfully', deck=DeckOut(**row))


@router.delete("/{deck_id}", response_model=OkOut)
def delete_deck(deck_id: int, identity: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    deck = _get_deck(db, deck_id)

    in_use = db.execute(sa.text("""
        SELECT count(*) FROM duels WHERE player_deck_id=:d OR opponent_deck_id=:d
    """), {"d": deck_id}).scalar_one()
    if in_use:
        raise StateError("Cannot delete deck: it has been used in duels")

    db.execute(sa.text("DELETE FROM decks WHERE id=:d"), {"d": deck_id})
    audit(db, identity.user_id, "deck", deck_id, "deleted", {"name": deck["name"]})
    db.commit()

    logger.info("deck deleted: %s by %s", deck["name"], identity.username)
    return OkOut(message=f'Deck "{deck["name"]}" deleted successfully')


@router.get("/{deck_id}/stats", response_model=DeckStatsOut)
def deck_stats(deck_id: int, db: Session = Depends(get_db)):
    _get_deck(db, deck_id)
    row = db.execute(sa.text("""
        SELECT
            count(*) FILTER (WHERE result='win') AS wins,
            count(*) FILTER (WHERE result='loss') AS losses,
            count(*) AS total_games
        FROM duels
        WHERE player_deck_id=:d
    """), {"d": deck_id}).mappings().first()

    total = int(row["total_games"])
    wins = int(row["wins"])
    win_rate = round(wins * 100.0 / total, 2) if total else 0.0
    return DeckStatsOut(stats=DeckStats(wins=wins, losses=int(row["losses"]), total_games=total, win_rate=win_rate))
