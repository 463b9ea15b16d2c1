from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.db.models import DraftPickRecord, LeagueMemberRecord, LeagueRecord, RosterRecord, UserRecord
from app.db.session import session_scope
from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.roster import Roster
from app.schemas.user import User

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _handle_key(handle: Optional[str]) -> Optional[str]:
    return handle.strip().lower() if handle else None


class CacheStore:
    """
    Persistent cache of Sleeper documents keyed by natural id.
    Every save is an upsert: saving the same document twice leaves one row.
    `last_updated` is informational; presence of a row is what counts as a hit.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    # ---------------- leagues ----------------

    def get_league(self, league_id: str, season: Optional[str] = None) -> Optional[League]:
        with session_scope(self._session_factory) as db:
            if season is not None:
                rec = db.get(LeagueRecord, (league_id, str(season)))
            else:
                rec = db.scalars(
                    select(LeagueRecord)
                    .where(LeagueRecord.league_id == league_id)
                    .order_by(LeagueRecord.season.desc())
                ).first()
            return League.model_validate(rec.payload) if rec else None

    def save_league(self, league: League) -> None:
        self.save_leagues([league])

    def save_leagues(self, leagues: Iterable[League]) -> None:
        with session_scope(self._session_factory) as db:
            for league in leagues:
                payload = league.model_dump(mode="json")
                existing = db.get(LeagueRecord, (league.league_id, league.season))
                if existing:
                    existing.name = league.name
                    existing.payload = payload
                    existing.last_updated = _now()
                else:
                    db.add(LeagueRecord(
                        league_id=league.league_id,
                        season=league.season,
                        name=league.name,
                        payload=payload,
                        last_updated=_now(),
                    ))
                db.flush()

    # ---------------- rosters ----------------

    def get_rosters(self, league_id: str) -> List[Roster]:
        with session_scope(self._session_factory) as db:
            recs = db.scalars(
                select(RosterRecord)
                .where(RosterRecord.league_id == league_id)
                .order_by(RosterRecord.roster_id)
            ).all()
            return [Roster.model_validate(r.payload) for r in recs]

    def save_rosters(self, rosters: Iterable[Roster]) -> None:
        with session_scope(self._session_factory) as db:
            for roster in rosters:
                payload = roster.model_dump(mode="json")
                existing = db.get(RosterRecord, (roster.league_id, roster.roster_id))
                if existing:
                    existing.owner_id = roster.owner_id
                    existing.payload = payload
                    existing.last_updated = _now()
                else:
                    db.add(RosterRecord(
                        league_id=roster.league_id,
                        roster_id=roster.roster_id,
                        owner_id=roster.owner_id,
                        payload=payload,
                        last_updated=_now(),
                    ))
                db.flush()

    # ---------------- users ----------------

    def get_user(self, user_id: str) -> Optional[User]:
        with session_scope(self._session_factory) as db:
            rec = db.get(UserRecord, user_id)
            return User.model_validate(rec.payload) if rec else None

    def get_user_by_handle(self, handle: str) -> Optional[User]:
        key = _handle_key(handle)
        if not key:
            return None
        with session_scope(self._session_factory) as db:
            rec = db.scalars(select(UserRecord).where(UserRecord.username == key)).first()
            return User.model_validate(rec.payload) if rec else None

    def save_user(self, user: User) -> None:
        with session_scope(self._session_factory) as db:
            self._upsert_user(db, user)

    def _upsert_user(self, db: Session, user: User) -> None:
        existing = db.get(UserRecord, user.user_id)
        if existing:
            # league member payloads drop the handle; don't forget one we already know
            merged = user
            if not user.username and existing.payload.get("username"):
                merged = user.model_copy(update={"username": existing.payload["username"]})
            existing.username = _handle_key(merged.username)
            existing.payload = merged.model_dump(mode="json")
            existing.last_updated = _now()
        else:
            db.add(UserRecord(
                user_id=user.user_id,
                username=_handle_key(user.username),
                payload=user.model_dump(mode="json"),
                last_updated=_now(),
            ))
        # flush so a duplicate user later in the same batch finds this row
        db.flush()

    def get_league_users(self, league_id: str) -> List[User]:
        with session_scope(self._session_factory) as db:
            recs = db.scalars(
                select(UserRecord)
                .join(LeagueMemberRecord, LeagueMemberRecord.user_id == UserRecord.user_id)
                .where(LeagueMemberRecord.league_id == league_id)
                .order_by(UserRecord.user_id)
            ).all()
            return [User.model_validate(r.payload) for r in recs]

    def save_league_users(self, league_id: str, users: Iterable[User]) -> None:
        users = list(users)
        with session_scope(self._session_factory) as db:
            for user in users:
                self._upsert_user(db, user)
            # membership is replaced wholesale; the latest fetch wins
            db.execute(delete(LeagueMemberRecord).where(LeagueMemberRecord.league_id == league_id))
            for user_id in sorted({u.user_id for u in users}):
                db.add(LeagueMemberRecord(league_id=league_id, user_id=user_id))

    # ---------------- draft picks ----------------

    def get_draft_picks(self, league_id: str, season: str) -> List[DraftPick]:
        with session_scope(self._session_factory) as db:
            recs = db.scalars(
                select(DraftPickRecord)
                .where(DraftPickRecord.league_id == league_id, DraftPickRecord.season == str(season))
            ).all()
            picks = [DraftPick.model_validate(r.payload) for r in recs]
            return sorted(picks, key=lambda p: p.pick_no)

    def save_draft_picks(self, league_id: str, season: str, picks: Iterable[DraftPick]) -> None:
        with session_scope(self._session_factory) as db:
            for pick in picks:
                stamped = pick.model_copy(update={"league_id": league_id, "season": str(season)})
                payload = stamped.model_dump(mode="json")
                existing = db.get(DraftPickRecord, (stamped.draft_id, stamped.player_id))
                if existing:
                    existing.league_id = league_id
                    existing.season = str(season)
                    existing.payload = payload
                    existing.last_updated = _now()
                else:
                    db.add(DraftPickRecord(
                        draft_id=stamped.draft_id,
                        player_id=stamped.player_id,
                        league_id=league_id,
                        season=str(season),
                        payload=payload,
                        last_updated=_now(),
                    ))
                db.flush()

    # ---------------- observability ----------------

    def count(self, model) -> int:
        with session_scope(self._session_factory) as db:
            return db.scalar(select(func.count()).select_from(model)) or 0
