from datetime import datetime

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import JSON, String, Integer, DateTime, func


class Base(DeclarativeBase):
    pass


class LeagueRecord(Base):
    __tablename__ = "leagues"
    # A franchise gets a new league_id every season; (id, season) is the natural key
    league_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    season: Mapped[str] = mapped_column(String(8), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    payload: Mapped[dict] = mapped_column(JSON)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class RosterRecord(Base):
    __tablename__ = "rosters"
    # Sleeper roster ids are 1..N inside a league, so the league id is part of the key
    league_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    roster_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    payload: Mapped[dict] = mapped_column(JSON)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserRecord(Base):
    __tablename__ = "users"
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # lower-cased handle, used by login lookups
    username: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    payload: Mapped[dict] = mapped_column(JSON)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class LeagueMemberRecord(Base):
    __tablename__ = "league_members"
    league_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)


class DraftPickRecord(Base):
    __tablename__ = "draft_picks"
    draft_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    player_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    league_id: Mapped[str] = mapped_column(String(64), index=True)
    season: Mapped[str] = mapped_column(String(8), index=True)

    payload: Mapped[dict] = mapped_column(JSON)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
