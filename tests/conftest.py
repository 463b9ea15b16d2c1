"""Shared fixtures: a scripted Sleeper fake, a controllable clock and an in-memory store."""

import asyncio
from collections import Counter
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.errors import UserNotFound
from app.db.session import init_db
from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.player import Player, PlayerStats
from app.schemas.roster import Roster
from app.schemas.user import User
from app.services.local_cache import LocalCache
from app.services.store import CacheStore
from app.services.sync import SyncController


# ------------------------------------------------------------------
# Builders
# ------------------------------------------------------------------

def make_user(user_id="1", username="alice", display_name=None, **extra):
    return User(user_id=user_id, username=username, display_name=display_name or username, **extra)


def make_league(league_id="L1", name="Dynasty", season="2025", **extra):
    return League(league_id=league_id, name=name, season=season, **extra)


def make_roster(roster_id=1, league_id="L1", owner_id="1", players=None, starters=None, **extra):
    players = players if players is not None else [f"p{roster_id}a", f"p{roster_id}b"]
    starters = starters if starters is not None else players[:1]
    return Roster(
        roster_id=roster_id,
        league_id=league_id,
        owner_id=owner_id,
        players=players,
        starters=starters,
        **extra,
    )


def make_catalog(*ids):
    ids = ids or ("p1a", "p1b", "p2a", "p2b")
    return {pid: Player(player_id=pid, full_name=f"Player {pid}", position="RB", team="KC") for pid in ids}


def make_stats(**points):
    return {pid: PlayerStats(pts_ppr=pts) for pid, pts in points.items()}


# ------------------------------------------------------------------
# Fakes
# ------------------------------------------------------------------

class FakeClock:
    """datetime for the controller, epoch seconds for the local cache; same instant."""

    def __init__(self, start=datetime(2025, 9, 16, 12, 0, 0)):
        self.current = start

    def now(self):
        return self.current

    def time(self):
        return self.current.timestamp()

    def advance(self, **delta):
        self.current += timedelta(**delta)


class FakeSleeper:
    """
    Stands in for SleeperClient. `fail` and `delay` are keyed by method name,
    or by (method name, argument) to target a single league.
    """

    def __init__(self):
        self.users = {}          # handle -> User
        self.user_leagues = {}   # (user_id, season) -> [League]
        self.leagues = {}        # league_id -> League
        self.rosters = {}        # league_id -> [Roster]
        self.league_users = {}   # league_id -> [User]
        self.draft_picks = {}    # league_id -> [DraftPick]
        self.players = {}
        self.stats = {}          # (season, week) -> StatsMap
        self.calls = Counter()
        self.cancelled = Counter()
        self.fail = {}
        self.delay = {}

    async def _call(self, name, key=None):
        self.calls[name] += 1
        delay = self.delay.get((name, key), self.delay.get(name))
        if delay:
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                self.cancelled[name] += 1
                raise
        exc = self.fail.get((name, key), self.fail.get(name))
        if exc is not None:
            raise exc

    async def get_user(self, handle):
        await self._call("get_user", handle)
        if handle not in self.users:
            raise UserNotFound(handle)
        return self.users[handle]

    async def get_user_leagues(self, user_id, season):
        await self._call("get_user_leagues", season)
        return list(self.user_leagues.get((user_id, str(season)), []))

    async def get_league(self, league_id):
        await self._call("get_league", league_id)
        return self.leagues.get(league_id)

    async def get_rosters(self, league_id):
        await self._call("get_rosters", league_id)
        return list(self.rosters.get(league_id, []))

    async def get_league_users(self, league_id):
        await self._call("get_league_users", league_id)
        return list(self.league_users.get(league_id, []))

    async def get_draft_picks(self, league_id):
        await self._call("get_draft_picks", league_id)
        return list(self.draft_picks.get(league_id, []))

    async def get_players(self):
        await self._call("get_players")
        return dict(self.players)

    async def get_player_stats(self, season, week):
        await self._call("get_player_stats", (str(season), int(week)))
        return dict(self.stats.get((str(season), int(week)), {}))

    async def aclose(self):
        pass


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return Settings(
        FETCH_TIMEOUT_SECONDS=0.2,
        BOOTSTRAP_TIMEOUT_SECONDS=0.3,
        DEFAULT_SEASON=None,
        LOCAL_CACHE_DIR=None,
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_db(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return CacheStore(session_factory)


@pytest.fixture
def local_cache(clock):
    return LocalCache(None, clock=clock.time)


@pytest.fixture
def sleeper():
    """Alice with one 2025 league (L1), two rosters, two members, a small catalog and week-1 stats."""
    fake = FakeSleeper()
    alice = make_user("1", "alice")
    bob = make_user("2", "bob")
    league = make_league("L1", "Dynasty", "2025")
    fake.users["alice"] = alice
    fake.user_leagues[("1", "2025")] = [league]
    fake.leagues["L1"] = league
    fake.rosters["L1"] = [make_roster(1, "L1", "1"), make_roster(2, "L1", "2")]
    fake.league_users["L1"] = [alice, bob]
    fake.players = make_catalog()
    fake.stats[("2025", 1)] = make_stats(p1a=12.5, p2a=7.0)
    fake.draft_picks["L1"] = [
        DraftPick(draft_id="D1", player_id="p1a", round=1, pick_no=1, roster_id=1),
        DraftPick(draft_id="D1", player_id="p2a", round=1, pick_no=2, roster_id=2),
    ]
    return fake


@pytest.fixture
def make_controller(sleeper, store, local_cache, clock, config):
    def factory(namespace="session-test"):
        return SyncController(sleeper, store, local_cache, namespace=namespace, clock=clock.now, config=config)

    return factory


@pytest.fixture
def controller(make_controller):
    return make_controller()


def run(coro):
    return asyncio.run(coro)
