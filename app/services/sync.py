from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings, settings as default_settings
from app.core.errors import (
    FetchTimeout,
    InvalidPayload,
    NetworkError,
    NoDataForPeriod,
    PartialLoadError,
    SleeperError,
    UserNotFound,
)
from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.player import PlayerCatalog, StatsMap, catalog_adapter
from app.schemas.roster import Roster
from app.schemas.session import SessionSnapshot, StatsPeriod
from app.schemas.user import User
from app.services.local_cache import (
    CATALOG_NAMESPACE,
    KEY_CATALOG,
    KEY_CURRENT_LEAGUE,
    KEY_SELECTED_SEASON,
    KEY_SELECTED_WEEK,
    KEY_USER,
    LocalCache,
)
from app.services.season import current_season, is_future_period
from app.services.sleeper.client import SleeperClient
from app.services.store import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fetch kinds; also the keys of SessionState.failed
FETCH_LEAGUES = "leagues"
FETCH_ROSTERS = "rosters"
FETCH_USERS = "users"
FETCH_PLAYERS = "players"
FETCH_STATS = "stats"
FETCH_DRAFT_PICKS = "draft_picks"

# failures that only mean something for the league they were fetched for
LEAGUE_SCOPED = frozenset({FETCH_ROSTERS, FETCH_USERS, FETCH_DRAFT_PICKS})
# not tied to any selection; valid until logout / next login
SESSION_WIDE = frozenset({FETCH_PLAYERS, FETCH_STATS})


class SessionStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    LEAGUE_LOADING = "league_loading"
    READY = "ready"
    DEGRADED = "degraded"


@dataclass
class FailedFetch:
    kind: str
    generation: int
    error: SleeperError
    args: Tuple[Any, ...] = ()


@dataclass
class SessionState:
    status: SessionStatus = SessionStatus.UNAUTHENTICATED
    user: Optional[User] = None
    leagues: List[League] = field(default_factory=list)
    current_league: Optional[League] = None
    rosters: List[Roster] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    players: PlayerCatalog = field(default_factory=dict)
    player_stats: StatsMap = field(default_factory=dict)
    stats_period: Optional[Tuple[str, int]] = None
    draft_picks: List[DraftPick] = field(default_factory=list)
    selected_season: str = ""
    selected_week: int = 1
    last_error: Optional[str] = None
    failed: Dict[str, FailedFetch] = field(default_factory=dict)
    # "no leagues this season" is a valid outcome, not an error
    empty_result: bool = False
    generation: int = 0
    # generation this state was created at (login / logout / restore)
    session_generation: int = 0


@dataclass
class LoginResult:
    user: User
    partial_error: Optional[PartialLoadError] = None

    @property
    def complete(self) -> bool:
        return self.partial_error is None


class SyncController:
    """
    Owns one dashboard session's SessionState and keeps it consistent across
    login and league / season / week switches.

    Read-through order is persistent store -> Sleeper -> write back, except for
    the player catalog which lives in the local cache under a freshness window.
    Every selection change bumps `state.generation`; fetch results tagged with
    an older generation are dropped instead of overwriting newer state.
    Player catalog and stats are not tied to a selection, so their results and
    failures only go stale on logout / login.
    `login` raises UserNotFound and the ad-hoc `get_league` lookup raises
    upstream errors; every other failure is recorded in `state.failed` /
    `state.last_error` and the session moves to DEGRADED.
    """

    def __init__(
        self,
        client: SleeperClient,
        store: CacheStore,
        local_cache: LocalCache,
        *,
        namespace: str = "session",
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[Settings] = None,
    ):
        self.client = client
        self.store = store
        self.local = local_cache
        self.namespace = namespace
        self._clock = clock or datetime.now
        self.config = config or default_settings
        self.state = self._fresh_state(generation=0)
        # how the last catalog read was served: cache | remote | stale | none
        self.catalog_source = "none"
        self._stats_cache: Dict[Tuple[str, int], Tuple[float, StatsMap]] = {}
        self._depth = 0

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def login(self, handle: str) -> LoginResult:
        handle = (handle or "").strip()
        if not handle:
            raise ValueError("handle is required")

        previous = self.state.status
        self.state.status = SessionStatus.AUTHENTICATING
        try:
            user = await self._resolve_user(handle)
        except SleeperError as e:
            self.state.status = previous
            logger.info("Login failed for %r: %s", handle, e)
            raise UserNotFound(handle) from e

        gen = self._next_generation()
        self.state = self._fresh_state(generation=gen)
        self._stats_cache.clear()
        self.state.user = user
        self.state.selected_season = self._default_season()
        self._remember(KEY_USER, user.model_dump(mode="json"))
        self._remember(KEY_SELECTED_SEASON, self.state.selected_season)
        self._remember(KEY_SELECTED_WEEK, self.state.selected_week)
        logger.info("Session authenticated as %s (%s)", user.handle, user.user_id)

        with self._busy():
            if await self._load_league_list(gen):
                if self.state.leagues:
                    await self.select_league(self.state.leagues[0])
                else:
                    self._apply_empty_season()
            await self._bootstrap_players()

        partial = PartialLoadError(self.state.failed) if self.state.failed else None
        if partial:
            logger.warning("Login for %s completed with missing data: %s", user.handle, partial.failed)
        return LoginResult(user=user, partial_error=partial)

    def logout(self) -> None:
        gen = self._next_generation()
        handle = self.state.user.handle if self.state.user else None
        self.state = self._fresh_state(generation=gen)
        self._stats_cache.clear()
        self.catalog_source = "none"
        for key in (KEY_USER, KEY_CURRENT_LEAGUE, KEY_SELECTED_SEASON, KEY_SELECTED_WEEK):
            self._forget(key)
        logger.info("Session logged out (%s)", handle)

    async def restore(self) -> bool:
        """Rebuild the session from the local cache; False when nobody is remembered."""
        entry = self.local.get(self.namespace, KEY_USER)
        if entry is None:
            return False
        try:
            user = User.model_validate(entry.value)
        except ValueError:
            logger.warning("Discarding unreadable stored identity in %s", self.namespace)
            self._forget(KEY_USER)
            return False

        gen = self._next_generation()
        self.state = self._fresh_state(generation=gen)
        self.state.user = user
        self.state.selected_season = self._recall_season()
        self.state.selected_week = self._recall_week()
        stored_league = self.local.get(self.namespace, KEY_CURRENT_LEAGUE)
        stored_id = stored_league.value.get("league_id") if stored_league and isinstance(stored_league.value, dict) else None
        logger.info("Restoring session for %s (season %s)", user.handle, self.state.selected_season)

        with self._busy():
            if await self._load_league_list(gen):
                leagues = self.state.leagues
                if leagues:
                    target = next((l for l in leagues if l.league_id == stored_id), leagues[0])
                    await self.select_league(target)
                else:
                    self._apply_empty_season()
            await self._bootstrap_players()
        return True

    # ------------------------------------------------------------------
    # Selection changes
    # ------------------------------------------------------------------

    async def select_league(self, league: Optional[League]) -> None:
        gen = self._next_generation()
        self.state.current_league = league
        self.state.draft_picks = []

        if league is None:
            self.state.rosters = []
            self.state.users = []
            self._forget(KEY_CURRENT_LEAGUE)
            self._settle()
            return

        self.state.empty_result = False
        self._remember(KEY_CURRENT_LEAGUE, league.model_dump(mode="json"))
        self._store_write(self.store.save_league, league)
        logger.info("Selected league %s (%s %s)", league.league_id, league.name, league.season)

        with self._busy():
            await asyncio.gather(
                self._load_rosters(league, gen),
                self._load_users(league, gen),
            )

    async def select_season(self, season: str) -> None:
        season = str(season).strip()
        if not season.isdigit():
            raise ValueError(f"season must be a year, got {season!r}")

        gen = self._next_generation()
        self.state.selected_season = season
        self._remember(KEY_SELECTED_SEASON, season)
        if self.state.user is None:
            return

        previous = self.state.current_league
        was_empty = self.state.empty_result
        with self._busy():
            if not await self._load_league_list(gen):
                return
            leagues = self.state.leagues
            if not leagues:
                self._apply_empty_season()
                return
            target = self._continue_franchise(previous, leagues)
            if previous is None or target.league_id != previous.league_id:
                await self.select_league(target)
            if was_empty:
                # the empty season dropped players and stats along with the league
                await self._bootstrap_players()

    def select_week(self, week: int) -> None:
        week = int(week)
        if not 1 <= week <= self.config.MAX_WEEK:
            raise ValueError(f"Invalid week number {week}. Please select a week between 1 and {self.config.MAX_WEEK}.")
        self.state.selected_week = week
        self._remember(KEY_SELECTED_WEEK, week)
        # stats are week-scoped; make the next read for this week go to Sleeper
        self._stats_cache.pop((self.state.selected_season, week), None)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    async def get_player_catalog(self) -> PlayerCatalog:
        gen = self.state.generation
        ttl = self.config.PLAYER_CATALOG_TTL_SECONDS

        fresh = self.local.get_fresh(CATALOG_NAMESPACE, KEY_CATALOG, ttl)
        if fresh is not None:
            catalog = self._decode_catalog(fresh.value)
            if catalog:
                logger.debug("Player catalog served from local cache (%d players)", len(catalog))
                self.catalog_source = "cache"
                self._apply_players(catalog, gen)
                return catalog
            logger.info("Cached player catalog is empty, fetching fresh data")

        try:
            catalog = await self._bounded(
                "player catalog", self.client.get_players(), self.config.BOOTSTRAP_TIMEOUT_SECONDS
            )
            if not catalog:
                raise InvalidPayload("Player catalog from Sleeper is empty")
        except SleeperError as e:
            stale = self.local.get(CATALOG_NAMESPACE, KEY_CATALOG)
            catalog = self._decode_catalog(stale.value) if stale is not None else {}
            if catalog:
                logger.warning(
                    "Player catalog fetch failed (%s); degraded mode, serving cached copy %.0fs old",
                    e, stale.age(self.local.now()),
                )
                self.catalog_source = "stale"
                self._apply_players(catalog, gen)
                return catalog
            self.catalog_source = "none"
            self._record_failure(FETCH_PLAYERS, gen, e)
            self._settle()
            return {}

        self.local.set(
            CATALOG_NAMESPACE,
            KEY_CATALOG,
            {pid: p.model_dump(mode="json", exclude_none=True) for pid, p in catalog.items()},
        )
        logger.info("Player catalog refreshed from Sleeper (%d players)", len(catalog))
        self.catalog_source = "remote"
        self._apply_players(catalog, gen)
        self._clear_failure(FETCH_PLAYERS, gen)
        self._settle()
        return catalog

    async def get_player_stats(self, season: str, week: int) -> StatsMap:
        season, week = str(season), int(week)
        gen = self.state.generation
        now = self._clock()

        if is_future_period(
            season,
            week,
            now,
            start_month=self.config.SEASON_START_MONTH,
            start_day=self.config.SEASON_START_DAY,
            max_week=self.config.MAX_WEEK,
        ):
            logger.debug("%s", NoDataForPeriod(season, week))
            self._apply_stats(season, week, {}, gen)
            return {}

        key = (season, week)
        cached = self._stats_cache.get(key)
        if cached and now.timestamp() - cached[0] < self.config.PLAYER_STATS_TTL_SECONDS:
            self._apply_stats(season, week, cached[1], gen)
            return cached[1]

        try:
            stats = await self._bounded(
                f"stats {season}/{week}",
                self.client.get_player_stats(season, week),
                self.config.FETCH_TIMEOUT_SECONDS,
            )
        except NetworkError as e:
            if not e.is_server_error:
                logger.info("No player stats for season %s week %s yet (HTTP %s)", season, week, e.status)
                self._apply_stats(season, week, {}, gen)
                self._clear_failure(FETCH_STATS, gen)
                self._settle()
                return {}
            return self._stats_failed(season, week, gen, e)
        except SleeperError as e:
            return self._stats_failed(season, week, gen, e)

        if stats:
            self._stats_cache[key] = (now.timestamp(), stats)
        else:
            logger.info("No player stats data available for season %s week %s", season, week)
        self._apply_stats(season, week, stats, gen)
        self._clear_failure(FETCH_STATS, gen)
        self._settle()
        return stats

    def _stats_failed(self, season: str, week: int, gen: int, error: SleeperError) -> StatsMap:
        self._record_failure(FETCH_STATS, gen, error, season, week)
        self._apply_stats(season, week, {}, gen)
        self._settle()
        return {}

    # ------------------------------------------------------------------
    # League detail and draft picks
    # ------------------------------------------------------------------

    async def get_league(self, league_id: str) -> Optional[League]:
        """
        One league by id, store first. None when Sleeper does not know it.
        Not part of the selection, so upstream errors are raised to the caller
        rather than recorded against the session.
        """
        try:
            return await self._bounded(
                f"league {league_id}", self._read_league(league_id), self.config.FETCH_TIMEOUT_SECONDS
            )
        except NetworkError as e:
            if e.status == 404:
                logger.info("League %s not found", league_id)
                return None
            raise

    async def load_draft_picks(self) -> List[DraftPick]:
        league = self.state.current_league
        if league is None:
            return []
        gen = self.state.generation

        def apply(picks: List[DraftPick]) -> None:
            self.state.draft_picks = picks

        ok = await self._load(FETCH_DRAFT_PICKS, gen, lambda: self._read_draft_picks(league), apply)
        self._settle()
        return self.state.draft_picks if ok else []

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    async def retry(self) -> List[str]:
        """Replay exactly the fetches that failed for the current selection."""
        gen = self.state.generation
        pending = [f for f in self.state.failed.values() if f.generation == gen]
        if not pending:
            return []

        jobs: List[Awaitable[Any]] = []
        league = self.state.current_league
        for failed in pending:
            if failed.kind == FETCH_LEAGUES:
                jobs.append(self._retry_league_list(gen))
            elif failed.kind == FETCH_ROSTERS and league is not None:
                jobs.append(self._load_rosters(league, gen))
            elif failed.kind == FETCH_USERS and league is not None:
                jobs.append(self._load_users(league, gen))
            elif failed.kind == FETCH_PLAYERS:
                jobs.append(self.get_player_catalog())
            elif failed.kind == FETCH_STATS:
                jobs.append(self.get_player_stats(*failed.args))
            elif failed.kind == FETCH_DRAFT_PICKS:
                jobs.append(self.load_draft_picks())
            else:
                # nothing left to replay it against (e.g. league was cleared)
                self.state.failed.pop(failed.kind, None)

        kinds = [f.kind for f in pending]
        logger.info("Retrying failed fetches: %s", ", ".join(kinds))
        with self._busy():
            await asyncio.gather(*jobs)
        return kinds

    async def _retry_league_list(self, gen: int) -> None:
        if not await self._load_league_list(gen):
            return
        leagues = self.state.leagues
        if not leagues:
            self._apply_empty_season()
            return
        current = self.state.current_league
        if current is None or all(l.league_id != current.league_id for l in leagues):
            await self.select_league(leagues[0])

    # ------------------------------------------------------------------
    # Read-through loaders
    # ------------------------------------------------------------------

    async def _resolve_user(self, handle: str) -> User:
        cached = self._store_read(self.store.get_user_by_handle, handle)
        if cached is not None:
            logger.debug("User %r served from cache store", handle)
            return cached
        user = await self._bounded(f"user {handle}", self.client.get_user(handle), self.config.FETCH_TIMEOUT_SECONDS)
        self._store_write(self.store.save_user, user)
        return user

    async def _read_league(self, league_id: str) -> Optional[League]:
        cached = self._store_read(self.store.get_league, league_id)
        if cached is not None:
            return cached
        league = await self.client.get_league(league_id)
        if league is not None:
            self._store_write(self.store.save_league, league)
        return league

    async def _read_rosters(self, league_id: str) -> List[Roster]:
        cached = self._store_read(self.store.get_rosters, league_id, default=[])
        if cached:
            logger.debug("Rosters for %s served from cache store (%d)", league_id, len(cached))
            return cached
        rosters = await self.client.get_rosters(league_id)
        self._store_write(self.store.save_rosters, rosters)
        return rosters

    async def _read_users(self, league_id: str) -> List[User]:
        cached = self._store_read(self.store.get_league_users, league_id, default=[])
        if cached:
            logger.debug("Users for %s served from cache store (%d)", league_id, len(cached))
            return cached
        users = await self.client.get_league_users(league_id)
        self._store_write(self.store.save_league_users, league_id, users)
        return users

    async def _read_draft_picks(self, league: League) -> List[DraftPick]:
        cached = self._store_read(self.store.get_draft_picks, league.league_id, league.season, default=[])
        if cached:
            return cached
        try:
            picks = await self.client.get_draft_picks(league.league_id)
        except NetworkError as e:
            if e.status == 404:
                logger.info("No draft picks for league %s", league.league_id)
                return []
            raise
        stamped = [p.model_copy(update={"league_id": league.league_id, "season": league.season}) for p in picks]
        self._store_write(self.store.save_draft_picks, league.league_id, league.season, stamped)
        return sorted(stamped, key=lambda p: p.pick_no)

    async def _load_league_list(self, gen: int) -> bool:
        user, season = self.state.user, self.state.selected_season
        if user is None:
            return False

        async def fetch() -> List[League]:
            leagues = await self.client.get_user_leagues(user.user_id, season)
            self._store_write(self.store.save_leagues, leagues)
            return leagues

        def apply(leagues: List[League]) -> None:
            self.state.leagues = leagues

        return await self._load(FETCH_LEAGUES, gen, fetch, apply)

    async def _load_rosters(self, league: League, gen: int) -> bool:
        def apply(rosters: List[Roster]) -> None:
            self.state.rosters = rosters

        return await self._load(FETCH_ROSTERS, gen, lambda: self._read_rosters(league.league_id), apply)

    async def _load_users(self, league: League, gen: int) -> bool:
        def apply(users: List[User]) -> None:
            self.state.users = users

        return await self._load(FETCH_USERS, gen, lambda: self._read_users(league.league_id), apply)

    async def _bootstrap_players(self) -> None:
        season, week = self.state.selected_season, self.state.selected_week
        await asyncio.gather(self.get_player_catalog(), self.get_player_stats(season, week))

    async def _load(
        self,
        kind: str,
        gen: int,
        fetch: Callable[[], Awaitable[T]],
        apply: Callable[[T], None],
        *args: Any,
    ) -> bool:
        """Run one bounded fetch and apply it, unless a newer selection superseded it."""
        try:
            result = await self._bounded(kind, fetch(), self.config.FETCH_TIMEOUT_SECONDS)
        except SleeperError as e:
            self._record_failure(kind, gen, e, *args)
            return False
        if not self._is_current(gen):
            logger.debug("Discarding %s from superseded selection %d (now %d)", kind, gen, self.state.generation)
            return False
        apply(result)
        self._clear_failure(kind, gen)
        return True

    async def _bounded(self, what: str, aw: Awaitable[T], seconds: float) -> T:
        # wait_for cancels the inner task, which aborts the in-flight HTTP request
        try:
            return await asyncio.wait_for(aw, timeout=seconds)
        except asyncio.TimeoutError:
            raise FetchTimeout(what, seconds)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _fresh_state(self, generation: int) -> SessionState:
        return SessionState(
            selected_season=self._default_season(),
            generation=generation,
            session_generation=generation,
        )

    def _default_season(self) -> str:
        return current_season(self._clock(), self.config.DEFAULT_SEASON)

    def _next_generation(self) -> int:
        self.state.generation += 1
        gen = self.state.generation
        # league-bound failures die with the selection; the rest stay retryable
        for kind, failed in list(self.state.failed.items()):
            if kind in LEAGUE_SCOPED:
                del self.state.failed[kind]
            else:
                failed.generation = gen
        return gen

    def _is_current(self, gen: int, kind: Optional[str] = None) -> bool:
        if kind in SESSION_WIDE:
            return gen >= self.state.session_generation
        return gen == self.state.generation

    @staticmethod
    def _continue_franchise(previous: Optional[League], leagues: List[League]) -> League:
        if previous is not None:
            for league in leagues:
                if league.name == previous.name:
                    return league
        return leagues[0]

    def _apply_empty_season(self) -> None:
        logger.info("No leagues for season %s", self.state.selected_season)
        self.state.leagues = []
        self.state.current_league = None
        self.state.rosters = []
        self.state.users = []
        self.state.players = {}
        self.state.player_stats = {}
        self.state.stats_period = None
        self.state.draft_picks = []
        self.state.empty_result = True
        self._forget(KEY_CURRENT_LEAGUE)

    def _apply_players(self, catalog: PlayerCatalog, gen: int) -> None:
        if self._is_current(gen, FETCH_PLAYERS):
            self.state.players = catalog

    def _apply_stats(self, season: str, week: int, stats: StatsMap, gen: int) -> None:
        if not self._is_current(gen, FETCH_STATS):
            return
        if (season, week) != (self.state.selected_season, self.state.selected_week):
            return
        self.state.player_stats = stats
        self.state.stats_period = (season, week)

    def _record_failure(self, kind: str, gen: int, error: SleeperError, *args: Any) -> None:
        if not self._is_current(gen, kind):
            logger.debug("Ignoring %s failure from superseded selection %d: %s", kind, gen, error)
            return
        self.state.failed[kind] = FailedFetch(kind=kind, generation=self.state.generation, error=error, args=args)
        self.state.last_error = str(error)
        logger.warning("Failed to fetch %s: %s", kind, error)

    def _clear_failure(self, kind: str, gen: int) -> None:
        if self._is_current(gen, kind):
            self.state.failed.pop(kind, None)

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self._depth += 1
        if self.state.user is not None:
            self.state.status = SessionStatus.LEAGUE_LOADING
        try:
            yield
        finally:
            self._depth -= 1
            self._settle()

    def _settle(self) -> None:
        if self._depth > 0 or self.state.user is None:
            return
        if self.state.failed:
            self.state.status = SessionStatus.DEGRADED
        else:
            self.state.status = SessionStatus.READY
            self.state.last_error = None

    def _decode_catalog(self, value: Any) -> PlayerCatalog:
        if not value:
            return {}
        try:
            return catalog_adapter.validate_python(value)
        except ValueError as e:
            logger.warning("Cached player catalog is unreadable: %s", e)
            return {}

    def _recall_season(self) -> str:
        entry = self.local.get(self.namespace, KEY_SELECTED_SEASON)
        value = str(entry.value) if entry is not None else ""
        return value if value.isdigit() else self._default_season()

    def _recall_week(self) -> int:
        entry = self.local.get(self.namespace, KEY_SELECTED_WEEK)
        try:
            week = int(entry.value) if entry is not None else 1
        except (TypeError, ValueError):
            return 1
        return week if 1 <= week <= self.config.MAX_WEEK else 1

    # ---- cache plumbing: a broken cache degrades to a miss, never an error ----

    def _remember(self, key: str, value: Any) -> None:
        try:
            self.local.set(self.namespace, key, value)
        except OSError as e:
            logger.warning("Could not persist %s locally: %s", key, e)

    def _forget(self, key: str) -> None:
        try:
            self.local.remove(self.namespace, key)
        except OSError as e:
            logger.warning("Could not remove %s locally: %s", key, e)

    def _store_read(self, fn: Callable[..., T], *args: Any, default: Any = None) -> T:
        try:
            return fn(*args)
        except (SQLAlchemyError, ValueError) as e:
            logger.warning("Cache store read %s%r failed, treating as miss: %s", fn.__name__, args, e)
            return default

    def _store_write(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except SQLAlchemyError as e:
            logger.warning("Cache store write %s failed: %s", fn.__name__, e)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        s = self.state
        period = StatsPeriod(season=s.stats_period[0], week=s.stats_period[1]) if s.stats_period else None
        return SessionSnapshot(
            status=s.status.value,
            user=s.user,
            leagues=list(s.leagues),
            current_league=s.current_league,
            rosters=list(s.rosters),
            users=list(s.users),
            selected_season=s.selected_season,
            selected_week=s.selected_week,
            player_count=len(s.players),
            stats_period=period,
            draft_picks=list(s.draft_picks),
            last_error=s.last_error,
            failed=sorted(s.failed),
            empty_result=s.empty_result,
            generation=s.generation,
        )
