from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.errors import FetchTimeout, InvalidPayload, NetworkError, UserNotFound
from app.schemas.draft import DraftPick
from app.schemas.league import League
from app.schemas.player import PlayerCatalog, StatsMap, catalog_adapter, stats_adapter
from app.schemas.roster import Roster
from app.schemas.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")

_users = TypeAdapter(List[User])
_leagues = TypeAdapter(List[League])
_rosters = TypeAdapter(List[Roster])
_picks = TypeAdapter(List[DraftPick])
_user = TypeAdapter(User)
_league = TypeAdapter(League)


def _validate(adapter: TypeAdapter[T], data: Any, what: str) -> T:
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        # keep the message short; catalog errors can list thousands of entries
        raise InvalidPayload(f"Malformed {what} payload: {e.error_count()} validation error(s); first: {e.errors()[0]['msg']}")


class SleeperClient:
    """
    One GET per Sleeper endpoint. No retries and no caching here; the sync layer
    owns both. Every failure comes out as NetworkError / FetchTimeout / InvalidPayload.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        sport: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or settings.SLEEPER_API_BASE).rstrip("/")
        self.sport = sport or settings.SLEEPER_SPORT
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _get(self, path: str) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = await self._http.get(url)
        except httpx.TimeoutException:
            raise FetchTimeout(path)
        except httpx.HTTPError as e:
            raise NetworkError(f"Sleeper request failed on {url}: {e}", url=url)

        if not resp.is_success:
            # include upstream body so logs show *why* Sleeper refused
            body = resp.text[:500] if resp.text else "<no-body>"
            raise NetworkError(
                f"Sleeper error {resp.status_code} on {url} :: {body}",
                status=resp.status_code,
                url=url,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise InvalidPayload(f"Sleeper returned non-JSON body on {url}")

    # ---------------- users ----------------

    async def get_user(self, handle: str) -> User:
        data = await self._get(f"/user/{handle}")
        # unknown handles come back as 200 + null
        if not data:
            raise UserNotFound(handle)
        return _validate(_user, data, "user")

    async def get_user_leagues(self, user_id: str, season: str) -> List[League]:
        data = await self._get(f"/user/{user_id}/leagues/{self.sport}/{season}")
        return _validate(_leagues, data or [], "league list")

    # ---------------- leagues ----------------

    async def get_league(self, league_id: str) -> Optional[League]:
        data = await self._get(f"/league/{league_id}")
        if not data:
            # Sleeper answers 200 null for unknown ids
            return None
        return _validate(_league, data, "league")

    async def get_rosters(self, league_id: str) -> List[Roster]:
        data = await self._get(f"/league/{league_id}/rosters")
        return _validate(_rosters, data or [], "roster list")

    async def get_league_users(self, league_id: str) -> List[User]:
        data = await self._get(f"/league/{league_id}/users")
        return _validate(_users, data or [], "league users")

    async def get_draft_picks(self, league_id: str) -> List[DraftPick]:
        data = await self._get(f"/league/{league_id}/draft_picks")
        return _validate(_picks, data or [], "draft picks")

    # ---------------- players ----------------

    async def get_players(self) -> PlayerCatalog:
        data = await self._get(f"/players/{self.sport}")
        if not isinstance(data, dict):
            raise InvalidPayload("Player catalog is not an object")
        # Sleeper omits player_id on some team-defense entries; the key is authoritative
        rows: Dict[str, Any] = {}
        for pid, row in data.items():
            if isinstance(row, dict):
                rows[str(pid)] = {**row, "player_id": str(row.get("player_id") or pid)}
        return _validate(catalog_adapter, rows, "player catalog")

    async def get_player_stats(self, season: str, week: int) -> StatsMap:
        data = await self._get(f"/stats/{self.sport}/regular/{season}/{int(week)}")
        if not data:
            return {}
        if not isinstance(data, dict):
            raise InvalidPayload("Player stats payload is not an object")
        rows = {str(pid): row for pid, row in data.items() if isinstance(row, dict)}
        return _validate(stats_adapter, rows, "player stats")
