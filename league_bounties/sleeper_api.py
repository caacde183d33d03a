import logging
from typing import Any, Dict, List, Optional

import requests

BASE = 'https://api.sleeper.app/v1'

logger = logging.getLogger(__name__)


class SleeperAPIError(Exception):
    pass


class SleeperClient:
    def __init__(self, base_url: str = BASE, timeout: int = 10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug('GET %s', url)
        resp = requests.get(url, params=params, timeout=self.timeout)
        if not resp.ok:
            raise SleeperAPIError(f"GET {url} failed: {resp.status_code} {resp.text}")
        return resp.json()

    def get_players(self) -> Dict[str, Any]:
        """Return mapping of player_id -> player object (a multi-MB payload)."""
        return self._get('/players/nfl')

    def get_league_users(self, league_id: str) -> List[Dict[str, Any]]:
        """Return the list of users in a league, including display_name and user_id."""
        return self._get(f'/league/{league_id}/users')

    def get_rosters(self, league_id: str) -> List[Dict[str, Any]]:
        return self._get(f'/league/{league_id}/rosters')

    def get_matchups(self, league_id: str, week: int) -> List[Dict[str, Any]]:
        # Sleeper expects the week in the path: /league/{league_id}/matchups/{week}
        return self._get(f'/league/{league_id}/matchups/{week}')

    def get_transactions(self, league_id: str, week: int) -> List[Dict[str, Any]]:
        # Sleeper calls this path segment "round"; for regular leagues it is the week
        return self._get(f'/league/{league_id}/transactions/{week}')

    def get_drafts(self, league_id: str) -> List[Dict[str, Any]]:
        return self._get(f'/league/{league_id}/drafts')

    def get_draft_picks(self, draft_id: str) -> List[Dict[str, Any]]:
        return self._get(f'/draft/{draft_id}/picks')
