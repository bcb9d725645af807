"""
TVmaze catalog lookup and season dataset builder.

Produces [{"Name": ..., "Seasons": [episodes in season 1, season 2, ...]}]
for every configured show query.
"""

import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config.config import CATALOG_BASE_URL, REQUEST_DELAY
from src.errors import CatalogHttpError, ShowLookupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowQuery:
    query: str
    canonical_name: str
    prefer_premiered_year: Optional[int] = None
    prefer_network_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ShowQuery":
        query = data.get('query') or data.get('canonical_name')
        if not query:
            raise ValueError(f"Show query needs a 'query' or 'canonical_name': {data}")
        return cls(
            query=query,
            canonical_name=data.get('canonical_name') or query,
            prefer_premiered_year=data.get('prefer_premiered_year'),
            prefer_network_name=data.get('prefer_network_name'),
        )


def normalize(value) -> str:
    return str(value or "").strip().lower()


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def pick_best_show(results: List[Dict], spec: ShowQuery) -> Optional[Dict]:
    """Choose one show out of a /search/shows result list.

    Filters narrow the candidates only when they leave something behind:
    exact name, then premiere year, then network. The best search score
    among what remains wins.
    """
    if not results:
        return None

    candidates = [r.get('show') for r in results if r.get('show')]

    want_name = normalize(spec.canonical_name)
    exact = [s for s in candidates if normalize(s.get('name')) == want_name]
    if exact:
        candidates = exact

    if spec.prefer_premiered_year:
        year = str(spec.prefer_premiered_year)
        by_year = [s for s in candidates if (s.get('premiered') or "").startswith(year)]
        if by_year:
            candidates = by_year

    if spec.prefer_network_name:
        want_network = normalize(spec.prefer_network_name)
        by_network = [s for s in candidates
                      if normalize((s.get('network') or {}).get('name')) == want_network]
        if by_network:
            candidates = by_network

    if not candidates:
        return None

    remaining_ids = {s.get('id') for s in candidates}
    ranked = sorted(
        (r for r in results if (r.get('show') or {}).get('id') in remaining_ids),
        key=lambda r: r.get('score') or 0,
        reverse=True,
    )
    return ranked[0]['show'] if ranked else candidates[0]


class TvMazeClient:
    """Thin JSON client for the handful of TVmaze endpoints we need"""

    def __init__(self, base_url=CATALOG_BASE_URL, session=None, delay=REQUEST_DELAY, sleep=time.sleep):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.delay = delay
        self.sleep = sleep

    def _get(self, path: str, params: Dict = None, timeout: int = 30):
        url = f"{self.base_url}{path}"
        resp = self.session.get(url, params=params, timeout=timeout)
        if not resp.ok:
            raise CatalogHttpError(resp.status_code, resp.url or url, resp.text or "")
        return resp.json()

    def search(self, query: str) -> List[Dict]:
        return self._get("/search/shows", params={"q": query}) or []

    def list_seasons(self, show_id) -> List[Dict]:
        return self._get(f"/shows/{show_id}/seasons") or []

    def list_episodes(self, season_id) -> List[Dict]:
        return self._get(f"/seasons/{season_id}/episodes") or []

    def pause(self):
        if self.delay:
            self.sleep(self.delay)

    # ==================== LOOKUPS ====================

    def find_show(self, spec: ShowQuery) -> Dict:
        results = self.search(spec.query)
        show = pick_best_show(results, spec)
        if not show:
            raise ShowLookupError(f"No show match for query: {spec.query}")
        logger.info(f"Matched '{spec.query}' → {show.get('name')} (id {show.get('id')})")
        return show

    def season_episode_counts(self, show_id) -> List[int]:
        seasons = [s for s in self.list_seasons(show_id)
                   if _is_int(s.get('number')) and s['number'] >= 1]
        seasons.sort(key=lambda s: s['number'])

        counts = []
        for season in seasons:
            order = season.get('episodeOrder')
            if _is_int(order):
                counts.append(order)
                continue
            # episodeOrder is unknown for some seasons; count the listing instead
            episodes = self.list_episodes(season.get('id'))
            counts.append(len(episodes) if isinstance(episodes, list) else 0)
            self.pause()
        return counts


def build_dataset(specs: List[ShowQuery], client: TvMazeClient = None) -> List[Dict]:
    """Look up every query in order; the first failure aborts the whole build"""
    client = client or TvMazeClient()
    dataset = []
    for spec in specs:
        client.pause()
        show = client.find_show(spec)
        counts = client.season_episode_counts(show['id'])
        logger.info(f"{show.get('name')}: {len(counts)} seasons, {sum(counts)} episodes")
        dataset.append({"Name": show.get('name'), "Seasons": counts})
    return dataset
