"""
Playlist index and cursor.

The index is an ordered, read-only list of shows loaded once at start-up.
The cursor computes the next (show, season, episode) to play when the
player stalls.
"""

import json
import logging
import os
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from src.errors import PlaylistError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowEntry:
    id: object
    name: str
    seasons: Tuple[int, ...]

    def __post_init__(self):
        if not self.seasons:
            raise PlaylistError(f"Show '{self.name}' has no seasons")
        for count in self.seasons:
            if isinstance(count, bool) or not isinstance(count, int) or count < 1:
                raise PlaylistError(f"Show '{self.name}' has an invalid episode count: {count!r}")


@dataclass(frozen=True)
class PlaybackTarget:
    show_ref: Optional[object]
    season: int = 1
    episode: int = 1

    def __post_init__(self):
        for field, value in (('season', self.season), ('episode', self.episode)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise PlaylistError(f"Invalid {field} {value!r} for show {self.show_ref!r}")

    def label(self):
        return f"S{self.season}E{self.episode}"


class PlaylistIndex:
    """Ordered catalog of shows; lookups match ids by their string form"""

    def __init__(self, shows):
        self.shows = tuple(shows)
        if not self.shows:
            raise PlaylistError("Playlist is empty")
        self._positions = {}
        for pos, show in enumerate(self.shows):
            self._positions.setdefault(str(show.id), pos)

    def __len__(self):
        return len(self.shows)

    def __iter__(self):
        return iter(self.shows)

    def position_of(self, show_ref):
        if show_ref is None:
            return None
        return self._positions.get(str(show_ref))

    def find(self, show_ref):
        pos = self.position_of(show_ref)
        return None if pos is None else self.shows[pos]

    def first_target(self):
        return PlaybackTarget(self.shows[0].id, 1, 1)

    @classmethod
    def from_records(cls, records):
        """Build an index from dicts shaped like {"id", "name", "seasons"}.

        The dataset builder's capitalised keys ("Name", "Seasons") are accepted
        too, but every entry still needs an "id" the player understands.
        """
        shows = []
        for record in records or []:
            show_id = record.get('id', record.get('Id'))
            name = record.get('name', record.get('Name', ''))
            seasons = record.get('seasons', record.get('Seasons')) or []
            if show_id is None:
                raise PlaylistError(f"Show '{name}' has no id")
            shows.append(ShowEntry(show_id, name, tuple(seasons)))
        return cls(shows)

    @classmethod
    def load(cls, path):
        if not os.path.exists(path):
            raise PlaylistError(f"Playlist file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
        index = cls.from_records(records)
        logger.info(f"Loaded playlist with {len(index)} shows from {path}")
        return index


def random_target(index, rng=None):
    """Uniformly pick a show, then a season of it, then an episode of that season"""
    rng = rng or random.Random()
    show = rng.choice(index.shows)
    season = rng.randint(1, len(show.seasons))
    episode = rng.randint(1, show.seasons[season - 1])
    return PlaybackTarget(show.id, season, episode)


def advance(current, index, rng=None):
    """Return the target that follows `current` in playlist order.

    Unknown shows (manual navigation, foreign URLs) get a random recovery
    target instead.
    """
    pos = index.position_of(current.show_ref)
    if pos is None:
        return random_target(index, rng)

    entry = index.shows[pos]
    seasons = entry.seasons
    if 1 <= current.season <= len(seasons) and current.episode < seasons[current.season - 1]:
        return PlaybackTarget(entry.id, current.season, current.episode + 1)
    if current.season < len(seasons):
        return PlaybackTarget(entry.id, current.season + 1, 1)

    next_show = index.shows[(pos + 1) % len(index)]
    return PlaybackTarget(next_show.id, 1, 1)
