"""Error kinds shared by the dataset builder and the watcher."""


class ShowLookupError(Exception):
    """No catalog entry matched a show query."""


class CatalogHttpError(Exception):
    """The catalog answered with a non-success status."""

    def __init__(self, status, url, body=""):
        self.status = status
        self.url = url
        self.body = body
        super().__init__(f"HTTP {status} for {url}\n{body[:500]}")


class PlaylistError(ValueError):
    """The playlist file holds an entry that cannot be played."""


class SignalError(Exception):
    """The liveness signal could not be captured from the player."""


class NavigationError(Exception):
    """The player could not navigate to a target."""
