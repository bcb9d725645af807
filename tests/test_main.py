"""Tests for the command entry points and their exit statuses."""

import sys
import os
import json

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from src.errors import CatalogHttpError, ShowLookupError

QUERIES = [{"query": "The Office", "canonical_name": "The Office"}]


@pytest.fixture
def main_mod(tmp_path, monkeypatch):
    """Import main with its log file and dataset output inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    import main as main_mod
    monkeypatch.setattr(main_mod, "CATALOG_SHOWS", QUERIES)
    monkeypatch.setattr(main_mod, "DATASET_FILE", str(tmp_path / "out" / "seasons.json"))
    return main_mod


def _raise(exc):
    def build(specs):
        raise exc
    return build


class TestDatasetCommand:
    def test_success_writes_file_and_exits_zero(self, main_mod, tmp_path, monkeypatch):
        rows = [{"Name": "The Office", "Seasons": [6, 22]}]
        monkeypatch.setattr(main_mod, "build_dataset", lambda specs: rows)
        assert main_mod.main(["dataset"]) == 0
        saved = json.loads((tmp_path / "out" / "seasons.json").read_text(encoding="utf-8"))
        assert saved == rows

    @pytest.mark.parametrize("exc", [
        ShowLookupError("No show match for query: The Office"),
        CatalogHttpError(503, "https://api.test/search/shows", "unavailable"),
        RequestsConnectionError("connection refused"),
    ])
    def test_build_errors_exit_one(self, main_mod, tmp_path, monkeypatch, exc):
        monkeypatch.setattr(main_mod, "build_dataset", _raise(exc))
        assert main_mod.main(["dataset"]) == 1
        assert not (tmp_path / "out" / "seasons.json").exists()

    def test_no_configured_shows_exits_one(self, main_mod, monkeypatch):
        monkeypatch.setattr(main_mod, "CATALOG_SHOWS", [])
        assert main_mod.main(["dataset"]) == 1


class TestCommands:
    def test_unknown_command_exits_two(self, main_mod):
        assert main_mod.main(["bogus"]) == 2

    def test_watch_without_playlist_exits_one(self, main_mod, tmp_path, monkeypatch):
        monkeypatch.setattr(main_mod, "PLAYLIST_FILE", str(tmp_path / "missing.json"))
        assert main_mod.main(["watch"]) == 1
