#!/usr/bin/env python3
"""
PlayWatcher
Builds per-season episode counts from TVmaze and keeps a browser player
moving through a fixed playlist.

Usage:
    python main.py            interactive menu
    python main.py dataset    build the season dataset
    python main.py watch      start the watcher
"""

import json
import sys
import os
import logging
from requests.exceptions import RequestException
from selenium.common.exceptions import WebDriverException

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('watcher.log'),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

from config.config import (
    CATALOG_SHOWS, DATASET_FILE, PLAYLIST_FILE, SIGNAL_PROBE,
    GRACE_SECONDS, TICK_SECONDS,
)
from src.catalog import ShowQuery, build_dataset
from src.errors import (
    CatalogHttpError, NavigationError, PlaylistError, ShowLookupError,
)
from src.player import open_player_session
from src.playlist import PlaylistIndex
from src.watcher import Watcher


def print_header():
    """Print application header"""
    print("\n" + "="*60)
    print("  PLAYWATCHER")
    print("="*60 + "\n")


def show_menu():
    """Display interactive menu"""
    print("\nOptions:")
    print("  1. Build season dataset from TVmaze")
    print("  2. Start watcher")
    print("  3. Exit\n")


def build_season_dataset():
    """Build the dataset, print it and save it. Returns the process exit status."""
    specs = [ShowQuery.from_dict(s) for s in CATALOG_SHOWS]
    if not specs:
        print("✗ No shows configured in config/catalog_shows.json")
        return 1

    print(f"\n→ Looking up {len(specs)} shows on TVmaze...\n")
    try:
        dataset = build_dataset(specs)
    except (ShowLookupError, CatalogHttpError) as e:
        print(f"\n✗ Dataset build failed: {str(e)}")
        logger.error(f"Dataset build failed: {e}")
        return 1
    except RequestException as e:
        print(f"\n✗ Network error occurred: {str(e)}")
        logger.error(f"Network error in build_season_dataset: {e}")
        return 1

    print(json.dumps(dataset, indent=2, ensure_ascii=False))
    try:
        os.makedirs(os.path.dirname(os.path.abspath(DATASET_FILE)), exist_ok=True)
        with open(DATASET_FILE, 'w', encoding='utf-8') as f:
            json.dump(dataset, f, indent=2, ensure_ascii=False)
        print(f"\n✓ Dataset saved to: {DATASET_FILE}")
        logger.info(f"Dataset with {len(dataset)} shows saved to {DATASET_FILE}")
    except OSError as e:
        print(f"\n✗ Failed to save dataset: {str(e)}")
        logger.error(f"Failed to save dataset to {DATASET_FILE}: {e}")
        return 1
    return 0


def start_watcher():
    """Run the watcher until Ctrl+C. Returns the process exit status."""
    try:
        index = PlaylistIndex.load(PLAYLIST_FILE)
    except (PlaylistError, ValueError) as e:
        print(f"✗ Could not load playlist: {str(e)}")
        logger.error(f"Could not load playlist {PLAYLIST_FILE}: {e}")
        return 1

    print(f"\n→ Starting watcher ({SIGNAL_PROBE} probe, {len(index)} shows)...")
    print("  (Browser will open - do not close it manually)\n")

    try:
        session = open_player_session(signal=SIGNAL_PROBE)
    except WebDriverException as e:
        print(f"✗ Could not start the browser: {str(e)}")
        logger.error(f"Browser start failed: {e}")
        return 1
    watcher = Watcher(session, index, grace=GRACE_SECONDS, interval=TICK_SECONDS)
    try:
        watcher.start()
        watcher.run()
    except NavigationError as e:
        print(f"\n✗ Could not open the first episode: {str(e)}")
        logger.error(f"Watcher start failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n⚠ Watcher interrupted by user")
        logger.info("Watcher interrupted by user")
        watcher.stop()
    finally:
        session.close()
    return 0


def main(argv=None):
    """Main application loop"""
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        command = argv[0]
        if command == 'dataset':
            return build_season_dataset()
        if command == 'watch':
            return start_watcher()
        print(f"✗ Unknown command: {command} (expected 'dataset' or 'watch')")
        return 2

    print_header()
    while True:
        show_menu()
        choice = input("Enter your choice (1-3): ").strip()
        if choice == '1':
            build_season_dataset()
        elif choice == '2':
            start_watcher()
        elif choice == '3':
            print("\n✓ Goodbye!\n")
            return 0
        else:
            print("✗ Invalid choice. Please enter a number between 1 and 3.")


if __name__ == "__main__":
    sys.exit(main())
