"""
Player session - a single browser tab driven through Selenium.

The watcher only talks to this class; it never touches the WebDriver itself.
"""

import io
import logging
import os
import sys
from urllib.parse import urlparse, parse_qs

from PIL import Image
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.firefox.options import Options
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config.config import (
    PLAYER_BASE_URL, USER_DATA_DIR, HEADLESS, PAGE_LOAD_TIMEOUT,
    SIGNAL_PROBE, PIXEL_X, PIXEL_Y, PLAY_PROMPT_WAIT,
)
from src.errors import NavigationError, SignalError
from src.playlist import PlaybackTarget

logger = logging.getLogger(__name__)

PLAY_BUTTON_SELECTOR = ".vjs-big-play-button"
SIGNAL_PROBES = ("pixel", "location")


# ==================== URLS ====================

def build_url(show_id, season, episode, base_url=PLAYER_BASE_URL):
    return f"{base_url}/tvshow/{show_id}?season={season}&episode={episode}&play=1"


def parse_location(url):
    """Turn a player URL back into a PlaybackTarget.

    Anything that is not a /tvshow/<id> page with numeric season and episode
    comes back with show_ref=None so the cursor treats it as unknown.
    """
    unknown = PlaybackTarget(None, 1, 1)
    try:
        parsed = urlparse(url or "")
        parts = [p for p in parsed.path.split('/') if p]
        if len(parts) < 2 or parts[0] != 'tvshow':
            return unknown
        query = parse_qs(parsed.query)
        season = int(query.get('season', [''])[0])
        episode = int(query.get('episode', [''])[0])
    except ValueError:
        return unknown
    if season < 1 or episode < 1:
        return unknown
    return PlaybackTarget(parts[1], season, episode)


# ==================== PIXELS ====================

def pixel_hex(png_bytes, x, y):
    """Decode one pixel of a PNG screenshot as #RRGGBB"""
    with Image.open(io.BytesIO(png_bytes)) as image:
        r, g, b = image.convert('RGB').getpixel((x, y))
    return f"#{r:02X}{g:02X}{b:02X}"


# ==================== SESSION ====================

class PlayerSession:
    """One exclusively-owned browser tab.

    `signal` picks the liveness probe: "pixel" samples a single screen pixel,
    "location" uses the current URL.
    """

    def __init__(self, driver, signal=SIGNAL_PROBE, pixel=(PIXEL_X, PIXEL_Y),
                 base_url=PLAYER_BASE_URL, play_prompt_wait=PLAY_PROMPT_WAIT):
        if signal not in SIGNAL_PROBES:
            raise ValueError(f"Unknown signal probe '{signal}' (expected one of {SIGNAL_PROBES})")
        self.driver = driver
        self.signal = signal
        self.pixel = pixel
        self.base_url = base_url
        self.play_prompt_wait = play_prompt_wait

    def navigate(self, target):
        url = target if isinstance(target, str) else build_url(
            target.show_ref, target.season, target.episode, self.base_url)
        try:
            self.driver.get(url)
        except WebDriverException as e:
            raise NavigationError(f"Could not open {url}: {e.msg or e}") from e
        return url

    def current_location(self):
        try:
            return self.driver.current_url
        except WebDriverException as e:
            raise SignalError(f"Could not read current URL: {e.msg or e}") from e

    def sample_pixel(self):
        x, y = self.pixel
        try:
            png = self.driver.get_screenshot_as_png()
        except WebDriverException as e:
            raise SignalError(f"Screenshot failed: {e.msg or e}") from e
        try:
            return pixel_hex(png, x, y)
        except (OSError, IndexError) as e:
            raise SignalError(f"Could not read pixel ({x}, {y}): {e}") from e

    def sample_signal(self):
        if self.signal == "pixel":
            return self.sample_pixel()
        return self.current_location()

    def set_fullscreen(self):
        try:
            self.driver.fullscreen_window()
            logger.info("Window fullscreen set")
            return True
        except WebDriverException as e:
            logger.warning(f"Fullscreen skipped: {e.msg or e}")
            return False

    def dismiss_play_prompt(self):
        """Click the big play button if it shows up within the wait window"""
        try:
            button = WebDriverWait(self.driver, self.play_prompt_wait).until(
                EC.element_to_be_clickable((By.CSS_SELECTOR, PLAY_BUTTON_SELECTOR))
            )
            button.click()
            logger.info("Clicked play button")
            return True
        except TimeoutException:
            logger.debug("No play button present")
            return False
        except WebDriverException as e:
            logger.warning(f"Play button click skipped: {e.msg or e}")
            return False

    def close(self):
        try:
            self.driver.quit()
        except WebDriverException as e:
            logger.warning(f"Browser did not quit cleanly: {e.msg or e}")
        print("✓ Browser closed")


def setup_driver(profile_dir=USER_DATA_DIR, headless=HEADLESS):
    """Start Firefox on the persistent watcher profile"""
    firefox_options = Options()
    if headless:
        firefox_options.add_argument("--headless")
    os.makedirs(profile_dir, exist_ok=True)
    firefox_options.add_argument("-profile")
    firefox_options.add_argument(profile_dir)
    firefox_options.set_preference("media.autoplay.default", 0)
    firefox_options.set_preference("full-screen-api.warning.timeout", 0)

    driver = webdriver.Firefox(service=FirefoxService(), options=firefox_options)
    driver.set_page_load_timeout(PAGE_LOAD_TIMEOUT)
    return driver


def open_player_session(signal=SIGNAL_PROBE):
    return PlayerSession(setup_driver(), signal=signal)
