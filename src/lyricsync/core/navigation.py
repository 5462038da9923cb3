"""
Navigation port.

The Spotify flow needs to send the user somewhere: to the authorize page to
start, and back to the home page when a token is rejected. `Navigator`
abstracts that; the CLI uses the system web browser.
"""

import logging
import webbrowser
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Navigator(ABC):
    @abstractmethod
    def navigate(self, url: str) -> None:
        """Send the user to `url`."""


class WebBrowserNavigator(Navigator):
    """Open URLs in the default web browser, printing them when that fails."""

    def navigate(self, url: str) -> None:
        opened = False
        try:
            opened = webbrowser.open(url, new=2, autoraise=True)
        except webbrowser.Error as e:
            logger.warning("Could not open a browser: %s", e)
        if not opened:
            print(f"Open this URL in your browser:\n  {url}")


class ConsoleNavigator(Navigator):
    """Print URLs instead of opening them (headless sessions)."""

    def navigate(self, url: str) -> None:
        print(f"Open this URL in your browser:\n  {url}")
