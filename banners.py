# banners.py — banner carousel index (pure logic, no Streamlit)
#
# The timer lives on the dashboard page as st.fragment(run_every=...), so rotation
# stops with the page. This class only tracks which banner is showing.
from __future__ import annotations

from typing import List


class BannerCarousel:
    """Cycles through the banners handed out with the PIN session."""

    def __init__(self, banners: List, interval: float = 4.0):
        self.banners = list(banners or [])
        self.interval = float(interval)
        self.index = 0

    @property
    def current(self):
        if not self.banners:
            return None
        return self.banners[self.index % len(self.banners)]

    @property
    def rotates(self) -> bool:
        """A single banner (or none) never rotates."""
        return len(self.banners) > 1

    def run_every(self):
        """Fragment rerun interval, or None when there is nothing to rotate."""
        return self.interval if self.rotates else None

    def advance(self) -> int:
        if self.banners:
            self.index = (self.index + 1) % len(self.banners)
        return self.index
