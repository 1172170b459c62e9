"""Scrolling lesson feed: the most visible card is the one that plays."""

import asyncio
import logging

from .policy import LessonPlayback

logger = logging.getLogger(__name__)


class LessonFeed:
    """Owns the per-card playback controllers of a feed."""

    def __init__(self, cards: list[LessonPlayback]):
        self.cards = cards
        self.active_index = 0

    async def mount(self) -> None:
        """Mount every card and start the first one."""
        if not self.cards:
            return
        await self.cards[self.active_index].set_active(True)
        await asyncio.gather(*(card.mount() for card in self.cards))

    def unmount(self) -> None:
        for card in self.cards:
            card.unmount()

    @staticmethod
    def most_visible(ratios: dict[int, float], current: int) -> int:
        """
        Index with the highest visible ratio.

        Ties and all-zero updates keep the current index.
        """
        best, best_ratio = current, ratios.get(current, 0.0)
        for index, ratio in ratios.items():
            if ratio > best_ratio:
                best, best_ratio = index, ratio
        return best

    async def update_visibility(self, ratios: dict[int, float]) -> int:
        """
        Apply an intersection update ({card index: visible ratio}).

        Returns the active index after the update.
        """
        target = self.most_visible(ratios, self.active_index)
        if target == self.active_index or not 0 <= target < len(self.cards):
            return self.active_index

        logger.debug(f"Feed active card {self.active_index} -> {target}")
        previous = self.cards[self.active_index]
        self.active_index = target
        await previous.set_active(False)
        await self.cards[target].set_active(True)
        return target
