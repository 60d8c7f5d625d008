from __future__ import annotations

import logging
from collections.abc import Callable

from weaponsim.metrics.engine import MetricsTracker

logger = logging.getLogger(__name__)

TrackerFactory = Callable[[], MetricsTracker]


class MetricsRegistry:
    """Name-keyed factories for class trackers and weapon mechanic trackers.

    Tracker modules register themselves at import time. Registering the same
    key twice replaces the earlier factory.
    """

    def __init__(self) -> None:
        self._class_trackers: dict[str, TrackerFactory] = {}
        self._mechanic_trackers: dict[str, TrackerFactory] = {}

    def register_class_tracker(self, class_name: str, factory: TrackerFactory) -> None:
        """Register a tracker created for every combat by a ``class_name`` character."""
        self._class_trackers[class_name] = factory
        logger.debug(f"Registered class tracker for '{class_name}'")

    def register_mechanic_tracker(self, mechanic_type: str, factory: TrackerFactory) -> None:
        """Register a tracker created for every weapon with ``mechanic_type``."""
        self._mechanic_trackers[mechanic_type] = factory
        logger.debug(f"Registered mechanic tracker for '{mechanic_type}'")

    def create_class_tracker(self, class_name: str) -> MetricsTracker | None:
        """Return a fresh tracker instance, or ``None`` if nothing is registered."""
        factory = self._class_trackers.get(class_name)
        return factory() if factory is not None else None

    def create_mechanic_tracker(self, mechanic_type: str) -> MetricsTracker | None:
        factory = self._mechanic_trackers.get(mechanic_type)
        return factory() if factory is not None else None

    def create_trackers(
        self, class_name: str | None, mechanic_types: list[str]
    ) -> list[MetricsTracker]:
        """Fresh trackers for a character class and a weapon's mechanics.

        Each mechanic type yields at most one tracker even if the weapon lists
        it twice.
        """
        trackers: list[MetricsTracker] = []
        if class_name is not None:
            tracker = self.create_class_tracker(class_name)
            if tracker is not None:
                trackers.append(tracker)
        for mechanic_type in dict.fromkeys(mechanic_types):
            tracker = self.create_mechanic_tracker(mechanic_type)
            if tracker is not None:
                trackers.append(tracker)
        return trackers

    def registered_classes(self) -> list[str]:
        return sorted(self._class_trackers)

    def registered_mechanics(self) -> list[str]:
        return sorted(self._mechanic_trackers)

    def snapshot(self) -> tuple[dict[str, TrackerFactory], dict[str, TrackerFactory]]:
        """Copy the current registrations, e.g. to restore them after a test."""
        return dict(self._class_trackers), dict(self._mechanic_trackers)

    def restore(
        self, snapshot: tuple[dict[str, TrackerFactory], dict[str, TrackerFactory]]
    ) -> None:
        self._class_trackers, self._mechanic_trackers = (
            dict(snapshot[0]),
            dict(snapshot[1]),
        )

    def clear(self) -> None:
        self._class_trackers.clear()
        self._mechanic_trackers.clear()


# Global registry instance used throughout the application
metrics_registry = MetricsRegistry()
