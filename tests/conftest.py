from __future__ import annotations

from collections.abc import Iterator

import pytest

from weaponsim import config
from weaponsim.metrics import metrics_registry
from weaponsim.util import rng


@pytest.fixture(autouse=True)
def restore_metrics_registry() -> Iterator[None]:
    """Undo tracker registrations made by a test."""
    snapshot = metrics_registry.snapshot()
    yield
    metrics_registry.restore(snapshot)


@pytest.fixture(autouse=True)
def seeded_rng() -> None:
    """Reseed the shared dice streams so tests that use them are repeatable."""
    rng.init(config.RANDOM_SEED)
