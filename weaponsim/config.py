"""
Configuration constants.

Centralizes run-level settings for simulation batches. Game rule numbers
(thresholds, dice, rating cut-offs) live in ``weaponsim.constants.combat``.
"""

import logging

from weaponsim.types import RandomSeed

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED: RandomSeed = "sanguine"

# =============================================================================
# SIMULATION
# =============================================================================

# Combats per weapon/scenario pair
DEFAULT_ITERATIONS = 1000

# Worker processes for batch runs. 1 runs everything in-process.
DEFAULT_WORKERS = 1

# Target hit points when a scenario does not set its own. A fresh target with
# this many hit points replaces each one that is killed.
DEFAULT_TARGET_HP = 100

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = logging.WARNING
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = LOG_LEVEL) -> None:
    """Install a basic stderr handler for scripts that drive the simulator."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
