"""Built-in metrics trackers. Importing this package registers them."""

from . import bleed, sneak_attack

__all__ = ["bleed", "sneak_attack"]
