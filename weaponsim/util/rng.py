"""Seeded random streams for reproducible simulation batches.

Every consumer of randomness draws from a named stream derived from one batch
seed. The same seed always rolls the same dice, and a new consumer never
shifts the rolls an existing one sees.

There are two kinds of stream:

``shared(name)``
    Cached per name and handed out as a `StreamProxy`, so a module can keep
    the reference it took at import time and still follow `reset()`::

        from weaponsim.util import rng
        _rng = rng.get("combat.dice")

``fresh(name)``
    A brand new `random.Random` on every call. The batch runner takes one per
    combat ("combat.17"), which makes a combat's rolls a function of the batch
    seed and its index alone, however the batch is split across processes.
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TypeAlias

from weaponsim.types import RandomSeed


def derive_seed(master_seed: RandomSeed, domain: str) -> int:
    """Integer seed for ``domain``.

    crc32 rather than ``hash()``, which is salted per interpreter.
    """
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class StreamProxy:
    """Forwards dice calls to whatever stream its registry currently holds."""

    __slots__ = ("_registry", "_domain")

    def __init__(self, registry: StreamRegistry, domain: str) -> None:
        self._registry = registry
        self._domain = domain

    def random(self) -> float:
        return self._registry.current(self._domain).random()

    def randint(self, a: int, b: int) -> int:
        return self._registry.current(self._domain).randint(a, b)

    def __repr__(self) -> str:
        return f"StreamProxy({self._domain!r})"


# Anything with ``randint(a, b)`` works as a dice source.
RNG: TypeAlias = Random | StreamProxy


class StreamRegistry:
    """Named random streams derived from one master seed."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._live: dict[str, Random] = {}
        self._proxies: dict[str, StreamProxy] = {}

    def fresh(self, domain: str) -> Random:
        """New, unshared stream for ``domain``.

        Two calls with the same domain give generators that produce the same
        sequence. Without a master seed the stream is seeded from the OS.
        """
        if self.master_seed is None:
            return Random()
        return Random(derive_seed(self.master_seed, domain))

    def shared(self, domain: str) -> StreamProxy:
        proxy = self._proxies.get(domain)
        if proxy is None:
            proxy = self._proxies[domain] = StreamProxy(self, domain)
        return proxy

    def current(self, domain: str) -> Random:
        stream = self._live.get(domain)
        if stream is None:
            stream = self._live[domain] = self.fresh(domain)
        return stream

    def reseed(self, master_seed: RandomSeed = None) -> None:
        """Switch seeds. Proxies stay valid and restart from the new seed."""
        self.master_seed = master_seed
        self._live.clear()


# =============================================================================
# Process-wide streams
# =============================================================================

_registry = StreamRegistry()


def init(master_seed: RandomSeed = None) -> None:
    """Seed the process-wide shared streams."""
    _registry.reseed(master_seed)


def get(domain: str) -> StreamProxy:
    """Shared stream for ``domain``. Unseeded until `init()` is called."""
    return _registry.shared(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Restart every shared stream under ``master_seed``."""
    _registry.reseed(master_seed)
