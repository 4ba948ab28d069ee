"""
Bounded memoization cache for tier lookups.

The cache is owned by a TierMapper instance (no module-level state), so
tests can inject, inspect, clear or omit it. Entries are keyed by
floor(total_rp) and evicted oldest-insertion-first once the cap is exceeded.
"""

import math
import threading
from collections import OrderedDict

from rankcalc.config import RANK_CACHE_SIZE
from rankcalc.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class RankCache:
    """Thread-safe FIFO cache of CalculatedRank values keyed by integer RP."""

    def __init__(self, max_size: int = RANK_CACHE_SIZE):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(total_rp) -> int:
        return math.floor(total_rp)

    def get(self, total_rp):
        key = self.key_for(total_rp)
        with self._lock:
            rank = self._entries.get(key)
            if rank is None:
                self.misses += 1
            else:
                self.hits += 1
            return rank

    def put(self, total_rp, rank) -> None:
        key = self.key_for(total_rp)
        with self._lock:
            # Re-inserting keeps the original position; this is FIFO, not LRU
            if key in self._entries:
                return
            self._entries[key] = rank
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted RP {evicted} from rank cache")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __contains__(self, total_rp):
        with self._lock:
            return self.key_for(total_rp) in self._entries
