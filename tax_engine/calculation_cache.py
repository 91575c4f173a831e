"""Short-lived memoization of whole-return calculations.

The UI recalculates on nearly every edit, so identical returns tend to
arrive within seconds of each other. Entries are keyed by a fingerprint of
the complete TaxReturn and hold the complete TaxCalculation; partial
results are never cached. The cache is an ordinary object owned by the
caller and passed to calculate_federal_tax().

Expired entries are purged whenever a new result is stored, so the map
never holds more than the returns seen within one TTL window.
"""

import hashlib
import json
import logging
import threading
import time
from dataclasses import asdict
from typing import Callable, Dict, Optional, Tuple

from .models import TaxReturn, TaxCalculation

logger = logging.getLogger(__name__)

# Default TTL for cached calculations (seconds)
DEFAULT_CACHE_TTL = 5.0


def fingerprint(tax_return: TaxReturn) -> str:
    """Stable hash of every field in the return."""
    serialized = json.dumps(asdict(tax_return), sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()


class CalculationCache:
    """Time-limited map from return fingerprint to TaxCalculation.

    Safe to share between request threads.

    Usage:
        cache = CalculationCache(ttl=5)
        result = calculate_federal_tax(tax_return, cache=cache)
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl: Seconds an entry stays valid.
            clock: Time source; injectable for tests.
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, TaxCalculation]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl

    def get(self, key: str) -> Optional[TaxCalculation]:
        """Return the cached result, dropping it if it has expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            stored_at, result = entry
            if self._is_expired(stored_at, self._clock()):
                self._entries.pop(key, None)
                logger.debug("Cache entry expired: %s", key[:12])
                return None
            return result

    def set(self, key: str, result: TaxCalculation) -> None:
        """Store a result and purge every expired entry."""
        with self._lock:
            now = self._clock()
            expired = [
                k for k, (stored_at, _) in self._entries.items()
                if self._is_expired(stored_at, now)
            ]
            for k in expired:
                del self._entries[k]
            if expired:
                logger.debug("Purged %d expired cache entries", len(expired))
            self._entries[key] = (now, result)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_or_compute(
        self,
        tax_return: TaxReturn,
        compute: Callable[[TaxReturn], TaxCalculation],
    ) -> TaxCalculation:
        """Serve a fresh cached result or compute and store a new one."""
        key = fingerprint(tax_return)
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key[:12])
            return cached

        logger.debug("Cache miss: %s", key[:12])
        result = compute(tax_return)
        self.set(key, result)
        return result
