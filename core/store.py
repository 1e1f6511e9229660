"""
In-memory keyed store for audit and score records

Records are inserted once by their owner (the audit coordinator or the
scoring engine) and looked up by id afterwards. Inserts and lookups are
guarded by a lock so concurrent audits can share one store.
"""
import threading
from collections import OrderedDict
from typing import Generic, Iterator, List, Optional, TypeVar

from core.exceptions import NotFoundError
from core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class KeyedStore(Generic[T]):
    """Insertion-ordered store with an optional FIFO capacity"""

    def __init__(self, resource: str, max_entries: int = 0):
        """
        Args:
            resource: Human readable name used in NotFoundError messages
            max_entries: Maximum entries kept; 0 means unbounded
        """
        if max_entries < 0:
            raise ValueError("max_entries cannot be negative")
        self.resource = resource
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, T]" = OrderedDict()
        self._lock = threading.Lock()
        self.evictions = 0

    def put(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Evicted {self.resource} {evicted} (capacity {self.max_entries})")

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            return self._entries.get(key)

    def require(self, key: str) -> T:
        """Get a record or raise NotFoundError"""
        value = self.get(key)
        if value is None:
            raise NotFoundError(self.resource, key)
        return value

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
