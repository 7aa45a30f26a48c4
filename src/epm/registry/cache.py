import logging
from collections import OrderedDict
from typing import Optional

logger = logging.getLogger(__name__)

class ContentCache:
    """
    in-memory store of archive and asset buffers, keyed by archive key or path.

    unbounded unless max_bytes is given, in which case least recently used
    entries are evicted once the total size of the buffers exceeds it.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes
        self._entries: "OrderedDict[str, bytes]" = OrderedDict()
        self._size = 0

    def get(self, key: str) -> Optional[bytes]:
        buffer = self._entries.get(key)
        if buffer is not None and self.max_bytes is not None:
            self._entries.move_to_end(key)
        return buffer

    def set(self, key: str, buffer: bytes) -> None:
        buffer = bytes(buffer)
        previous = self._entries.pop(key, None)
        if previous is not None:
            self._size -= len(previous)

        if self.max_bytes is not None and len(buffer) > self.max_bytes:
            logger.warning(f"not caching {key}: {len(buffer)} bytes exceeds cache limit of {self.max_bytes}")
            return

        self._entries[key] = buffer
        self._size += len(buffer)
        self._evict()

    def has(self, key: str) -> bool:
        return key in self._entries

    def clear(self):
        self._entries.clear()
        self._size = 0

    @property
    def size_bytes(self) -> int:
        return self._size

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def _evict(self):
        if self.max_bytes is None:
            return
        while self._size > self.max_bytes and self._entries:
            key, buffer = self._entries.popitem(last=False)
            self._size -= len(buffer)
            logger.debug(f"evicted {key} ({len(buffer)} bytes)")
