"""Content Store — in-memory cache of the last fetched body per subscription.

Invariants:
    - One instance per application, created by create_app() and injected
    - All access goes through a single lock (handlers may run in worker threads)
    - Content is opaque text; nothing here parses it
"""

import threading

from app.core.errors import ContentNotFoundError


class ContentStore:
    def __init__(self):
        self._contents: dict[int, str] = {}
        self._lock = threading.Lock()

    def store(self, sub_id: int, content: str) -> None:
        with self._lock:
            self._contents[sub_id] = content

    def get(self, sub_id: int) -> str:
        with self._lock:
            try:
                return self._contents[sub_id]
            except KeyError:
                raise ContentNotFoundError(sub_id) from None

    def delete(self, sub_id: int) -> None:
        with self._lock:
            self._contents.pop(sub_id, None)

    def clear(self) -> None:
        with self._lock:
            self._contents.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._contents)
