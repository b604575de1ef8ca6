"""Last known cursor position per document."""

from __future__ import annotations

import threading
from typing import Dict, Tuple


class CursorTracker:
    """Thread-safe cache of the last cursor position seen for each document.

    Save notifications carry no cursor range, so the column recorded by the
    last change event is reused for them. Entries are never evicted.
    """

    def __init__(self):
        self._positions: Dict[str, Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def save(self, document_id: str, line: int, column: int) -> None:
        with self._lock:
            self._positions[document_id] = (line, column)

    def get(self, document_id: str) -> int:
        """Return the last saved column, or 0 if none was recorded."""
        with self._lock:
            position = self._positions.get(document_id)
        return position[1] if position else 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._positions)
