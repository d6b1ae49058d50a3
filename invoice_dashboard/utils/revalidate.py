"""Per-path cache for computed dashboard payloads."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from flask import current_app


class ViewCache:
    """Holds the last payload computed for each view path.

    Entries stay fresh until :meth:`revalidate` marks their path stale; the
    next read recomputes them.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    def get(self, path: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(path)

    def set(self, path: str, payload: Any) -> None:
        with self._lock:
            self._entries[path] = payload

    def get_or_compute(self, path: str, compute: Callable[[], Any]) -> Any:
        """Return the cached payload for ``path`` or compute and store it.

        ``compute`` returns ``None`` when the payload must not be cached
        (for instance when the store failed).
        """
        payload = self.get(path)
        if payload is not None:
            return payload
        payload = compute()
        if payload is not None:
            self.set(path, payload)
        return payload

    # ------------------------------------------------------------------
    def revalidate(self, path: str) -> None:
        """Drop ``path`` and every path nested under it."""
        prefix = path.rstrip("/") + "/"
        with self._lock:
            for key in list(self._entries):
                if key == path or key.startswith(prefix):
                    del self._entries[key]

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._entries


def revalidate_path(path: str) -> None:
    """Mark cached views under ``path`` stale in the current application."""
    current_app.extensions["view_cache"].revalidate(path)
    current_app.logger.debug("Revalidated %s", path)
