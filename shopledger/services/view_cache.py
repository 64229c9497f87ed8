import copy
from threading import Lock
from typing import Any

BILL_DRAFT_VIEW = "billing.draft"
PREFERENCES_VIEW = "dashboard.preferences"


class ViewStateCache:
    """Per-session, per-view state with explicit load/save/clear.

    Values are copied on the way in and out so callers never share a
    mutable object with the cache.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], Any] = {}
        self._lock = Lock()

    def load(self, session_id: str, view: str, default: Any = None) -> Any:
        with self._lock:
            if (session_id, view) not in self._entries:
                return copy.deepcopy(default)
            return copy.deepcopy(self._entries[(session_id, view)])

    def save(self, session_id: str, view: str, value: Any) -> None:
        with self._lock:
            self._entries[(session_id, view)] = copy.deepcopy(value)

    def clear(self, session_id: str, view: str | None = None) -> None:
        with self._lock:
            if view is not None:
                self._entries.pop((session_id, view), None)
                return
            for key in [key for key in self._entries if key[0] == session_id]:
                del self._entries[key]


view_cache = ViewStateCache()


def get_view_cache() -> ViewStateCache:
    return view_cache
