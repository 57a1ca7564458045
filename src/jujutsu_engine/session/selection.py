"""Multi-selection of change ids, independent of the cursor."""

from __future__ import annotations

from typing import Dict, Iterator, List


class SelectionSet:
    """Insertion-ordered set of selected change ids.

    Ids are never reconciled against a refreshed log; a stale id simply makes
    the next consuming jj command fail, and that failure is reported.
    """

    def __init__(self) -> None:
        self._ids: Dict[str, None] = {}

    def toggle(self, change_id: str) -> bool:
        """Flip membership of ``change_id``; returns whether it is now selected."""

        if change_id in self._ids:
            del self._ids[change_id]
            return False
        self._ids[change_id] = None
        return True

    def clear(self) -> None:
        self._ids.clear()

    def list(self) -> List[str]:
        return list(self._ids)

    def count(self) -> int:
        return len(self._ids)

    def __contains__(self, change_id: object) -> bool:
        return change_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __bool__(self) -> bool:
        return bool(self._ids)


__all__ = ["SelectionSet"]
