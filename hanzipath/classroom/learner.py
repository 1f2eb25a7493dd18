"""
LearnerState - Known characters and per-character review counters.

Stored in memory only; ProgressStore handles the file on disk.
Not synchronized: callers sharing one state across threads must serialize.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional

from pyroaring import BitMap, FrozenBitMap

from hanzipath.data import UNIT_ID_LIMIT
from hanzipath.errors import InvalidArgumentError


def _check_unit_id(unit_id: int) -> None:
    if not 0 <= unit_id < UNIT_ID_LIMIT:
        raise InvalidArgumentError(f"Unit id must be in [0, 2**32), got {unit_id}")


@dataclass
class ReviewHistory:
    """Review counters for one unit."""
    views: int = 0
    successes: int = 0
    last_reviewed_epoch_seconds: int = 0  # 0 means never reviewed


class LearnerState:
    """
    A learner's known-set (roaring bitmap over unit ids) and review history.

    The known-set only grows; there is no way to forget a unit.
    """

    def __init__(self):
        self._known = BitMap()
        self._history: dict[int, ReviewHistory] = {}

    @classmethod
    def restore(
        cls,
        known_ids: Iterable[int],
        history: Optional[Mapping[int, ReviewHistory]] = None,
    ) -> "LearnerState":
        """Rebuild a state from previously saved known ids and history."""
        state = cls()
        for unit_id in known_ids:
            state.mark_known(unit_id)
        for unit_id, record in (history or {}).items():
            _check_unit_id(unit_id)
            state._history[unit_id] = replace(record)
        return state

    # -------------------------------------------------------------------------
    # Known set
    # -------------------------------------------------------------------------

    def mark_known(self, unit_id: int) -> None:
        """Mark a unit as known. Marking twice is harmless."""
        _check_unit_id(unit_id)
        self._known.add(unit_id)

    def is_known(self, unit_id: int) -> bool:
        return 0 <= unit_id < UNIT_ID_LIMIT and unit_id in self._known

    def get_known_snapshot(self) -> FrozenBitMap:
        """Immutable copy of the known-set, in ascending id order."""
        return FrozenBitMap(self._known)

    def known_count(self) -> int:
        return len(self._known)

    # -------------------------------------------------------------------------
    # Review history
    # -------------------------------------------------------------------------

    def record_review(self, unit_id: int, success: bool, timestamp_epoch_seconds: int) -> None:
        """
        Count one review of unit_id.

        The timestamp always replaces the stored one, even when it is earlier.
        """
        _check_unit_id(unit_id)
        record = self._history.get(unit_id)
        if record is None:
            record = ReviewHistory()
            self._history[unit_id] = record
        record.views += 1
        if success:
            record.successes += 1
        record.last_reviewed_epoch_seconds = timestamp_epoch_seconds

    def get_review_history(self, unit_id: int) -> Optional[ReviewHistory]:
        """Copy of the unit's review record, or None if never reviewed."""
        record = self._history.get(unit_id)
        return replace(record) if record is not None else None

    def reviewed_ids(self) -> list[int]:
        """Ids with a review record, ascending."""
        return sorted(self._history)
