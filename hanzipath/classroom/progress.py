"""
ProgressStore - Save and load a LearnerState as JSON (~/.hanzipath/learner-state.json).

Stores learner progress separately from the corpus so that:
- The corpus can be rebuilt without losing progress
- Progress is user-specific, the corpus is shared

Writes go to a temporary file in the target directory and are moved into
place with os.replace, so a crash never leaves a half-written file.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from hanzipath.data import IdMapper
from hanzipath.schemas import (
    DEFAULT_STATE_PATH,
    KnownCharactersFile,
    LearnerStateSnapshot,
    ReviewRecord,
)

from .learner import LearnerState, ReviewHistory

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# State <-> snapshot mapping
# -----------------------------------------------------------------------------

def to_snapshot(state: LearnerState) -> LearnerStateSnapshot:
    """Convert a live state to its persisted form."""
    history = {}
    for unit_id in state.reviewed_ids():
        record = state.get_review_history(unit_id)
        history[unit_id] = ReviewRecord(
            views=record.views,
            successes=record.successes,
            last=record.last_reviewed_epoch_seconds,
        )
    return LearnerStateSnapshot(
        known_ids=list(state.get_known_snapshot()),
        history=history,
    )


def from_snapshot(snapshot: Optional[LearnerStateSnapshot]) -> LearnerState:
    """Rebuild a state; None gives an empty state."""
    if snapshot is None:
        return LearnerState()
    history = {
        unit_id: ReviewHistory(
            views=record.views,
            successes=record.successes,
            last_reviewed_epoch_seconds=record.last,
        )
        for unit_id, record in snapshot.history.items()
    }
    return LearnerState.restore(snapshot.known_ids, history)


def _atomic_write_text(path: Path, content: str) -> None:
    """Write content to path via a temp file and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------

class ProgressStore:
    """JSON file persistence for one learner's state."""

    def __init__(self, path: Optional[str | Path] = None):
        """
        Args:
            path: JSON file (default: ~/.hanzipath/learner-state.json)
        """
        self.path = Path(path) if path else DEFAULT_STATE_PATH

    def save(self, state: LearnerState) -> LearnerStateSnapshot:
        """Write the state atomically and return the snapshot written."""
        snapshot = to_snapshot(state)
        snapshot.saved_at = int(time.time())
        _atomic_write_text(self.path, snapshot.model_dump_json(indent=2))
        logger.info(f"Saved learner state to {self.path} ({len(snapshot.known_ids)} known)")
        return snapshot

    def load_snapshot(self) -> Optional[LearnerStateSnapshot]:
        """
        Read the snapshot from disk.

        Returns None when the file is missing, empty or unreadable as a
        snapshot; unreadable content is logged.
        """
        if not self.path.exists() or self.path.stat().st_size == 0:
            return None
        try:
            return LearnerStateSnapshot.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError) as e:
            logger.error(f"Cannot load learner state from {self.path}, starting empty: {e}")
            return None

    def load(self) -> LearnerState:
        """Load the learner state, or an empty one if nothing usable is on disk."""
        return from_snapshot(self.load_snapshot())


# -----------------------------------------------------------------------------
# Known characters by text (legacy format)
# -----------------------------------------------------------------------------

def export_known_characters(path: str | Path, state: LearnerState, mapper: IdMapper) -> int:
    """
    Write known characters as text ({"knownChars": [...]}).

    Returns:
        Number of characters written (ids without text are skipped)
    """
    chars = [
        text for text in (mapper.get_text(uid) for uid in state.get_known_snapshot())
        if text is not None
    ]
    data = KnownCharactersFile(knownChars=chars)
    _atomic_write_text(Path(path), json.dumps(data.model_dump(), ensure_ascii=False, indent=2))
    return len(chars)


def import_known_characters(path: str | Path, mapper: IdMapper) -> LearnerState:
    """
    Build a state from a character-text progress file.

    Characters the mapper does not know are logged and skipped.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Progress file does not exist: {path}")

    data = KnownCharactersFile.model_validate_json(path.read_text(encoding="utf-8"))
    state = LearnerState()
    skipped = 0
    for char in data.knownChars:
        if not char or not char.strip():
            continue
        unit_id = mapper.get_id(char)
        if unit_id is None:
            skipped += 1
            continue
        state.mark_known(unit_id)

    if skipped:
        logger.warning(f"Skipped {skipped} characters not present in the corpus")
    return state
