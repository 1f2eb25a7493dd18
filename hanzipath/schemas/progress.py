"""
Progress schemas for HanziPath.

Defines the on-disk form of a learner state:
- Review counters per character
- Known character ids plus the review map
"""

from typing import Annotated

from pydantic import BaseModel, Field

from hanzipath.data import UNIT_ID_LIMIT

# Unit ids must fit the 32-bit bitmaps LearnerState keeps them in
UnitId = Annotated[int, Field(ge=0, lt=UNIT_ID_LIMIT)]


class ReviewRecord(BaseModel):
    views: int = Field(default=0, ge=0)
    successes: int = Field(default=0, ge=0)
    last: int = 0  # epoch seconds of the latest review, 0 if never


class LearnerStateSnapshot(BaseModel):
    known_ids: list[UnitId] = []   # unordered
    history: dict[UnitId, ReviewRecord] = {}
    saved_at: int = 0              # epoch seconds, stamped by ProgressStore.save


class KnownCharactersFile(BaseModel):
    """Legacy progress file listing known characters by text."""
    knownChars: list[str] = []
