"""
IdMapper - Stable dense integer ids for unit texts (characters).

Ids are handed out monotonically from 0 on first sighting and are never
reused. Allocation is safe to call from several loader threads at once.
"""

import threading
from types import MappingProxyType
from typing import Mapping, Optional

from hanzipath.errors import InconsistentStateError

# Ids are stored in 32-bit roaring bitmaps
UNIT_ID_LIMIT = 2 ** 32


class IdMapper:
    """
    Bidirectional text <-> id mapping.

    Reads go straight to the dicts; only allocation takes the lock, so a text
    can never receive two ids even when loaders race on it.
    """

    def __init__(self):
        self._text_to_id: dict[str, int] = {}
        self._id_to_text: dict[int, str] = {}
        self._lock = threading.Lock()
        self._sealed = False

    def get_or_create_id(self, text: str) -> int:
        """Return the id for text, allocating the next one if it is new."""
        existing = self._text_to_id.get(text)
        if existing is not None:
            return existing

        with self._lock:
            # Another thread may have allocated it while we waited
            existing = self._text_to_id.get(text)
            if existing is not None:
                return existing
            if self._sealed:
                raise InconsistentStateError(f"IdMapper is sealed; cannot allocate an id for {text!r}")
            new_id = len(self._text_to_id)
            self._id_to_text[new_id] = text
            self._text_to_id[text] = new_id
            return new_id

    def seal(self) -> None:
        """Stop allocating: later unseen texts raise InconsistentStateError."""
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get_id(self, text: str) -> Optional[int]:
        """Look up an id without allocating one."""
        return self._text_to_id.get(text)

    def get_text(self, unit_id: int) -> Optional[str]:
        """Get the text for an id, or None if the id was never allocated."""
        return self._id_to_text.get(unit_id)

    def size(self) -> int:
        """Number of distinct texts mapped so far."""
        return len(self._text_to_id)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, text: object) -> bool:
        return text in self._text_to_id

    def text_to_id(self) -> Mapping[str, int]:
        """Read-only snapshot of the text -> id direction."""
        with self._lock:
            return MappingProxyType(dict(self._text_to_id))

    def id_to_text(self) -> Mapping[int, str]:
        """Read-only snapshot of the id -> text direction."""
        with self._lock:
            return MappingProxyType(dict(self._id_to_text))
