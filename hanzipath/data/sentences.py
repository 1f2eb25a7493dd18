"""
Sentence storage and the unit -> sentence inverted index.

Sentences are tokenized one codepoint at a time. Codepoints with no id in the
mapper become UNRECOGNIZED_ID and are never indexed.
"""

from typing import Iterable, Optional, Sequence

from pyroaring import BitMap, FrozenBitMap

from hanzipath.errors import InconsistentStateError

from .id_mapper import IdMapper


# Token for punctuation, latin letters and anything else the mapper never saw
UNRECOGNIZED_ID = -1

_EMPTY = FrozenBitMap()


def tokenize(text: str, mapper: IdMapper) -> list[int]:
    """
    Map each codepoint of text to its unit id.

    Lookup only: tokenizing never allocates ids, so sentence loading cannot
    grow the vocabulary.
    """
    tokens = []
    for char in text:
        unit_id = mapper.get_id(char)
        tokens.append(UNRECOGNIZED_ID if unit_id is None else unit_id)
    return tokens


class SentenceStore:
    """Append-only sentence storage with sequential ids starting at 0."""

    def __init__(self):
        self._texts: list[str] = []
        self._tokens: list[tuple[int, ...]] = []
        self._frozen = False

    def add_sentence(self, text: str, tokens: Iterable[int]) -> int:
        """Append a sentence and return its id."""
        if self._frozen:
            raise InconsistentStateError("SentenceStore is frozen; cannot add sentences")
        sentence_id = len(self._texts)
        self._texts.append(text)
        self._tokens.append(tuple(tokens))
        return sentence_id

    def text(self, sentence_id: int) -> Optional[str]:
        """Original text, or None for an unknown id."""
        if 0 <= sentence_id < len(self._texts):
            return self._texts[sentence_id]
        return None

    def tokens(self, sentence_id: int) -> Optional[Sequence[int]]:
        """Token ids (immutable tuple), or None for an unknown id."""
        if 0 <= sentence_id < len(self._tokens):
            return self._tokens[sentence_id]
        return None

    def freeze(self) -> None:
        """Seal the store; later add_sentence calls raise InconsistentStateError."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def size(self) -> int:
        return len(self._texts)

    def __len__(self) -> int:
        return self.size()


class InvertedIndex:
    """
    Unit id -> roaring bitmap of the sentence ids containing it.

    Writable while the corpus is being built; freeze() swaps every bitmap for
    a FrozenBitMap so lookups can hand out the stored set itself.
    """

    def __init__(self):
        self._unit_to_sentences: dict[int, BitMap | FrozenBitMap] = {}
        self._frozen = False

    def add_entry(self, unit_id: int, sentence_id: int) -> None:
        """Record that sentence_id contains unit_id. Re-adding is a no-op."""
        if self._frozen:
            raise InconsistentStateError("InvertedIndex is frozen; cannot add entries")
        bitmap = self._unit_to_sentences.get(unit_id)
        if bitmap is None:
            bitmap = BitMap()
            self._unit_to_sentences[unit_id] = bitmap
        bitmap.add(sentence_id)

    def index_sentence(self, sentence_id: int, tokens: Iterable[int]) -> None:
        """Add every recognized token of a sentence to the index."""
        for unit_id in tokens:
            if unit_id != UNRECOGNIZED_ID:
                self.add_entry(unit_id, sentence_id)

    def sentences_containing(self, unit_id: int) -> FrozenBitMap:
        """Sentence ids containing unit_id; empty (never None) when unseen."""
        bitmap = self._unit_to_sentences.get(unit_id)
        if bitmap is None:
            return _EMPTY
        if isinstance(bitmap, FrozenBitMap):
            return bitmap
        return FrozenBitMap(bitmap)

    def freeze(self) -> None:
        """Seal the index; later add_entry calls raise InconsistentStateError."""
        if self._frozen:
            return
        self._unit_to_sentences = {
            unit_id: FrozenBitMap(bitmap)
            for unit_id, bitmap in self._unit_to_sentences.items()
        }
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def size(self) -> int:
        """Number of distinct units indexed."""
        return len(self._unit_to_sentences)
