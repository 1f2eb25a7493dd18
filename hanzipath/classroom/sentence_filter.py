"""
SentenceFilter - Find "i+1" example sentences for a target character.

A sentence qualifies when the share of its recognized tokens that the learner
knows (counting the target itself as known) reaches the threshold. Accepted
sentences are ranked shortest first, then by sentence id.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from hanzipath.data import UNRECOGNIZED_ID, InvertedIndex, SentenceStore, StaticCorpus
from hanzipath.errors import InvalidArgumentError

from .learner import LearnerState

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.90


def validate_threshold(threshold: float) -> float:
    """Threshold must lie in (0, 1]."""
    if threshold is None or not 0.0 < threshold <= 1.0:
        raise InvalidArgumentError(f"Threshold must be in (0, 1], got {threshold}")
    return threshold


@dataclass
class SentenceMatch:
    """An accepted sentence with its display text and known ratio."""
    sentence_id: int
    text: str
    known_ratio: float


class SentenceFilter:
    """Threshold-ratio sentence selection over the inverted index."""

    def __init__(
        self,
        store: SentenceStore,
        index: InvertedIndex,
        default_threshold: float = DEFAULT_THRESHOLD,
    ):
        """
        Args:
            store: Sentence texts and tokens
            index: Unit -> sentence index
            default_threshold: Used when a query passes no threshold

        Raises:
            InvalidArgumentError: On a missing collaborator or bad threshold
        """
        if store is None:
            raise InvalidArgumentError("SentenceStore cannot be None")
        if index is None:
            raise InvalidArgumentError("InvertedIndex cannot be None")
        self.store = store
        self.index = index
        self.default_threshold = validate_threshold(default_threshold)

    @classmethod
    def from_corpus(cls, corpus: StaticCorpus, default_threshold: float = DEFAULT_THRESHOLD) -> "SentenceFilter":
        if corpus is None:
            raise InvalidArgumentError("StaticCorpus cannot be None")
        return cls(corpus.sentences, corpus.index, default_threshold)

    def _known_ratio(self, tokens, target_id: int, state: LearnerState) -> Optional[float]:
        """Known-or-target share of recognized tokens; None if none are recognized."""
        total = 0
        known = 0
        for unit_id in tokens:
            if unit_id == UNRECOGNIZED_ID:
                continue
            total += 1
            if unit_id == target_id or state.is_known(unit_id):
                known += 1
        if total == 0:
            return None
        return known / total

    def _accepted(self, target_id: int, state: LearnerState, threshold: float) -> list[tuple[int, int, float]]:
        """(token length, sentence id, ratio) for every accepted sentence, ranked."""
        if state is None:
            raise InvalidArgumentError("LearnerState cannot be None")
        threshold = validate_threshold(self.default_threshold if threshold is None else threshold)

        accepted = []
        for sentence_id in self.index.sentences_containing(target_id):
            tokens = self.store.tokens(sentence_id)
            if tokens is None:
                continue
            ratio = self._known_ratio(tokens, target_id, state)
            if ratio is not None and ratio >= threshold:
                accepted.append((len(tokens), sentence_id, ratio))

        accepted.sort(key=lambda item: (item[0], item[1]))
        logger.debug(f"Target {target_id}: {len(accepted)} sentences at threshold {threshold}")
        return accepted

    def find_i_plus_one_sentences(
        self,
        target_id: int,
        state: LearnerState,
        threshold: Optional[float] = None,
    ) -> list[int]:
        """
        Sentence ids suitable for introducing target_id.

        Args:
            target_id: Unit the learner is about to learn
            state: Learner state supplying the known-set
            threshold: Minimum known ratio in (0, 1]; default_threshold if None

        Returns:
            Sentence ids, shorter sentences first, ties by ascending id.
            Empty for a target that appears in no sentence.
        """
        return [sentence_id for _, sentence_id, _ in self._accepted(target_id, state, threshold)]

    def find_examples(
        self,
        target_id: int,
        state: LearnerState,
        limit: int = 5,
        threshold: Optional[float] = None,
    ) -> list[SentenceMatch]:
        """Top accepted sentences with their text, for display."""
        if limit <= 0:
            raise InvalidArgumentError("limit must be positive")
        return [
            SentenceMatch(sentence_id=sentence_id, text=self.store.text(sentence_id), known_ratio=ratio)
            for _, sentence_id, ratio in self._accepted(target_id, state, threshold)[:limit]
        ]
