"""
Study sessions - What a controller drives during a learning sitting.

Provides:
- TrainingSession: show the next recommended character, mark it learned
- QuizSession: test a random sample of known characters against their glosses
"""

import random
import re
import time
from dataclasses import dataclass
from typing import Optional

from hanzipath.data import StaticCorpus

from .learner import LearnerState
from .recommender import NO_RECOMMENDATION, RecommendationEngine
from .sentence_filter import SentenceFilter, SentenceMatch

# Quiz answers must appear in the gloss between these delimiters
ANSWER_DELIMITERS = r"[/.;() ]"
MIN_ANSWER_LENGTH = 3
DEFAULT_QUIZ_SIZE = 8


@dataclass
class CharacterCandidate:
    """A character to show the learner."""
    char_id: int
    character: Optional[str]
    meaning: Optional[str]


def make_candidate(corpus: StaticCorpus, char_id: int) -> CharacterCandidate:
    return CharacterCandidate(
        char_id=char_id,
        character=corpus.text_of(char_id),
        meaning=corpus.definition(char_id),
    )


class TrainingSession:
    """
    Learn new characters one at a time.

    Combines RecommendationEngine (what to learn) with LearnerState (what is
    known) and optionally a SentenceFilter for examples.
    """

    def __init__(
        self,
        state: LearnerState,
        engine: RecommendationEngine,
        corpus: StaticCorpus,
        sentence_filter: Optional[SentenceFilter] = None,
    ):
        self.state = state
        self.engine = engine
        self.corpus = corpus
        self.sentence_filter = sentence_filter or SentenceFilter.from_corpus(corpus)
        self.current: Optional[CharacterCandidate] = None

    def next_character(self) -> Optional[CharacterCandidate]:
        """
        Pick the next character to learn.

        Priority:
        1. Top recommendation from the engine
        2. Most frequent character, when nothing is known yet
        3. None (nothing left to recommend)
        """
        char_id = self.engine.recommend_next(self.state)
        if char_id == NO_RECOMMENDATION and self.state.known_count() == 0:
            char_id = self.corpus.most_frequent()

        if char_id == NO_RECOMMENDATION:
            self.current = None
        else:
            self.current = make_candidate(self.corpus, char_id)
        return self.current

    def mark_current_known(self) -> None:
        """Learner confirmed the current character."""
        if self.current is None:
            raise RuntimeError("No current character")
        self.state.mark_known(self.current.char_id)

    def example_sentences(self, limit: int = 5, threshold: Optional[float] = None) -> list[SentenceMatch]:
        """i+1 sentences for the current character (empty without one)."""
        if self.current is None:
            return []
        return self.sentence_filter.find_examples(
            self.current.char_id, self.state, limit=limit, threshold=threshold
        )


class QuizSession:
    """Check known characters by asking for a word of their definition."""

    def __init__(
        self,
        state: LearnerState,
        corpus: StaticCorpus,
        max_size: int = DEFAULT_QUIZ_SIZE,
        rng: Optional[random.Random] = None,
    ):
        self.state = state
        self.corpus = corpus
        self.max_size = max_size
        self.rng = rng or random.Random()
        self._test_set: list[int] = []
        self._index = 0

    @property
    def test_set(self) -> list[int]:
        return list(self._test_set)

    def start_new_test(self) -> list[int]:
        """Sample up to max_size known characters and rewind to the first."""
        known = list(self.state.get_known_snapshot())
        self.rng.shuffle(known)
        self._test_set = known[:self.max_size]
        self._index = 0
        return self.test_set

    def restart(self) -> None:
        self._index = 0

    def current(self) -> Optional[CharacterCandidate]:
        if not self._test_set:
            return None
        return make_candidate(self.corpus, self._test_set[self._index])

    def verify(self, answer: str, now: Optional[int] = None) -> bool:
        """
        Check an answer for the current character and record the review.

        The answer (at least 3 characters, case-insensitive) must appear in
        the definition as a whole word between delimiters such as '/'.
        """
        candidate = self.current()
        if candidate is None:
            return False

        answer = answer.strip()
        success = False
        if len(answer) >= MIN_ANSWER_LENGTH and candidate.meaning:
            pattern = re.compile(
                ANSWER_DELIMITERS + re.escape(answer) + ANSWER_DELIMITERS,
                re.IGNORECASE,
            )
            success = pattern.search(candidate.meaning) is not None

        timestamp = int(time.time()) if now is None else now
        self.state.record_review(candidate.char_id, success, timestamp)
        return success

    def has_next(self) -> bool:
        return self._index < len(self._test_set) - 1

    def next(self) -> None:
        if self.has_next():
            self._index += 1

    def is_last(self) -> bool:
        return self._index == len(self._test_set) - 1

    def correct_answer(self) -> str:
        candidate = self.current()
        if candidate is None or candidate.meaning is None:
            return ""
        return candidate.meaning
