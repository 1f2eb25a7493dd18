"""
RecommendationEngine - Pick the next character to learn.

Candidates are compounds built from characters the learner already knows.
Two modes decide when a compound counts as learnable:
- STRICT: every component is known
- LENIENT: at least one component is known

Ranking is frequency descending, then id ascending, so identical inputs always
give the same order regardless of set iteration order.
"""

import logging
from enum import Enum

from hanzipath.errors import InvalidArgumentError

from .graph import GraphAccessor
from .learner import LearnerState

logger = logging.getLogger(__name__)

# Returned by recommend_next when there is nothing to recommend
NO_RECOMMENDATION = -1


class RecommendationMode(str, Enum):
    """How many components of a compound must be known."""
    STRICT = "strict"     # all components known
    LENIENT = "lenient"   # at least one component known


class RecommendationEngine:
    """Frequency-ranked recommendations over the component graph."""

    def __init__(self, graph: GraphAccessor, mode: RecommendationMode | str = RecommendationMode.LENIENT):
        """
        Args:
            graph: Read-only graph accessor
            mode: RecommendationMode, or its value ("strict" / "lenient")

        Raises:
            InvalidArgumentError: If graph is None or mode is not a valid mode
        """
        if graph is None:
            raise InvalidArgumentError("GraphAccessor cannot be None")
        if mode is None:
            raise InvalidArgumentError("RecommendationMode cannot be None")
        try:
            self.mode = RecommendationMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError:
            raise InvalidArgumentError(f"Unknown recommendation mode: {mode!r}") from None
        self.graph = graph

    def learnable(self, compound_id: int, state: LearnerState) -> bool:
        """
        Check whether a compound qualifies under the current mode.

        A compound with no decomposition is never learnable this way.
        """
        components = self.graph.components_of(compound_id)
        if not components:
            return False

        if self.mode == RecommendationMode.STRICT:
            return all(state.is_known(c) for c in components)
        return any(state.is_known(c) for c in components)

    def recommend_top_n(self, state: LearnerState, n: int) -> list[int]:
        """
        Up to n learnable compound ids, best first.

        Args:
            state: The learner's current state
            n: Maximum number of recommendations (must be positive)

        Returns:
            Compound ids ordered by frequency descending, then id ascending

        Raises:
            InvalidArgumentError: If state is None or n <= 0
        """
        if state is None:
            raise InvalidArgumentError("LearnerState cannot be None")
        if n <= 0:
            raise InvalidArgumentError("n must be positive")

        candidates: set[int] = set()
        for known_id in state.get_known_snapshot():
            compounds = self.graph.compounds_containing(known_id)
            if not compounds:
                continue
            for compound_id in compounds:
                if compound_id in candidates or state.is_known(compound_id):
                    continue
                if self.learnable(compound_id, state):
                    candidates.add(compound_id)

        ranked = sorted(candidates, key=lambda cid: (-self.graph.frequency(cid), cid))
        logger.debug(f"{len(candidates)} candidates in {self.mode.value} mode, returning {min(n, len(ranked))}")
        return ranked[:n]

    def recommend_next(self, state: LearnerState) -> int:
        """Best single recommendation, or NO_RECOMMENDATION (-1)."""
        top = self.recommend_top_n(state, 1)
        return top[0] if top else NO_RECOMMENDATION
