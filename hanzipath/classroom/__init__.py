"""
HanziPath Classroom - Runtime components a learning session works with.

This module provides:
- GraphAccessor: read-only component graph
- LearnerState: known characters and review counters
- RecommendationEngine: what to learn next
- SentenceFilter: i+1 example sentences
- ProgressStore: learner state on disk
- TrainingSession / QuizSession: controller-facing workflows
"""

from .graph import GraphAccessor

from .learner import (
    LearnerState,
    ReviewHistory,
)

from .recommender import (
    RecommendationEngine,
    RecommendationMode,
    NO_RECOMMENDATION,
)

from .sentence_filter import (
    SentenceFilter,
    SentenceMatch,
    DEFAULT_THRESHOLD,
    validate_threshold,
)

from .progress import (
    ProgressStore,
    to_snapshot,
    from_snapshot,
    export_known_characters,
    import_known_characters,
)

from .session import (
    CharacterCandidate,
    TrainingSession,
    QuizSession,
)

__all__ = [
    # Graph
    "GraphAccessor",
    # Learner
    "LearnerState",
    "ReviewHistory",
    # Recommendation
    "RecommendationEngine",
    "RecommendationMode",
    "NO_RECOMMENDATION",
    # Sentences
    "SentenceFilter",
    "SentenceMatch",
    "DEFAULT_THRESHOLD",
    "validate_threshold",
    # Progress
    "ProgressStore",
    "to_snapshot",
    "from_snapshot",
    "export_known_characters",
    "import_known_characters",
    # Sessions
    "CharacterCandidate",
    "TrainingSession",
    "QuizSession",
]
