"""
RecommendationEngine tests.

Covers both modes on the 木/林/森 chain, ranking, determinism and argument
checking.
"""

import random

import pytest

from hanzipath.classroom import (
    NO_RECOMMENDATION,
    GraphAccessor,
    LearnerState,
    RecommendationEngine,
    RecommendationMode,
)
from hanzipath.data import CorpusBuilder
from hanzipath.errors import InvalidArgumentError

from conftest import LIN, MU, SEN


def _random_corpus(seed: int, units: int = 60):
    """Random acyclic-ish graph with plenty of frequency ties."""
    rng = random.Random(seed)
    builder = CorpusBuilder()
    for unit_id in range(units):
        builder.set_frequency(unit_id, rng.choice([0, 10, 10, 50, 100, 100, 500]))
    for compound_id in range(5, units):
        count = rng.randint(1, 3)
        builder.add_decomposition(compound_id, rng.sample(range(compound_id), count))
    return builder.build()


class TestForestScenarios:
    """Test the 木 -> 林 -> 森 chain."""

    def test_strict_only_mu_known(self, forest_graph):
        state = LearnerState()
        state.mark_known(MU)
        engine = RecommendationEngine(forest_graph, RecommendationMode.STRICT)
        assert engine.recommend_top_n(state, 5) == [LIN]

    def test_strict_mu_and_lin_known(self, forest_graph):
        state = LearnerState()
        state.mark_known(MU)
        state.mark_known(LIN)
        engine = RecommendationEngine(forest_graph, RecommendationMode.STRICT)
        assert engine.recommend_top_n(state, 5) == [SEN]

    def test_lenient_unlocks_sen_early(self, forest_graph):
        state = LearnerState()
        state.mark_known(MU)
        engine = RecommendationEngine(forest_graph, RecommendationMode.LENIENT)
        assert engine.learnable(SEN, state)
        # 林 is more frequent, so it still comes first
        assert engine.recommend_top_n(state, 2) == [LIN, SEN]
        assert engine.recommend_top_n(state, 1) == [LIN]

    def test_strict_sen_not_learnable_with_only_mu(self, forest_graph):
        state = LearnerState()
        state.mark_known(MU)
        engine = RecommendationEngine(forest_graph, RecommendationMode.STRICT)
        assert not engine.learnable(SEN, state)

    def test_nothing_known(self, forest_graph):
        engine = RecommendationEngine(forest_graph)
        assert engine.recommend_top_n(LearnerState(), 3) == []
        assert engine.recommend_next(LearnerState()) == NO_RECOMMENDATION

    def test_everything_known(self, forest_graph):
        state = LearnerState()
        for unit_id in (MU, LIN, SEN):
            state.mark_known(unit_id)
        engine = RecommendationEngine(forest_graph, "strict")
        assert engine.recommend_next(state) == NO_RECOMMENDATION

    def test_recommend_next(self, forest_graph):
        state = LearnerState()
        state.mark_known(MU)
        assert RecommendationEngine(forest_graph).recommend_next(state) == LIN


class TestLearnable:
    """Test the learnability rule itself."""

    def test_unit_without_decomposition_not_learnable(self, forest_graph):
        state = LearnerState()
        state.mark_known(LIN)
        for mode in RecommendationMode:
            assert not RecommendationEngine(forest_graph, mode).learnable(MU, state)

    def test_self_referential_component(self):
        builder = CorpusBuilder()
        builder.add_decomposition(1, [1, 0])
        graph = GraphAccessor(builder.build())
        state = LearnerState()
        state.mark_known(0)
        assert RecommendationEngine(graph, "lenient").learnable(1, state)
        assert not RecommendationEngine(graph, "strict").learnable(1, state)
        assert RecommendationEngine(graph, "lenient").recommend_top_n(state, 5) == [1]


class TestRanking:
    """Test ordering and determinism."""

    def test_frequency_then_id(self):
        builder = CorpusBuilder()
        for compound_id, freq in ((1, 10), (2, 30), (3, 30), (4, 20)):
            builder.add_decomposition(compound_id, [0])
            builder.set_frequency(compound_id, freq)
        engine = RecommendationEngine(GraphAccessor(builder.build()))
        state = LearnerState()
        state.mark_known(0)
        assert engine.recommend_top_n(state, 10) == [2, 3, 4, 1]
        assert engine.recommend_top_n(state, 2) == [2, 3]

    @pytest.mark.parametrize("seed", [1, 7, 42])
    @pytest.mark.parametrize("mode", ["strict", "lenient"])
    def test_random_graph_properties(self, seed, mode):
        corpus = _random_corpus(seed)
        engine = RecommendationEngine(GraphAccessor(corpus), mode)
        rng = random.Random(seed + 1000)
        state = LearnerState()
        for unit_id in rng.sample(range(60), 15):
            state.mark_known(unit_id)

        result = engine.recommend_top_n(state, 20)

        assert len(result) <= 20
        assert len(set(result)) == len(result)
        keys = [(-corpus.frequency(cid), cid) for cid in result]
        assert keys == sorted(keys)
        for compound_id in result:
            assert not state.is_known(compound_id)
            assert engine.learnable(compound_id, state)
        # Same inputs, same answer
        assert engine.recommend_top_n(state, 20) == result

    def test_strict_result_is_subset_of_lenient(self):
        corpus = _random_corpus(3)
        graph = GraphAccessor(corpus)
        state = LearnerState()
        for unit_id in range(0, 60, 3):
            state.mark_known(unit_id)
        strict = RecommendationEngine(graph, "strict").recommend_top_n(state, 100)
        lenient = RecommendationEngine(graph, "lenient").recommend_top_n(state, 100)
        assert set(strict) <= set(lenient)


class TestArguments:
    """Test argument checking."""

    def test_none_graph(self):
        with pytest.raises(InvalidArgumentError):
            RecommendationEngine(None)

    def test_none_mode(self, forest_graph):
        with pytest.raises(InvalidArgumentError):
            RecommendationEngine(forest_graph, None)

    def test_unknown_mode(self, forest_graph):
        with pytest.raises(InvalidArgumentError):
            RecommendationEngine(forest_graph, "relaxed")

    def test_mode_string_coerced(self, forest_graph):
        assert RecommendationEngine(forest_graph, "STRICT").mode is RecommendationMode.STRICT
        assert RecommendationEngine(forest_graph).mode is RecommendationMode.LENIENT

    def test_none_state(self, forest_graph):
        engine = RecommendationEngine(forest_graph)
        with pytest.raises(InvalidArgumentError):
            engine.recommend_top_n(None, 1)

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_n(self, forest_graph, n):
        engine = RecommendationEngine(forest_graph)
        with pytest.raises(InvalidArgumentError):
            engine.recommend_top_n(LearnerState(), n)
