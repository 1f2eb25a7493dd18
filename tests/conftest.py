"""Shared fixtures: small hand-built corpora."""

import pytest

from hanzipath.classroom import GraphAccessor, LearnerState
from hanzipath.data import CorpusBuilder, IdMapper

# 木 (tree) -> 林 (grove) -> 森 (forest)
MU, LIN, SEN = 0, 1, 2


@pytest.fixture
def forest_corpus():
    """木=0, 林=1, 森=2 with 林 = 木 and 森 = 木 + 林."""
    builder = CorpusBuilder()
    mapper = builder.mapper
    assert mapper.get_or_create_id("木") == MU
    assert mapper.get_or_create_id("林") == LIN
    assert mapper.get_or_create_id("森") == SEN

    builder.add_decomposition(LIN, [MU])
    builder.add_decomposition(SEN, [MU, LIN])
    builder.set_frequency(MU, 50000)
    builder.set_frequency(LIN, 30000)
    builder.set_frequency(SEN, 10000)
    builder.add_definition(MU, "/tree/wood/")
    builder.add_definition(LIN, "/woods/forest/grove/")
    builder.add_definition(SEN, "/forest/dense/")
    builder.add_sentence("木林")
    builder.add_sentence("森林。")
    return builder.build()


@pytest.fixture
def forest_graph(forest_corpus):
    return GraphAccessor(forest_corpus)


@pytest.fixture
def abc_corpus():
    """Letters with X=0, A=1, B=2, C=3, D=4 for sentence filter tests."""
    mapper = IdMapper()
    for text in "XABCD":
        mapper.get_or_create_id(text)
    builder = CorpusBuilder(mapper)
    builder.add_sentence("ABC")    # 0: [1, 2, 3]
    builder.add_sentence("ABCD")   # 1: [1, 2, 3, 4]
    builder.add_sentence("CA")     # 2: [3, 1]
    builder.add_sentence("AC!")    # 3: [1, 3, -1]
    builder.add_sentence("BA")     # 4: [2, 1]
    return builder.build()


@pytest.fixture
def empty_state():
    return LearnerState()
