"""
StaticCorpus - Immutable snapshot of everything the learner queries run against.

Bundles:
- Unit id mapper and dictionary definitions
- Frequency table
- Component graph (component -> compounds, compound -> components)
- Sentence store and inverted index

A corpus is produced exactly once by CorpusBuilder.build() and then shared by
reference. The builder and its IdMapper are sealed after building; the corpus
itself has no mutators, stores adjacency as tuples and exposes maps through MappingProxyType.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from pyroaring import FrozenBitMap

from hanzipath.errors import InconsistentStateError, InvalidArgumentError

from .id_mapper import IdMapper
from .sentences import InvertedIndex, SentenceStore, tokenize


@dataclass(frozen=True)
class StaticCorpus:
    """Read-only corpus snapshot. Build it with CorpusBuilder."""
    mapper: IdMapper
    definitions: Mapping[int, str]
    frequencies: Mapping[int, int]
    component_to_compounds: Mapping[int, tuple[int, ...]]
    compound_to_components: Mapping[int, tuple[int, ...]]
    sentences: SentenceStore
    index: InvertedIndex

    # -------------------------------------------------------------------------
    # Units
    # -------------------------------------------------------------------------

    def text_of(self, unit_id: int) -> Optional[str]:
        return self.mapper.get_text(unit_id)

    def id_of(self, text: str) -> Optional[int]:
        return self.mapper.get_id(text)

    def definition(self, unit_id: int) -> Optional[str]:
        return self.definitions.get(unit_id)

    def frequency(self, unit_id: int) -> int:
        """Usage frequency; 0 when the unit has no entry."""
        return self.frequencies.get(unit_id, 0)

    def most_frequent(self) -> int:
        """
        Highest-frequency unit id, lowest id on ties.

        Returns -1 when the frequency table is empty.
        """
        best_id, best_freq = -1, -1
        for unit_id, freq in self.frequencies.items():
            if freq > best_freq or (freq == best_freq and unit_id < best_id):
                best_id, best_freq = unit_id, freq
        return best_id

    # -------------------------------------------------------------------------
    # Component graph
    # -------------------------------------------------------------------------

    def compounds_containing(self, component_id: int) -> Optional[tuple[int, ...]]:
        return self.component_to_compounds.get(component_id)

    def components_of(self, compound_id: int) -> Optional[tuple[int, ...]]:
        return self.compound_to_components.get(compound_id)

    def check_symmetry(self) -> None:
        """
        Verify every edge appears in both adjacency maps.

        Raises:
            InconsistentStateError: On the first one-sided edge found
        """
        for compound_id, components in self.compound_to_components.items():
            for component_id in components:
                if compound_id not in self.component_to_compounds.get(component_id, ()):
                    raise InconsistentStateError(
                        f"Edge {component_id} -> {compound_id} missing from component index"
                    )
        for component_id, compounds in self.component_to_compounds.items():
            for compound_id in compounds:
                if component_id not in self.compound_to_components.get(compound_id, ()):
                    raise InconsistentStateError(
                        f"Edge {compound_id} -> {component_id} missing from compound index"
                    )

    # -------------------------------------------------------------------------
    # Sentences
    # -------------------------------------------------------------------------

    def sentence_text(self, sentence_id: int) -> Optional[str]:
        return self.sentences.text(sentence_id)

    def sentence_tokens(self, sentence_id: int) -> Optional[Sequence[int]]:
        return self.sentences.tokens(sentence_id)

    def sentences_containing(self, unit_id: int) -> FrozenBitMap:
        return self.index.sentences_containing(unit_id)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def stats(self) -> dict:
        """Sizes of each part, for logging and the CLI."""
        return {
            "units": self.mapper.size(),
            "definitions": len(self.definitions),
            "frequencies": len(self.frequencies),
            "components": len(self.component_to_compounds),
            "compounds": len(self.compound_to_components),
            "sentences": self.sentences.size(),
            "indexed_units": self.index.size(),
        }


class CorpusBuilder:
    """
    Mutable accumulator that produces a StaticCorpus once.

    Decompositions are stored as ordered, de-duplicated component lists and
    the reverse edges are maintained at the same time, so both adjacency maps
    stay symmetric by construction.
    """

    def __init__(self, mapper: Optional[IdMapper] = None):
        self.mapper = mapper if mapper is not None else IdMapper()
        self._definitions: dict[int, str] = {}
        self._frequencies: dict[int, int] = {}
        # dict-as-ordered-set keeps first-seen order while de-duplicating
        self._component_to_compounds: dict[int, dict[int, None]] = {}
        self._compound_to_components: dict[int, dict[int, None]] = {}
        self._sentences = SentenceStore()
        self._index = InvertedIndex()
        self._built = False

    def _check_open(self):
        if self._built:
            raise InconsistentStateError("CorpusBuilder already built; corpus is sealed")

    def add_definition(self, unit_id: int, gloss: str) -> None:
        self._check_open()
        self._definitions[unit_id] = gloss

    def set_frequency(self, unit_id: int, frequency: int) -> None:
        self._check_open()
        if frequency < 0:
            raise InvalidArgumentError(f"Frequency must be non-negative, got {frequency}")
        self._frequencies[unit_id] = frequency

    def add_decomposition(self, compound_id: int, component_ids: Iterable[int]) -> None:
        """
        Record that compound_id is made of component_ids.

        Repeated calls for the same compound merge into one component set.
        Self-references are kept as given.
        """
        self._check_open()
        components = list(dict.fromkeys(component_ids))
        if not components:
            return
        forward = self._compound_to_components.setdefault(compound_id, {})
        for component_id in components:
            forward[component_id] = None
            self._component_to_compounds.setdefault(component_id, {})[compound_id] = None

    def add_sentence(self, text: str) -> int:
        """Tokenize, store and index a sentence; returns its id."""
        self._check_open()
        tokens = tokenize(text, self.mapper)
        sentence_id = self._sentences.add_sentence(text, tokens)
        self._index.index_sentence(sentence_id, tokens)
        return sentence_id

    def build(self) -> StaticCorpus:
        """Seal the builder and return the immutable corpus."""
        self._check_open()
        self._built = True
        self.mapper.seal()
        self._sentences.freeze()
        self._index.freeze()
        return StaticCorpus(
            mapper=self.mapper,
            definitions=MappingProxyType(dict(self._definitions)),
            frequencies=MappingProxyType(dict(self._frequencies)),
            component_to_compounds=MappingProxyType({
                cid: tuple(compounds)
                for cid, compounds in self._component_to_compounds.items()
            }),
            compound_to_components=MappingProxyType({
                cid: tuple(components)
                for cid, components in self._compound_to_components.items()
            }),
            sentences=self._sentences,
            index=self._index,
        )
