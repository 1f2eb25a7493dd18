"""
HanziPath Data - The static, load-once side of the system.

This module provides:
- IdMapper: stable text <-> integer id mapping
- SentenceStore / InvertedIndex: sentence corpus and unit -> sentence index
- StaticCorpus / CorpusBuilder: the sealed corpus snapshot
- DataLoader: parse source files into a StaticCorpus
"""

from .id_mapper import UNIT_ID_LIMIT, IdMapper

from .sentences import (
    UNRECOGNIZED_ID,
    SentenceStore,
    InvertedIndex,
    tokenize,
)

from .corpus import (
    StaticCorpus,
    CorpusBuilder,
)

from .loader import (
    DataLoader,
    load_corpus,
    parse_cedict,
    parse_subtlex,
    parse_ids,
    parse_sentences,
    extract_components,
)

__all__ = [
    # Ids
    "IdMapper",
    "UNIT_ID_LIMIT",
    # Sentences
    "UNRECOGNIZED_ID",
    "SentenceStore",
    "InvertedIndex",
    "tokenize",
    # Corpus
    "StaticCorpus",
    "CorpusBuilder",
    # Loader
    "DataLoader",
    "load_corpus",
    "parse_cedict",
    "parse_subtlex",
    "parse_ids",
    "parse_sentences",
    "extract_components",
]
