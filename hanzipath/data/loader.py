"""
DataLoader - Parse dictionary, frequency, decomposition and sentence files
into a StaticCorpus.

Sources (looked up in the data directory under any of the listed names):
  - CC-CEDICT dictionary:   cedict_ts.u8, cedict.txt
  - SUBTLEX frequency list: subtlex.txt, frequency.txt
  - IDS decompositions:     ids.txt, ids-ucs.txt
  - Tatoeba sentences:      sentences.tsv, sentences.txt, tatoeba.tsv (optional)

The three character-level files can be parsed concurrently since they only
share the thread-safe IdMapper. Sentences are parsed last because their
tokenizer only looks ids up and never allocates them.

Note: with parallel=True the id assigned to a character depends on thread
scheduling, so ids are only stable within one process. Persisted learner
state stores ids, so the default is sequential loading.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from .corpus import CorpusBuilder, StaticCorpus
from .id_mapper import IdMapper

logger = logging.getLogger(__name__)

CEDICT_FILENAMES = ("cedict_ts.u8", "cedict.txt")
FREQUENCY_FILENAMES = ("subtlex.txt", "frequency.txt")
IDS_FILENAMES = ("ids.txt", "ids-ucs.txt")
SENTENCE_FILENAMES = ("sentences.tsv", "sentences.txt", "tatoeba.tsv")

# Ideographic Description Characters (⿰, ⿱, ...) describe layout, not components
IDC_START = 0x2FF0
IDC_END = 0x2FFF

MANDARIN_LANG_CODE = "cmn"
MIN_SENTENCE_LENGTH = 2
MAX_SENTENCE_LENGTH = 25


# -----------------------------------------------------------------------------
# CC-CEDICT
# -----------------------------------------------------------------------------

def parse_cedict_line(line: str) -> Optional[tuple[str, str, str]]:
    """
    Split a CC-CEDICT line into (traditional, simplified, definition).

    Format: 林 林 [lin2] /forest/grove/

    Returns None for lines that do not match the format.
    """
    pinyin_start = line.find("[")
    if pinyin_start == -1:
        return None

    headwords = line[:pinyin_start].strip().split(" ", 1)
    if len(headwords) != 2:
        return None
    traditional, simplified = headwords[0].strip(), headwords[1].strip()

    pinyin_end = line.find("]", pinyin_start)
    if pinyin_end == -1 or pinyin_end + 1 >= len(line):
        return None

    definition = line[pinyin_end + 1:].strip()
    return traditional, simplified, definition


def parse_cedict(path: Path, mapper: IdMapper) -> dict[int, str]:
    """
    Parse a CC-CEDICT file, keeping single-character headwords only.

    Both the simplified and (when different) traditional form get the gloss.

    Args:
        path: Path to the dictionary file
        mapper: Shared id mapper

    Returns:
        Dict of unit id -> definition string
    """
    logger.info(f"Parsing CEDICT file: {path}")
    definitions: dict[int, str] = {}
    line_count = 0

    with open(path, "r", encoding="utf-8") as f:
        for line_count, line in enumerate(f, start=1):
            line = line.rstrip("\n")
            if line.startswith("#") or not line.strip():
                continue

            parsed = parse_cedict_line(line)
            if parsed is None:
                continue
            traditional, simplified, definition = parsed

            if len(simplified) == 1:
                definitions[mapper.get_or_create_id(simplified)] = definition
            if len(traditional) == 1 and traditional != simplified:
                definitions[mapper.get_or_create_id(traditional)] = definition

    logger.info(f"Parsed {len(definitions)} definitions from {line_count} lines")
    return definitions


# -----------------------------------------------------------------------------
# SUBTLEX frequencies
# -----------------------------------------------------------------------------

def _split_frequency_line(line: str) -> list[str]:
    if "\t" in line:
        return line.split("\t")
    if "," in line:
        return line.split(",")
    return line.split()


def _looks_like_header(parts: list[str]) -> bool:
    if len(parts) < 2:
        return False
    try:
        int(parts[1].strip())
        return False
    except ValueError:
        return True


def parse_subtlex(path: Path, mapper: IdMapper) -> dict[int, int]:
    """
    Parse a character frequency list (char<TAB>count).

    Comma and whitespace separated files are accepted too. A first line whose
    second column is not an integer is treated as a header.

    Returns:
        Dict of unit id -> frequency
    """
    logger.info(f"Parsing frequency file: {path}")
    frequencies: dict[int, int] = {}
    line_count = 0
    first_line = True

    with open(path, "r", encoding="utf-8") as f:
        for line_count, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue

            parts = _split_frequency_line(line)
            if first_line:
                first_line = False
                if _looks_like_header(parts):
                    continue

            if len(parts) < 2:
                continue
            character = parts[0].strip()
            if len(character) != 1:
                continue

            try:
                frequency = int(parts[1].strip())
            except ValueError:
                logger.warning(f"Skipping line {line_count}: invalid frequency {parts[1]!r}")
                continue
            if frequency < 0:
                logger.warning(f"Skipping line {line_count}: negative frequency {frequency}")
                continue

            frequencies[mapper.get_or_create_id(character)] = frequency

    logger.info(f"Parsed {len(frequencies)} frequency entries from {line_count} lines")
    return frequencies


# -----------------------------------------------------------------------------
# IDS decompositions
# -----------------------------------------------------------------------------

def extract_components(ids: str) -> list[str]:
    """
    Components of an IDS string as a de-duplicated bag, operators removed.

    Example:
        >>> extract_components("⿱木林")
        ['木', '林']
    """
    components = [c for c in ids if not (IDC_START <= ord(c) <= IDC_END)]
    return list(dict.fromkeys(components))


def parse_ids(path: Path, mapper: IdMapper) -> dict[int, list[int]]:
    """
    Parse an IDS file (U+6797<TAB>林<TAB>⿰木木) into decompositions.

    An atomic character usually lists itself as its own IDS; such
    self-references are passed through unchanged.

    Returns:
        Dict of compound id -> component ids
    """
    logger.info(f"Parsing IDS file: {path}")
    decompositions: dict[int, list[int]] = {}
    line_count = 0

    with open(path, "r", encoding="utf-8") as f:
        for line_count, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            parts = line.split()
            if len(parts) < 3:
                continue
            character, ids = parts[1], parts[2]
            if len(character) != 1:
                continue

            components = extract_components(ids)
            if not components:
                continue

            compound_id = mapper.get_or_create_id(character)
            decompositions[compound_id] = [mapper.get_or_create_id(c) for c in components]

    logger.info(f"Parsed {len(decompositions)} IDS entries from {line_count} lines")
    return decompositions


# -----------------------------------------------------------------------------
# Tatoeba sentences
# -----------------------------------------------------------------------------

def parse_sentence_line(line: str) -> Optional[tuple[str, str, str]]:
    """Split a sentence row into (source_id, lang, text); tab first, then comma."""
    parts = line.split("\t")
    if len(parts) != 3:
        parts = line.split(",", 2)
    if len(parts) != 3:
        return None
    return parts[0].strip(), parts[1].strip(), parts[2].strip()


def parse_sentences(path: Path, builder: CorpusBuilder) -> int:
    """
    Add Mandarin sentences of 2-25 codepoints to the builder.

    Returns:
        Number of sentences accepted
    """
    logger.info(f"Parsing sentence file: {path}")
    accepted = 0
    filtered_by_lang = 0
    filtered_by_length = 0
    line_count = 0

    with open(path, "r", encoding="utf-8") as f:
        for line_count, line in enumerate(f, start=1):
            line = line.rstrip("\n")
            if not line.strip():
                continue

            parsed = parse_sentence_line(line)
            if parsed is None:
                continue
            _, lang, text = parsed

            if lang != MANDARIN_LANG_CODE:
                filtered_by_lang += 1
                continue
            if not MIN_SENTENCE_LENGTH <= len(text) <= MAX_SENTENCE_LENGTH:
                filtered_by_length += 1
                continue

            builder.add_sentence(text)
            accepted += 1

    logger.info(f"Parsed {accepted} sentences from {line_count} lines")
    logger.info(f"  Filtered by language: {filtered_by_lang}")
    logger.info(f"  Filtered by length: {filtered_by_length}")
    return accepted


# -----------------------------------------------------------------------------
# Loader
# -----------------------------------------------------------------------------

def find_file(directory: Path, names: tuple[str, ...]) -> Optional[Path]:
    """First existing regular file among names, or None."""
    for name in names:
        path = directory / name
        if path.is_file():
            return path
    return None


class DataLoader:
    """
    Load every source file in a data directory into a StaticCorpus.

    Missing character-level files are logged and skipped; the sentence file is
    optional. A missing data directory is an error.
    """

    def __init__(self, data_dir: str | Path, parallel: bool = False):
        """
        Args:
            data_dir: Directory holding the source files
            parallel: Parse dictionary, frequency and IDS files concurrently
        """
        self.data_dir = Path(data_dir)
        self.parallel = parallel

    def load(self) -> StaticCorpus:
        """Parse all sources and return the sealed corpus."""
        logger.info(f"Loading data from directory: {self.data_dir}")
        if not self.data_dir.is_dir():
            raise FileNotFoundError(f"Data directory does not exist: {self.data_dir}")

        mapper = IdMapper()
        builder = CorpusBuilder(mapper)

        cedict_path = find_file(self.data_dir, CEDICT_FILENAMES)
        frequency_path = find_file(self.data_dir, FREQUENCY_FILENAMES)
        ids_path = find_file(self.data_dir, IDS_FILENAMES)

        for label, path in (("CEDICT", cedict_path), ("Frequency", frequency_path), ("IDS", ids_path)):
            if path is None:
                logger.warning(f"{label} file not found in {self.data_dir}")

        jobs = [
            (parse_cedict, cedict_path),
            (parse_subtlex, frequency_path),
            (parse_ids, ids_path),
        ]
        if self.parallel:
            with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
                futures = [
                    executor.submit(parser, path, mapper) if path else None
                    for parser, path in jobs
                ]
                definitions, frequencies, decompositions = [
                    future.result() if future else {} for future in futures
                ]
        else:
            definitions, frequencies, decompositions = [
                parser(path, mapper) if path else {} for parser, path in jobs
            ]

        for unit_id, gloss in definitions.items():
            builder.add_definition(unit_id, gloss)
        for unit_id, frequency in frequencies.items():
            builder.set_frequency(unit_id, frequency)
        for compound_id, component_ids in decompositions.items():
            builder.add_decomposition(compound_id, component_ids)

        sentence_path = find_file(self.data_dir, SENTENCE_FILENAMES)
        if sentence_path:
            parse_sentences(sentence_path, builder)
        else:
            logger.info(f"Sentence file not found in {self.data_dir} (optional)")

        corpus = builder.build()
        stats = corpus.stats()
        logger.info(f"Data loading complete. Total unique characters: {stats['units']}")
        logger.info(f"  Definitions: {stats['definitions']}")
        logger.info(f"  Frequencies: {stats['frequencies']}")
        logger.info(f"  Component relationships: {stats['components']}")
        logger.info(f"  Sentences: {stats['sentences']}")
        return corpus


def load_corpus(data_dir: str | Path, parallel: bool = False) -> StaticCorpus:
    """Shortcut for DataLoader(data_dir, parallel).load()."""
    return DataLoader(data_dir, parallel=parallel).load()
