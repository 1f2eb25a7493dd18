"""
hanzipath - Command line front end.

Loads the corpus from the data directory and the learner state from the
progress file, then runs one command.

Usage:
  hanzipath recommend -n 10
  hanzipath recommend --mode strict
  hanzipath sentences 林 --threshold 0.8 --limit 3
  hanzipath learn 木 林
  hanzipath stats
  hanzipath check
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from hanzipath.classroom import (
    GraphAccessor,
    LearnerState,
    ProgressStore,
    RecommendationEngine,
    SentenceFilter,
)
from hanzipath.data import StaticCorpus, load_corpus
from hanzipath.errors import InconsistentStateError, InvalidArgumentError
from hanzipath.schemas import Settings
from hanzipath.utils import load_settings

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_recommend(args, settings: Settings, corpus: StaticCorpus, state: LearnerState) -> int:
    engine = RecommendationEngine(GraphAccessor(corpus), args.mode or settings.mode)
    n = settings.top_n if args.n is None else args.n
    recommendations = engine.recommend_top_n(state, n)
    if not recommendations:
        print("No recommendations: learn a character first (hanzipath learn <char>)")
        return 0

    print(f"Top {len(recommendations)} ({engine.mode.value}):")
    for rank, unit_id in enumerate(recommendations, start=1):
        text = corpus.text_of(unit_id)
        meaning = corpus.definition(unit_id) or ""
        print(f"  {rank:2d}. {text}  freq={corpus.frequency(unit_id):<8d} {meaning}")
    return 0


def cmd_sentences(args, settings: Settings, corpus: StaticCorpus, state: LearnerState) -> int:
    target_id = corpus.id_of(args.character)
    if target_id is None:
        print(f"ERROR: Unknown character: {args.character}")
        return 1

    sentence_filter = SentenceFilter.from_corpus(corpus, settings.sentence_threshold)
    matches = sentence_filter.find_examples(target_id, state, limit=args.limit, threshold=args.threshold)
    if not matches:
        print(f"No i+1 sentences for {args.character}")
        return 0

    for match in matches:
        print(f"  [{match.sentence_id}] {match.text}  ({match.known_ratio:.0%} known)")
    return 0


def cmd_learn(args, settings: Settings, corpus: StaticCorpus, state: LearnerState) -> int:
    unknown = [c for c in args.characters if corpus.id_of(c) is None]
    if unknown:
        print(f"ERROR: Unknown characters: {' '.join(unknown)}")
        return 1

    for character in args.characters:
        state.mark_known(corpus.id_of(character))
    ProgressStore(settings.state_path).save(state)
    print(f"Marked {len(args.characters)} known ({state.known_count()} total)")
    return 0


def cmd_stats(args, settings: Settings, corpus: StaticCorpus, state: LearnerState) -> int:
    reviewed = state.reviewed_ids()
    views = successes = 0
    for unit_id in reviewed:
        record = state.get_review_history(unit_id)
        views += record.views
        successes += record.successes

    print(f"Known characters: {state.known_count()}")
    print(f"Reviewed characters: {len(reviewed)}")
    print(f"Reviews: {views} ({successes} successful)")
    if views:
        print(f"Success rate: {successes / views:.1%}")
    return 0


def cmd_check(args, settings: Settings, corpus: StaticCorpus, state: LearnerState) -> int:
    for key, value in corpus.stats().items():
        print(f"  {key}: {value}")

    try:
        corpus.check_symmetry()
        print("Component graph: symmetric")
    except InconsistentStateError as e:
        print(f"Component graph: INCONSISTENT ({e})")
        return 1

    report = GraphAccessor(corpus).decomposition_cycles()
    print(f"Self-referential decompositions: {len(report['self_references'])}")
    print(f"Cyclic decomposition groups: {len(report['cycles'])}")
    return 0


COMMANDS = {
    "recommend": cmd_recommend,
    "sentences": cmd_sentences,
    "learn": cmd_learn,
    "stats": cmd_stats,
    "check": cmd_check,
}


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hanzipath",
        description="Recommend the next Chinese character to learn and find i+1 example sentences.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hanzipath --data-dir data recommend -n 10
  hanzipath sentences 林 --threshold 0.8
  hanzipath learn 木 林
        """,
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file (default: hanzipath.yaml if present)")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory with source files")
    parser.add_argument("--state", type=Path, default=None, help="Learner state JSON file")
    parser.add_argument("--parallel", action="store_true", help="Parse character files concurrently")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend = subparsers.add_parser("recommend", help="Show the best characters to learn next")
    recommend.add_argument("-n", type=int, default=None, help="Number of recommendations (default: top_n setting)")
    recommend.add_argument("--mode", choices=["strict", "lenient"], default=None, help="Override recommendation mode")

    sentences = subparsers.add_parser("sentences", help="Find i+1 sentences for a character")
    sentences.add_argument("character", help="Target character")
    sentences.add_argument("--threshold", type=float, default=None, help="Known ratio in (0, 1]")
    sentences.add_argument("--limit", type=int, default=5, help="Maximum sentences to show (default: 5)")

    learn = subparsers.add_parser("learn", help="Mark characters as known and save")
    learn.add_argument("characters", nargs="+", help="Characters to mark known")

    subparsers.add_parser("stats", help="Learner statistics")
    subparsers.add_parser("check", help="Corpus diagnostics")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.state is not None:
        overrides["state_path"] = args.state
    if args.parallel:
        overrides["parallel_loading"] = True
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        corpus = load_corpus(settings.data_dir, parallel=settings.parallel_loading)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    state = ProgressStore(settings.state_path).load()
    try:
        return COMMANDS[args.command](args, settings, corpus, state)
    except InvalidArgumentError as e:
        print(f"ERROR: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
