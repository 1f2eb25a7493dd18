"""
ProgressStore tests.

Covers saving and loading learner state and the legacy known-characters file.
"""

import json

import pytest

from hanzipath.classroom import (
    LearnerState,
    ProgressStore,
    export_known_characters,
    from_snapshot,
    import_known_characters,
    to_snapshot,
)

from conftest import LIN, MU, SEN


@pytest.fixture
def studied_state():
    state = LearnerState()
    state.mark_known(MU)
    state.mark_known(SEN)
    state.record_review(MU, True, 1700000000)
    state.record_review(MU, False, 1700000100)
    return state


class TestSnapshotMapping:
    """Test state <-> snapshot conversion."""

    def test_to_snapshot(self, studied_state):
        snapshot = to_snapshot(studied_state)
        assert snapshot.known_ids == [MU, SEN]
        assert snapshot.history[MU].views == 2
        assert snapshot.history[MU].successes == 1
        assert snapshot.history[MU].last == 1700000100

    def test_from_none(self):
        assert from_snapshot(None).known_count() == 0


class TestProgressStore:
    """Test the JSON file store."""

    def test_save_and_load(self, tmp_path, studied_state):
        store = ProgressStore(tmp_path / "state.json")
        saved = store.save(studied_state)
        assert saved.saved_at > 0

        loaded = store.load()
        assert list(loaded.get_known_snapshot()) == [MU, SEN]
        assert loaded.get_review_history(MU) == studied_state.get_review_history(MU)
        assert loaded.get_review_history(LIN) is None

    def test_file_content(self, tmp_path, studied_state):
        path = tmp_path / "state.json"
        ProgressStore(path).save(studied_state)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["known_ids"] == [MU, SEN]
        assert data["history"][str(MU)] == {"views": 2, "successes": 1, "last": 1700000100}

    def test_creates_parent_directory(self, tmp_path, studied_state):
        path = tmp_path / "nested" / "dir" / "state.json"
        ProgressStore(path).save(studied_state)
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path, studied_state):
        store = ProgressStore(tmp_path / "state.json")
        store.save(studied_state)
        store.save(studied_state)
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_missing_file_gives_empty_state(self, tmp_path):
        store = ProgressStore(tmp_path / "absent.json")
        assert store.load_snapshot() is None
        assert store.load().known_count() == 0

    def test_empty_file_gives_empty_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("", encoding="utf-8")
        assert ProgressStore(path).load().known_count() == 0

    def test_corrupt_file_gives_empty_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        assert ProgressStore(path).load().known_count() == 0

    def test_invalid_counters_give_empty_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"known_ids": [1], "history": {"1": {"views": -4}}}), encoding="utf-8")
        assert ProgressStore(path).load_snapshot() is None

    def test_undecodable_file_gives_empty_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b'{"known_ids": [1], "note": "\xff\xfe"}')
        store = ProgressStore(path)
        assert store.load_snapshot() is None
        assert store.load().known_count() == 0

    @pytest.mark.parametrize("payload", [
        {"known_ids": [-3]},
        {"known_ids": [2 ** 32]},
        {"known_ids": [], "history": {"-1": {"views": 1}}},
    ])
    def test_out_of_range_ids_give_empty_state(self, tmp_path, payload):
        path = tmp_path / "state.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        store = ProgressStore(path)
        assert store.load_snapshot() is None
        assert store.load().known_count() == 0


class TestKnownCharactersFile:
    """Test export/import of known characters by text."""

    def test_export(self, tmp_path, forest_corpus, studied_state):
        path = tmp_path / "known.json"
        count = export_known_characters(path, studied_state, forest_corpus.mapper)
        assert count == 2
        assert json.loads(path.read_text(encoding="utf-8")) == {"knownChars": ["木", "森"]}

    def test_import(self, tmp_path, forest_corpus):
        path = tmp_path / "known.json"
        path.write_text(json.dumps({"knownChars": ["林", "鑫", "", "木"]}), encoding="utf-8")
        state = import_known_characters(path, forest_corpus.mapper)
        assert list(state.get_known_snapshot()) == [MU, LIN]
        # Lookup only: unknown characters do not grow the mapper
        assert forest_corpus.mapper.get_id("鑫") is None

    def test_import_missing_file(self, tmp_path, forest_corpus):
        with pytest.raises(FileNotFoundError):
            import_known_characters(tmp_path / "absent.json", forest_corpus.mapper)
