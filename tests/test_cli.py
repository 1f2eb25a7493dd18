"""Command line tests: run main() against a temp data directory."""

import pytest

from hanzipath.cli import main

CEDICT = """\
木 木 [mu4] /tree/wood/
林 林 [lin2] /woods/forest/grove/
森 森 [sen1] /forest/dense/
"""

SUBTLEX = "木\t50000\n林\t30000\n森\t10000\n"

IDS = "U+6797\t林\t⿰木木\nU+68EE\t森\t⿱木林\n"

SENTENCES = "1\tcmn\t木林\n2\tcmn\t森林。\n"


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Call main() with the temp data directory and state file."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "cedict.txt").write_text(CEDICT, encoding="utf-8")
    (data_dir / "subtlex.txt").write_text(SUBTLEX, encoding="utf-8")
    (data_dir / "ids.txt").write_text(IDS, encoding="utf-8")
    (data_dir / "sentences.tsv").write_text(SENTENCES, encoding="utf-8")
    state_path = tmp_path / "state.json"
    monkeypatch.chdir(tmp_path)

    def _run(*argv):
        return main(["--data-dir", str(data_dir), "--state", str(state_path), *argv])

    _run.state_path = state_path
    return _run


class TestCommands:
    """Test each sub-command."""

    def test_recommend_without_progress(self, run, capsys):
        assert run("recommend") == 0
        assert "No recommendations" in capsys.readouterr().out

    def test_learn_then_recommend(self, run, capsys):
        assert run("learn", "木") == 0
        assert run.state_path.exists()
        capsys.readouterr()

        assert run("recommend", "-n", "2") == 0
        out = capsys.readouterr().out
        assert "(lenient)" in out
        assert out.index("林") < out.index("森")

    def test_strict_mode(self, run, capsys):
        run("learn", "木")
        capsys.readouterr()
        assert run("recommend", "--mode", "strict") == 0
        out = capsys.readouterr().out
        assert "林" in out
        assert "森" not in out

    def test_sentences(self, run, capsys):
        run("learn", "木")
        capsys.readouterr()
        assert run("sentences", "林") == 0
        out = capsys.readouterr().out
        assert "木林" in out
        assert "森林" not in out

    def test_sentences_lower_threshold(self, run, capsys):
        run("learn", "木")
        capsys.readouterr()
        assert run("sentences", "林", "--threshold", "0.5") == 0
        assert "森林" in capsys.readouterr().out

    def test_stats(self, run, capsys):
        run("learn", "木", "林")
        capsys.readouterr()
        assert run("stats") == 0
        assert "Known characters: 2" in capsys.readouterr().out

    def test_check(self, run, capsys):
        assert run("check") == 0
        out = capsys.readouterr().out
        assert "symmetric" in out
        assert "sentences: 2" in out


class TestErrors:
    """Test exit codes."""

    def test_unknown_character(self, run):
        assert run("sentences", "鑫") == 1
        assert run("learn", "鑫") == 1

    def test_invalid_arguments(self, run):
        assert run("recommend", "-n", "0") == 2
        assert run("sentences", "林", "--threshold", "1.5") == 2

    def test_missing_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--data-dir", str(tmp_path / "absent"), "--state", str(tmp_path / "s.json"), "stats"]) == 1
