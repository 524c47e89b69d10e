"""
Tests for the command line entry point
"""

import json
import sys

import learn_from_examples
from core.sample_io import save_examples, write_samples


class TestLearnFromExamplesCLI:
    def test_closed_world_run(self, closed_store, tmp_path, monkeypatch, capsys):
        examples, output = tmp_path / "examples.json", tmp_path / "result.json"
        save_examples(closed_store, examples)
        monkeypatch.setattr(sys, "argv", ["learn_from_examples.py", str(examples), "-c",
                                          "--output", str(output)])

        assert learn_from_examples.main() == 0
        assert "Status: SUCCESS" in capsys.readouterr().out
        result = json.loads(output.read_text())
        assert result["status"] == "success"
        assert result["hypothesis"]["dimension"] == 3

    def test_missing_labels_listed(self, tmp_path, monkeypatch, capsys):
        examples = tmp_path / "examples.json"
        write_samples(examples, ["a", "b"], [("a", "a")], [])
        monkeypatch.setattr(sys, "argv", ["learn_from_examples.py", str(examples)])

        assert learn_from_examples.main() == 1
        out = capsys.readouterr().out
        assert "Status: FAILED" in out
        assert "Unlabeled words needed" in out

    def test_unreadable_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["learn_from_examples.py", str(tmp_path / "none.json")])
        assert learn_from_examples.main() == 2
