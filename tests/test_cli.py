"""Tests for the bliss command line."""
import json

from bliss import cli


def run(capsys, gloss_file, *argv):
    code = cli.main(["--gloss", str(gloss_file), "--cache", "", *argv])
    return code, capsys.readouterr()


class TestSearch:
    def test_label(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "search", "cat")
        assert code == 0
        assert "2 match(es) for 'cat'" in out.out
        assert "the cat sat" in out.out

    def test_no_hits(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "search", "dog")
        assert code == 1
        assert "No matches" in out.out

    def test_json(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "--json", "search", "   ")
        assert code == 0
        assert json.loads(out.out) == {
            "term": "", "noSearchTerm": True, "isNumeric": False, "matches": []}

    def test_missing_dataset_degrades(self, capsys, tmp_path):
        code, out = run(capsys, tmp_path / "missing.json", "search", "cat")
        assert code == 1
        assert "gloss index is empty" in out.err


class TestCompose:
    def test_post_modifier_and_indicator(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "--json", "compose", "eye",
                        "--post", "plural", "--indicator", "9004")
        assert code == 0
        payload = json.loads(out.out)
        assert payload["label"] == "plural eye"
        assert payload["bciAvId"] == [14133, ";", 9004, "/", 8499]
        assert payload["modifierInfo"] == [
            {"modifierId": 8499, "modifierGloss": "plural", "isPrepended": False}]

    def test_remove_indicator(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "--json", "compose", "eye",
                        "--indicator", "9004", "--remove-indicator")
        assert code == 0
        assert json.loads(out.out)["bciAvId"] == 14133

    def test_unknown_label(self, capsys, gloss_file):
        code, out = run(capsys, gloss_file, "compose", "dog")
        assert code == 1
        assert "ERROR:" in out.err


class TestPalette:
    def test_writes_file(self, capsys, gloss_file, tmp_path):
        output = tmp_path / "palette.json"
        code, out = run(capsys, gloss_file, "palette", str(output))
        assert code == 0
        palette = json.loads(output.read_text(encoding="utf-8"))
        assert palette["name"] == "No name Palette"
        assert f"to {output}" in out.out
