"""Tests for the palette builder and the palette file generator."""
import json

from bliss import config
from bliss.engine.gloss_index import GlossIndex
from bliss.engine.resolver import GlossResolver
from bliss.palette.builder import build_palette, is_bci_av_id_label, resolve_cell
from bliss.palette.generator import format_report, generate_palette_file

NOT_FOUND = [15733, "/", 14133, ";", 9004, "/", 25570]


def cells_by_label(palette_json):
    return {cell["options"]["label"]: (key, cell)
            for key, cell in palette_json["cells"].items()}


class TestBuildPalette:
    """Test the batch build."""

    def setup_method(self):
        self.resolver = GlossResolver(GlossIndex.from_entries([{"id": 5, "description": "cat"}]))
        self.result = build_palette([["BLANK", "cat"], ["7", "dog"]], self.resolver,
                                    start_row=2, start_column=1)
        self.cells = cells_by_label(self.result.palette_json)

    def test_blank_has_no_cell(self):
        assert len(self.result.palette_json["cells"]) == 3
        assert not any(label.startswith("BLANK") for label in self.cells)

    def test_resolved_cell(self):
        key, cell = self.cells["cat"]
        assert key.startswith("cat-")
        assert cell == {
            "type": config.CELL_TYPE,
            "options": {"label": "cat", "bciAvId": 5, "rowStart": 2, "rowSpan": 1,
                        "columnStart": 2, "columnSpan": 1},
        }

    def test_unknown_id_cell(self):
        key, cell = self.cells["7 NOT FOUND"]
        assert key.startswith("7-")
        assert cell["options"]["bciAvId"] == NOT_FOUND
        assert (cell["options"]["rowStart"], cell["options"]["columnStart"]) == (3, 1)

    def test_unknown_label_cell(self):
        key, cell = self.cells["dog NOT FOUND"]
        assert key.startswith("dog-")
        assert cell["options"]["bciAvId"] == NOT_FOUND
        assert (cell["options"]["rowStart"], cell["options"]["columnStart"]) == (3, 2)

    def test_errors_collected(self):
        assert len(self.result.errors) == 2
        assert "7" in self.result.errors[0]
        assert "dog" in self.result.errors[1]

    def test_matches_recorded(self):
        assert self.result.matches == [{"cat": [{"bciAvId": 5, "label": "cat"}]}]

    def test_palette_name(self):
        assert self.result.palette_json["name"] == config.PALETTE_NAME


class TestBuildPaletteWithGlosses:
    """Test ambiguity handling and id labels against the shared fixture."""

    def test_first_match_used_all_recorded(self, resolver):
        result = build_palette([["cat"]], resolver, start_row=1, start_column=1)
        (cell,) = result.palette_json["cells"].values()
        assert cell["options"]["bciAvId"] == 5
        assert cell["options"]["label"] == "cat"
        assert [m["bciAvId"] for m in result.matches[0]["cat"]] == [5, 24000]

    def test_id_label_takes_description(self, resolver):
        result = build_palette([["14133"]], resolver)
        (cell,) = result.palette_json["cells"].values()
        assert cell["options"]["label"] == "eye"
        assert cell["options"]["bciAvId"] == 14133
        assert result.matches == []
        assert result.errors == []

    def test_special_encoding_cell(self, resolver):
        result = build_palette([["verb+s"]], resolver)
        (cell,) = result.palette_json["cells"].values()
        assert cell["options"]["bciAvId"] == [12335, "/", 8499]

    def test_keys_unique_for_repeated_labels(self, resolver):
        result = build_palette([["cat", "cat"]], resolver)
        assert len(result.palette_json["cells"]) == 2

    def test_custom_type(self, resolver):
        result = build_palette([["eye"]], resolver, cell_type="ActionSymbolCell")
        (cell,) = result.palette_json["cells"].values()
        assert cell["type"] == "ActionSymbolCell"

    def test_empty_index_never_raises(self):
        resolver = GlossResolver(GlossIndex.from_entries([]))
        result = build_palette([["a", "1"], ["b"]], resolver)
        assert len(result.errors) == 3
        assert len(result.palette_json["cells"]) == 3


class TestResolveCell:
    def test_failure_is_a_result(self, resolver):
        resolution = resolve_cell("dog", 1, 1, resolver)
        assert not resolution.ok
        assert resolution.cell.label == "dog NOT FOUND"

    def test_id_labels(self):
        assert is_bci_av_id_label("14133")
        assert not is_bci_av_id_label("12abc")
        assert not is_bci_av_id_label("cat")


class TestGeneratePaletteFile:
    """Test writing the palette JSON."""

    def test_writes_json(self, tmp_path, resolver):
        output = tmp_path / "out" / "palette.json"
        result = generate_palette_file(output, resolver, labels=[["cat", "dog"]])
        written = json.loads(output.read_text(encoding="utf-8"))
        assert written == result.palette_json
        assert len(written["cells"]) == 2

    def test_report(self, resolver):
        result = build_palette([["cat", "dog"]], resolver)
        report = format_report(result)
        assert "For label cat:" in report
        assert "\tFound match: the cat sat, bci-av-id: 24000" in report
        assert "1 label(s) not resolved:" in report
