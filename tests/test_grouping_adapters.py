import pytest

from cblm.errors import InvalidGroupingFile, MalformedGroupingData
from cblm.grouping.adapters import load_grouping, normalize_grouping
from cblm.grouping.schema import SHAPE_FLAT, SHAPE_SORTED


def test_flat_shape_keeps_decoded_order():
    g = normalize_grouping({"Z": ["a"], "A": ["b"], "M": []})
    assert g.shape == SHAPE_FLAT
    assert g.ordered_codes == ["Z", "A", "M"]
    assert g.n_names == 2


def test_sorted_shape_pairs_titles_with_items():
    g = normalize_grouping({"sorted": {"title": ["Kin", "Work"], "textItems": [["Mom", "Dad"], ["Boss"]]}})
    assert g.shape == SHAPE_SORTED
    assert [(grp.code, grp.names) for grp in g] == [("Kin", ("Mom", "Dad")), ("Work", ("Boss",))]


def test_sorted_shape_length_mismatch():
    with pytest.raises(MalformedGroupingData, match="title"):
        normalize_grouping({"sorted": {"title": ["A", "B"], "textItems": [["x"]]}})


def test_sorted_shape_missing_items():
    with pytest.raises(MalformedGroupingData):
        normalize_grouping({"sorted": {"title": ["A"]}})


def test_sorted_key_with_list_value_is_a_flat_code():
    g = normalize_grouping({"sorted": ["x"]})
    assert g.shape == SHAPE_FLAT
    assert g.ordered_codes == ["sorted"]


def test_sorted_shape_bad_item_names_the_title():
    with pytest.raises(MalformedGroupingData) as ei:
        normalize_grouping({"sorted": {"title": ["A", "B"], "textItems": [["x"], "y"]}})
    assert ei.value.code == "B"


@pytest.mark.parametrize("data", [[], ["A", "x"], "text", 3, None])
def test_top_level_must_be_object(data):
    with pytest.raises(MalformedGroupingData):
        normalize_grouping(data)


def test_load_grouping_from_file(write_json):
    path = write_json({"sorted": {"title": ["A"], "textItems": [["x"]]}})
    g = load_grouping(path)
    assert g.ordered_codes == ["A"]


def test_load_grouping_missing_file(tmp_path):
    with pytest.raises(InvalidGroupingFile) as ei:
        load_grouping(str(tmp_path / "nope.json"))
    assert "nope.json" in str(ei.value)


def test_load_grouping_invalid_json(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("{\"A\": [\"x\",", encoding="utf-8")
    with pytest.raises(InvalidGroupingFile, match="not valid JSON"):
        load_grouping(str(p))


def test_load_grouping_wrong_shape(write_json):
    path = write_json(["not", "an", "object"])
    with pytest.raises(MalformedGroupingData):
        load_grouping(path)
