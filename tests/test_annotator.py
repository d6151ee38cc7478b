import pytest

from cblm.annotate.annotator import UnmatchedNode, annotate
from cblm.config import NODE_NAME_COL
from cblm.errors import MalformedTable
from cblm.grouping.index import build_index


def test_annotate_cases(annotate_cases):
    for case in annotate_cases:
        index = build_index(case["grouping"])
        result = annotate(case["table"], index)
        assert result.rows == case["expected"], case["name"]
        assert [u.name for u in result.unmatched] == case["unmatched"], case["name"]


def test_column_splice_invariant(blm_rows, grouping_flat):
    result = annotate(blm_rows, build_index(grouping_flat))

    assert len(result.rows) == len(blm_rows)
    for i, row in enumerate(blm_rows):
        out = result.rows[i]
        assert len(out) == len(row) + 1
        for c in range(NODE_NAME_COL):
            assert out[c] == row[c]
        for c in range(NODE_NAME_COL, len(row)):
            assert out[c + 1] == row[c]


def test_header_gets_code_cell(blm_rows, grouping_flat):
    result = annotate(blm_rows, build_index(grouping_flat))
    assert result.rows[0][NODE_NAME_COL] == "Code"
    assert result.rows[0][NODE_NAME_COL + 1] == "Name"


def test_unmatched_row_is_blank_and_processing_continues():
    index = build_index({"Alpha": ["after"]})
    table = [
        ["h1", "h2", "h3", "h4"],
        ["n1", "n2", "n3", "nonexistent-node"],
        ["m1", "m2", "m3", "after"],
    ]
    result = annotate(table, index)

    assert result.rows[1][NODE_NAME_COL] == ""
    assert result.rows[2][NODE_NAME_COL] == "Alpha"
    assert result.unmatched == [UnmatchedNode(row=1, name="nonexistent-node")]
    assert (result.n_data_rows, result.n_matched, result.n_unmatched) == (2, 1, 1)


def test_unmatched_row_is_logged_with_source(caplog):
    table = [["h1", "h2", "h3", "h4"], ["a", "b", "c", "ghost"]]
    with caplog.at_level("WARNING", logger="cblm.annotate.annotator"):
        annotate(table, build_index({}), source="survey1-BLM.csv")
    messages = [r.getMessage() for r in caplog.records]
    assert any("survey1-BLM.csv" in m and "'ghost'" in m for m in messages)


def test_input_table_is_not_modified(blm_rows, grouping_flat):
    before = [list(r) for r in blm_rows]
    annotate(blm_rows, build_index(grouping_flat))
    assert blm_rows == before


def test_plain_dict_works_as_index():
    table = [["a", "b", "c", "d"], ["1", "2", "3", "x"]]
    result = annotate(table, {"x": "X"})
    assert result.rows[1] == ["1", "2", "3", "X", "x"]


def test_custom_column_and_header():
    table = [["Name", "other"], ["x", "1"]]
    result = annotate(table, {"x": "X"}, node_name_col=0, code_header="Group")
    assert result.rows == [["Group", "Name", "other"], ["X", "x", "1"]]


def test_empty_table_has_no_header():
    with pytest.raises(MalformedTable, match="no header"):
        annotate([], {})


def test_short_row_is_malformed():
    table = [["h1", "h2", "h3", "h4"], ["a", "b", "c", "d"], ["too", "short"]]
    with pytest.raises(MalformedTable) as ei:
        annotate(table, {}, source="t.tsv")
    assert ei.value.row == 2
    assert ei.value.source == "t.tsv"
    assert "row 2" in str(ei.value)


def test_short_header_is_malformed():
    with pytest.raises(MalformedTable):
        annotate([["h1", "h2"]], {})


def test_negative_column_rejected():
    with pytest.raises(ValueError):
        annotate([["a"]], {}, node_name_col=-1)
