# Ensure `src/` is on sys.path so tests can import `cblm` without requiring editable install
import json
import os
import pathlib
import sys

import pytest
import yaml

HERE = os.path.dirname(__file__)
SRC = os.path.abspath(os.path.join(HERE, "..", "src"))
if os.path.isdir(SRC) and SRC not in sys.path:
    sys.path.insert(0, SRC)

CASES_PATH = pathlib.Path(HERE) / "data" / "annotate_cases.yml"


@pytest.fixture(scope="session")
def annotate_cases():
    with open(CASES_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)["cases"]


@pytest.fixture
def write_json(tmp_path):
    def make(data, name="sortedList.json"):
        p = tmp_path / name
        p.write_text(json.dumps(data), encoding="utf-8")
        return str(p)
    return make


@pytest.fixture
def write_tsv(tmp_path):
    def make(rows, name="survey1-BLM.csv", directory=None):
        d = directory or tmp_path
        d.mkdir(parents=True, exist_ok=True)
        p = d / name
        p.write_text("".join("\t".join(r) + "\n" for r in rows), encoding="utf-8")
        return str(p)
    return make


@pytest.fixture
def blm_rows():
    return [
        ["id", "x", "y", "Name", "n1", "n2"],
        ["1", "10", "20", "Family", "0", "1"],
        ["2", "30", "", "School", "1", "0"],
        ["3", "50", "60", "Unknown place", "0", "0"],
    ]


@pytest.fixture
def grouping_flat():
    return {"Support": ["Family", "Friends"], "Institutions": ["School"], "Empty": []}
