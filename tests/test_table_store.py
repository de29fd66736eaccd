"""
Coefficient table: loading, integrity checks, read-only lookups.
"""

import json
import os

import pytest
from pydantic import ValidationError

import sash_coefficients
from sash_coefficients.config import settings
from sash_coefficients.errors import DatasetIntegrityError
from sash_coefficients.schemas import Grid
from sash_coefficients.table_store import CoefficientTable



# --- Lookups ---

def test_systems_lists_every_key(table):
    assert table.systems() == frozenset({"demo", "single"})
    assert len(table) == 2


def test_categories_in_dataset_order(table):
    assert table.categories("demo") == ("standard", "blackout")
    assert table.categories("nope") == ()


def test_lookup_grid_returns_typed_grid(table):
    grid = table.lookup_grid("demo", "standard")
    assert grid.widths == (1.0, 2.0, 3.0)
    assert grid.heights == (1.0, 2.0)
    assert grid.values[2][1] == 31.0


def test_lookup_grid_missing_is_none(table):
    assert table.lookup_grid("demo", "sheer") is None
    assert table.lookup_grid("nope", "standard") is None


def test_match_ignores_case(table):
    assert table.match_system_key("DEMO") == "demo"
    assert table.match_system_key("demo") == "demo"
    assert table.match_system_key("other") is None
    assert table.match_category("single", "e") == "E"
    assert table.match_category("demo", "Standard") == "standard"
    assert table.match_category("demo", "sheer") is None
    assert table.match_category("nope", "standard") is None


def test_ranges(table):
    ranges = table.ranges("demo", "standard")
    assert ranges.width_range.min == 1.0
    assert ranges.width_range.max == 3.0
    assert ranges.height_range.min == 1.0
    assert ranges.height_range.max == 2.0
    assert table.ranges("demo", "sheer") is None


def test_table_is_read_only(table):
    with pytest.raises(TypeError):
        table._systems["new"] = {}
    with pytest.raises(TypeError):
        table._systems["demo"]["standard"] = None
    grid = table.lookup_grid("demo", "standard")
    with pytest.raises(ValidationError):
        grid.widths = (1.0,)


def test_source_document_changes_do_not_leak(sample_document):
    doc = sample_document
    loaded = CoefficientTable.from_document(doc)
    doc["demo"]["standard"]["values"][0][0] = 999
    doc["extra"] = doc.pop("single")
    assert loaded.lookup_grid("demo", "standard").values[0][0] == 10.0
    assert "extra" not in loaded.systems()


# --- Integrity checks ---

@pytest.mark.parametrize("grid, message", [
    ({"widths": [1, 1, 3], "heights": [1, 2], "values": [[1, 1], [1, 1], [1, 1]]}, "strictly increasing"),
    ({"widths": [3, 2, 1], "heights": [1, 2], "values": [[1, 1], [1, 1], [1, 1]]}, "strictly increasing"),
    ({"widths": [], "heights": [1, 2], "values": []}, "at least one"),
    ({"widths": [1, 2], "heights": [1, 2], "values": [[1, 1]]}, "rows"),
    ({"widths": [1, 2], "heights": [1, 2], "values": [[1, 1], [1]]}, "columns"),
    ({"widths": [1, 2], "heights": [1, 2]}, "values"),
])
def test_invalid_grid_fails_load(sample_document, grid, message):
    sample_document["demo"]["standard"] = grid
    with pytest.raises(DatasetIntegrityError) as exc:
        CoefficientTable.from_document(sample_document)
    assert message in str(exc.value)
    assert "'demo'" in str(exc.value)
    assert "'standard'" in str(exc.value)


def test_system_without_categories_fails_load(sample_document):
    doc = sample_document
    doc["empty"] = {}
    with pytest.raises(DatasetIntegrityError, match="no categories"):
        CoefficientTable.from_document(doc)


def test_non_object_root_fails_load():
    with pytest.raises(DatasetIntegrityError):
        CoefficientTable.from_document([1, 2, 3])
    with pytest.raises(DatasetIntegrityError):
        CoefficientTable.from_document({"demo": [1, 2]})


def test_grid_model_rejects_non_finite():
    with pytest.raises(ValidationError):
        Grid(widths=[1.0, float("inf")], heights=[1.0], values=[[1.0], [2.0]])
    with pytest.raises(ValidationError):
        Grid(widths=[1.0], heights=[1.0], values=[[float("nan")]])


def test_legacy_products_document(sample_document):
    legacy = {"products": {key: {"categories": cats} for key, cats in sample_document.items()}}
    table = CoefficientTable.from_document(legacy)
    assert table.systems() == frozenset({"demo", "single"})
    assert table.lookup_grid("single", "E").values == ((2.5,),)


# --- File loading ---

def test_load_from_file(tmp_path, sample_document):
    path = tmp_path / "coefficients.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    table = CoefficientTable.load(str(path))
    assert table.systems() == frozenset({"demo", "single"})


def test_load_missing_file(tmp_path):
    with pytest.raises(DatasetIntegrityError, match="not found"):
        CoefficientTable.load(str(tmp_path / "missing.json"))


def test_load_bad_json(tmp_path):
    path = tmp_path / "coefficients.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetIntegrityError, match="not valid JSON"):
        CoefficientTable.load(str(path))


def test_bundled_dataset_loads():
    table = CoefficientTable.load(settings.COEFFICIENTS_PATH)
    assert {"uni1_zebra", "uni1_roll", "mini_zebra", "mini_roll"} <= table.systems()
    for key in table.systems():
        assert len(table.categories(key)) >= 1


def test_bundled_dataset_ships_inside_package():
    package_dir = os.path.dirname(os.path.abspath(sash_coefficients.__file__))
    path = os.path.abspath(settings.COEFFICIENTS_PATH)
    assert os.path.commonpath([package_dir, path]) == package_dir
    assert os.path.isfile(path)
