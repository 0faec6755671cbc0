from space_saver.cells import aisle_prefix, clean_string, column, extract_cell, to_bool, to_number
from space_saver.models import ColumnRef

HEADERS = ["location_name", "type", "pickable"]


def test_extract_cell_positional_row():
    row = ["A01-B-01", "Shelf", "true"]
    assert extract_cell(row, HEADERS, 1) == "Shelf"


def test_extract_cell_keyed_row_resolves_index_through_headers():
    row = {"location_name": "A01-B-01", "type": "Shelf", "pickable": "yes"}
    assert extract_cell(row, HEADERS, 2) == "yes"


def test_extract_cell_index_wins_over_key():
    row = ["A01-B-01", "Shelf", "true"]
    assert extract_cell(row, HEADERS, 0, "type") == "A01-B-01"


def test_extract_cell_falls_back_to_key_when_index_out_of_range():
    assert extract_cell(["A01-B-01", "Shelf"], HEADERS, 9, "type") == "Shelf"
    assert extract_cell({"type": "Bin"}, HEADERS, 9, "type") == "Bin"


def test_extract_cell_unresolvable_is_none():
    assert extract_cell(["x"], HEADERS, 5) is None
    assert extract_cell({"other": 1}, HEADERS, None, "type") is None
    assert extract_cell(["x"], HEADERS) is None
    assert extract_cell(None, HEADERS, 0, "type") is None


def test_column_without_ref():
    assert column(["x"], HEADERS, None) is None
    assert column(["x"], HEADERS, ColumnRef(index=0)) == "x"


def test_to_bool():
    for value in ["true", " TRUE ", "1", "yes", "Y", 1, True]:
        assert to_bool(value) is True
    for value in ["false", "no", "", None, "2", "truex", "yes please", 0]:
        assert to_bool(value) is False


def test_to_number():
    assert to_number("1,234.5") == 1234.5
    assert to_number(" 12 ") == 12.0
    assert to_number(7) == 7.0
    assert to_number("") is None
    assert to_number(None) is None
    assert to_number("abc") is None
    assert to_number("nan") is None
    assert to_number("inf") is None
    assert to_number(True) is None


def test_clean_string():
    assert clean_string("\u200b SKU-1\ufeff ") == "SKU-1"
    assert clean_string("\u200cA\u200d") == "A"
    assert clean_string(None) == ""
    assert clean_string(42) == "42"


def test_aisle_prefix():
    assert aisle_prefix("a-01 north") == "A01"
    assert aisle_prefix("  b2 ") == "B2"
    assert aisle_prefix("") == ""
    assert aisle_prefix(None) == ""
