import io

import pandas as pd
import pytest

from powerwhip.lookup import LookupResolver, LookupRow
from powerwhip.order_entry import (
    ORDER_ENTRY_COLUMNS,
    PRESAL_COLUMNS,
    build_presal_rows,
    build_rows,
    order_entry_frame,
    order_entry_workbook,
    write_workbook,
)
from powerwhip.parser import CatalogResolver


def col(name):
    return ORDER_ENTRY_COLUMNS.index(name)


@pytest.fixture
def catalog_batch():
    return CatalogResolver().process([
        "CS8269A, LMZC, 20, 10, Red",
        "L6-30R!2",
        "UNKNOWN99, XYZ, 5, 2",
    ])


def test_header():
    assert len(ORDER_ENTRY_COLUMNS) == 49
    assert len(set(ORDER_ENTRY_COLUMNS)) == 49
    assert ORDER_ENTRY_COLUMNS[:3] == ["Line", "Qty", "Choose receptacle"]
    assert ORDER_ENTRY_COLUMNS[-1] == "Breaker options"
    # "Box" and "box" are distinct columns
    assert "Box" in ORDER_ENTRY_COLUMNS and "box" in ORDER_ENTRY_COLUMNS
    assert len(PRESAL_COLUMNS) == 18


@pytest.mark.parametrize("qty", [1, 2, 5])
def test_quantity_expansion(qty):
    batch = CatalogResolver().process([f"L6-20R, EMT, 30, 10, Red!{qty}"])
    rows = build_rows(batch.results)
    assert len(rows) == qty
    assert [r[0] for r in rows] == list(range(1, qty + 1))
    for r in rows:
        assert r[1:] == rows[0][1:]


def test_line_numbers_run_across_the_batch():
    batch = CatalogResolver().process(["CS8269A!2", "L6-20R", "L6-30R!3"])
    rows = build_rows(batch.results)
    assert [r[0] for r in rows] == [1, 2, 3, 4, 5, 6]
    assert all(r[col("Qty")] == 1 for r in rows)


def test_every_cell_filled(catalog_batch):
    for row in build_rows(catalog_batch.results):
        assert len(row) == len(ORDER_ENTRY_COLUMNS)
        assert all(v is not None for v in row)


def test_catalog_row_values(catalog_batch):
    row = build_rows(catalog_batch.results)[0]
    assert row[col("Choose receptacle")] == "CS8269A"
    assert row[col("Select Cable/Conduit Type")] == "LMZC"
    assert row[col("Whip Length (ft)")] == "20"
    assert row[col("Tail Length (ft)")] == "10"
    assert row[col("Label Color (Background/Text)")] == "Red"
    assert row[col("Voltage")] == "480"
    assert row[col("UseVoltage")] == "480"
    assert row[col("Conductor AWG")] == "6"
    assert row[col("current")] == "50"
    assert row[col("Box code")] == "50AH"
    assert row[col("Drawing number")] == "PWxx-CS8269AT-xxSALx(103)"
    assert row[col("Orderable Part number")] == "PW250K-CS8269AT-D1SAL1234"
    assert (row[col("First Circuit")], row[col("Second Circuit")], row[col("Third Circuit")]) == ("1", "3", "5")
    assert [row[col(c)] for c in ("L1", "L2", "L3", "N", "E")] == ["--------"] * 4 + ["------->"]
    assert row[col("Notes to Enconnex")] == "MC Cable Wire Colors Black/White/Red/Blue/Green"


def test_default_price_chain(catalog_batch):
    row = build_rows(catalog_batch.results)[0]
    assert row[col("base price")] == pytest.approx(287.2)
    assert row[col("assembled price")] == pytest.approx(round(287.2 * 6.4, 1))
    assert row[col("assembled price")] == pytest.approx(1838.1)
    assert row[col("List Price")] == pytest.approx(2444.67)
    assert row[col("Price to Wesco")] == row[col("assembled price")]
    assert row[col("Budgetary pricing text")] == (
        "Whip CS8269A 6AWG 3/4LMZC 20ft, Price to Wesco 1838.1ea"
    )


def test_part_number_keyed_on_pattern(catalog_batch):
    rows = build_rows(catalog_batch.results)
    parts = [r[col("Orderable Part number")] for r in rows]
    assert parts[1] == parts[2] == "PW250K-L6-30RT-D2SAL1234"


def test_unmatched_row_falls_back(catalog_batch):
    row = build_rows(catalog_batch.results)[-1]
    assert row[col("Choose receptacle")] == "UNKNOWN99"
    assert row[col("Voltage")] == "208"
    assert row[col("Conduit Size")] == "3/4"
    assert row[col("Box")] == "Standard Power Whip Box"
    assert row[col("current")] == "60"
    assert "UNKNOWN99" in row[col("Notes to Enconnex")]


def test_empty_pattern_fields_use_cell_defaults():
    row = build_rows(CatalogResolver().process(["L6-20R"]).results)[0]
    assert row[col("Select Cable/Conduit Type")] == "MCC"
    assert row[col("Whip Length (ft)")] == "250"
    assert row[col("Tail Length (ft)")] == "10"
    assert row[col("Label Color (Background/Text)")] == "Black (conduit)"


def test_lookup_prices_win(sample_table):
    batch = LookupResolver(sample_table).process(["CS8269A, LMZC, 20, 10"])
    row = build_rows(batch.results)[0]
    assert row[col("base price")] == 125.50
    assert row[col("assembled price")] == 180.75
    assert row[col("List Price")] == 225.00
    assert row[col("Orderable Part number")] == "CS8269A-LMZC-20-10-RED"
    assert row[col("Box")] == "IP67"


def test_partial_lookup_prices_are_derived():
    batch = LookupResolver([LookupRow("X1", base_price=100.0)]).process(["X1"])
    row = build_rows(batch.results)[0]
    assert row[col("assembled price")] == pytest.approx(640.0)
    assert row[col("List Price")] == pytest.approx(851.2)


def test_presal_rows(catalog_batch):
    rows = build_presal_rows(catalog_batch.results)
    assert [r[0] for r in rows] == ["PWC-001", "PWC-002", "PWC-003", "PWC-004"]
    assert all(len(r) == len(PRESAL_COLUMNS) for r in rows)
    first = dict(zip(PRESAL_COLUMNS, rows[0]))
    assert first["Receptacle Type"] == "CS8269A"
    assert first["Voltage (V)"] == "480"
    assert first["Parse Confidence"] == "90%"
    assert first["Cost"] == "$1838.10"


def test_frame(catalog_batch):
    df = order_entry_frame(catalog_batch.results)
    assert list(df.columns) == ORDER_ENTRY_COLUMNS
    assert len(df) == 4


def test_workbook_sheets(catalog_batch):
    data = order_entry_workbook(catalog_batch.results)
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None)
    assert list(sheets) == ["Order Entry", "PreSal"]
    assert len(sheets["Order Entry"]) == 4
    assert list(sheets["Order Entry"].columns)[:2] == ["Line", "Qty"]
    assert len(sheets["PreSal"]) == 4


def test_lookup_workbook_has_no_presal(sample_table):
    batch = LookupResolver(sample_table).process(["L6-15R"])
    sheets = pd.read_excel(io.BytesIO(order_entry_workbook(batch.results)), sheet_name=None)
    assert list(sheets) == ["Order Entry"]


def test_write_workbook_truncates_sheet_names():
    data = write_workbook({"x" * 40: pd.DataFrame({"a": [1]})})
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None)
    assert list(sheets) == ["x" * 31]
