"""
order_entry.py — Order-entry and PreSal row building, workbook export.

Each MatchResult expands into `quantity` physical rows. Rows are identical
apart from the Line number, which runs 1..N across the whole batch. Every
cell gets a value: anything the auto-fill data does not provide falls back
to the constants below.
"""

from __future__ import annotations

import io

import pandas as pd

from powerwhip.matching import (
    DEFAULT_BOX,
    DEFAULT_CONDUCTOR_AWG,
    DEFAULT_CONDUCTOR_COUNT,
    DEFAULT_CONDUIT_SIZE,
    DEFAULT_CURRENT,
    DEFAULT_GREEN_AWG,
    DEFAULT_PHASE_TYPE,
    DEFAULT_VOLTAGE,
    MatchResult,
)
from powerwhip.pricing import derive_prices

ORDER_ENTRY_COLUMNS = [
    "Line", "Qty", "Choose receptacle", "Select Cable/Conduit Type", "Whip Length (ft)",
    "Tail Length (ft)", "Label Color (Background/Text)", "building", "PDU", "Panel",
    "First Circuit", "Second Circuit", "Third Circuit", "Cage", "Cabinet Number",
    "Included Breaker", "Mounting bolt", "Conduit Size", "Conductor AWG", "Green AWG",
    "Voltage", "Box", "L1", "L2", "L3", "N", "E", "Drawing number", "Notes to Enconnex",
    "Orderable Part number", "base price", "Per foot", "length", "Bolt adder",
    "assembled price", "Breaker adder", "Price to Wesco", "List Price",
    "Budgetary pricing text", "phase type", "conductor count", "neutral", "current",
    "UseVoltage", "plate hole", "box", "Box code", "Box options", "Breaker options",
]

PRESAL_COLUMNS = [
    "Row ID", "Receptacle Type", "Cable/Conduit Type", "Whip Length (ft)",
    "Tail Length (ft)", "Voltage (V)", "Current (A)", "Wire Gauge (AWG)",
    "Label Color", "Installation Notes", "NEC Compliance", "Part Number",
    "Manufacturer", "Cost", "Lead Time", "Specifications",
    "Parse Confidence", "Original Input",
]

# ── Cell defaults ──────────────────────────────────────────

DEFAULT_CABLE_TYPE = "MCC"
DEFAULT_WHIP_LENGTH = "250"
DEFAULT_TAIL_LENGTH = "10"
DEFAULT_LABEL_COLOR = "Black (conduit)"
DEFAULT_CIRCUITS = ("1", "3", "5")
PHASE_LEAD = "--------"
GROUND_LEAD = "------->"
DEFAULT_NOTES = "MC Cable Wire Colors Black/White/Red/Blue/Green"
PER_FOOT = "6"
CUT_LENGTH = "260"
BOLT_ADDER = "0"
BREAKER_ADDER = "0"
NEUTRAL = "yes"
DEFAULT_BREAKER_OPTIONS = "3 Pole, 60A, 240/120V, Bolt in, 22KA, Square D, QOB360VH"

PRESAL_NEC = "NEC 2020 Article 400 Compliant"
PRESAL_MANUFACTURER = "PowerWhip Industries"
PRESAL_LEAD_TIME = "2-3 weeks"
PRESAL_LABEL_COLOR = "Blue"


def _order_values(result: MatchResult, pattern_number: int) -> dict:
    """Column -> value for one logical pattern; Line is filled in per physical row."""
    af = result.auto_fill
    receptacle = af.receptacle
    cable = af.cable_type or DEFAULT_CABLE_TYPE
    whip = af.whip_length or DEFAULT_WHIP_LENGTH
    conduit_size = af.conduit_size or DEFAULT_CONDUIT_SIZE
    awg = af.conductor_awg or DEFAULT_CONDUCTOR_AWG
    voltage = af.voltage or DEFAULT_VOLTAGE
    current = af.current or DEFAULT_CURRENT
    prices = derive_prices(af.base_price, af.assembled_price, af.list_price)

    return {
        "Qty": 1,
        "Choose receptacle": receptacle,
        "Select Cable/Conduit Type": cable,
        "Whip Length (ft)": whip,
        "Tail Length (ft)": af.tail_length or DEFAULT_TAIL_LENGTH,
        "Label Color (Background/Text)": af.label_color or DEFAULT_LABEL_COLOR,
        "building": "",
        "PDU": "",
        "Panel": "",
        "First Circuit": DEFAULT_CIRCUITS[0],
        "Second Circuit": DEFAULT_CIRCUITS[1],
        "Third Circuit": DEFAULT_CIRCUITS[2],
        "Cage": "",
        "Cabinet Number": "",
        "Included Breaker": "",
        "Mounting bolt": "",
        "Conduit Size": conduit_size,
        "Conductor AWG": awg,
        "Green AWG": af.green_awg or DEFAULT_GREEN_AWG,
        "Voltage": voltage,
        "Box": af.box_type or DEFAULT_BOX,
        "L1": PHASE_LEAD,
        "L2": PHASE_LEAD,
        "L3": PHASE_LEAD,
        "N": PHASE_LEAD,
        "E": GROUND_LEAD,
        "Drawing number": f"PWxx-{receptacle}T-xxSALx(103)",
        "Notes to Enconnex": af.error or DEFAULT_NOTES,
        "Orderable Part number": af.orderable_part_number or f"PW250K-{receptacle}T-D{pattern_number}SAL1234",
        "base price": prices.base_price,
        "Per foot": PER_FOOT,
        "length": CUT_LENGTH,
        "Bolt adder": BOLT_ADDER,
        "assembled price": prices.assembled_price,
        "Breaker adder": BREAKER_ADDER,
        "Price to Wesco": prices.price_to_wesco,
        "List Price": prices.list_price,
        "Budgetary pricing text": (
            f"Whip {receptacle} {awg}AWG {conduit_size}{cable} {whip}ft, "
            f"Price to Wesco {prices.price_to_wesco:.1f}ea"
        ),
        "phase type": af.phase_type or DEFAULT_PHASE_TYPE,
        "conductor count": af.conductor_count or DEFAULT_CONDUCTOR_COUNT,
        "neutral": NEUTRAL,
        "current": current,
        "UseVoltage": voltage,
        "plate hole": "",
        "box": "",
        "Box code": f"{current}AH",
        "Box options": "",
        "Breaker options": DEFAULT_BREAKER_OPTIONS,
    }


def build_rows(matches: list[MatchResult]) -> list[list]:
    """Order-entry rows (no header), quantity-expanded, Line numbered from 1."""
    rows = []
    line = 1
    for pattern_number, result in enumerate(matches, start=1):
        values = _order_values(result, pattern_number)
        for _ in range(result.generated_row_count):
            values["Line"] = line
            rows.append([values[col] for col in ORDER_ENTRY_COLUMNS])
            line += 1
    return rows


def build_presal_rows(matches: list[MatchResult]) -> list[list]:
    """PreSal rows (no header) with PWC-nnn row ids, quantity-expanded."""
    rows = []
    row_id = 1
    for pattern_number, result in enumerate(matches, start=1):
        af = result.auto_fill
        cable = af.cable_type or DEFAULT_CABLE_TYPE
        whip = af.whip_length or DEFAULT_WHIP_LENGTH
        tail = af.tail_length or DEFAULT_TAIL_LENGTH
        prices = derive_prices(af.base_price, af.assembled_price, af.list_price)
        confidence = f"{round(af.confidence * 100)}%" if af.confidence is not None else ""
        body = [
            af.receptacle,
            cable,
            whip,
            tail,
            af.voltage or DEFAULT_VOLTAGE,
            af.current or DEFAULT_CURRENT,
            af.conductor_awg or DEFAULT_CONDUCTOR_AWG,
            af.label_color or PRESAL_LABEL_COLOR,
            f"{af.receptacle} with {cable} conduit",
            PRESAL_NEC,
            af.orderable_part_number or f"PN-{af.receptacle}-{pattern_number}",
            PRESAL_MANUFACTURER,
            f"${prices.price_to_wesco:.2f}",
            PRESAL_LEAD_TIME,
            af.specifications or af.error or "",
            confidence,
            f"{af.receptacle}, {cable}, {whip}ft, Tail {tail}ft",
        ]
        for _ in range(result.generated_row_count):
            rows.append([f"PWC-{row_id:03d}"] + body)
            row_id += 1
    return rows


def order_entry_frame(matches: list[MatchResult]) -> pd.DataFrame:
    return pd.DataFrame(build_rows(matches), columns=ORDER_ENTRY_COLUMNS)


def presal_frame(matches: list[MatchResult]) -> pd.DataFrame:
    return pd.DataFrame(build_presal_rows(matches), columns=PRESAL_COLUMNS)


# ── Workbook export ────────────────────────────────────────

def write_workbook(sheets: dict[str, pd.DataFrame]) -> bytes:
    """Render DataFrames to .xlsx bytes, one sheet each, in dict order."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=name[:31], index=False)
    return buf.getvalue()


def order_entry_workbook(matches: list[MatchResult]) -> bytes:
    """Order Entry sheet, plus a PreSal sheet when catalog results are present."""
    sheets = {"Order Entry": order_entry_frame(matches)}
    catalog_results = [m for m in matches if m.source == "catalog"]
    if catalog_results:
        sheets["PreSal"] = presal_frame(catalog_results)
    return write_workbook(sheets)
