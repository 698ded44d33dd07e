"""
lookup.py — MasterBubbleLookup reference table matching.

Matching is exact-or-wildcard on receptacle, cable/conduit type, whip length
and tail length: a blank query field matches anything, a filled one must
equal the row value case-insensitively. First matching row wins. There is
no substring fallback here, unlike the catalog resolver.

The table is passed in explicitly; each request works on its own LookupTable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from powerwhip.catalog import suggest_receptacles
from powerwhip.matching import (
    DEFAULT_CONDUCTOR_AWG,
    DEFAULT_CONDUIT_SIZE,
    DEFAULT_GREEN_AWG,
    DEFAULT_VOLTAGE,
    NO_MATCH_ERROR,
    AutoFillData,
    MatchResult,
    PatternResolver,
    default_auto_fill,
)
from powerwhip.patterns import ParsedPattern

TEXT_FIELDS = (
    "receptacle", "cable_conduit_type", "whip_length", "tail_length", "label_color",
    "conduit_size", "conductor_awg", "green_awg", "voltage", "box_type",
    "phase_type", "conductor_count", "current", "orderable_part_number",
)
PRICE_FIELDS = ("base_price", "assembled_price", "list_price")


@dataclass(frozen=True)
class LookupRow:
    receptacle: str
    cable_conduit_type: str = ""
    whip_length: str = ""
    tail_length: str = ""
    label_color: str = ""
    conduit_size: str = ""
    conductor_awg: str = ""
    green_awg: str = ""
    voltage: str = ""
    box_type: str = ""
    phase_type: str = ""
    conductor_count: str = ""
    current: str = ""
    orderable_part_number: str = ""
    base_price: float | None = None
    assembled_price: float | None = None
    list_price: float | None = None


@dataclass(frozen=True)
class LookupTable:
    """A loaded reference table. Replaced wholesale on a new upload, never patched."""
    rows: tuple[LookupRow, ...]
    source_file: str = ""
    columns_mapped: tuple[str, ...] = ()
    skipped_rows: int = 0
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def receptacles(self) -> list[str]:
        return list(dict.fromkeys(r.receptacle for r in self.rows if r.receptacle))

    def summary(self) -> dict:
        return {
            "file": self.source_file,
            "rows": len(self.rows),
            "skipped_rows": self.skipped_rows,
            "receptacles": len(self.receptacles),
            "columns_mapped": list(self.columns_mapped),
        }


def _field_matches(query: str, value: str) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    return q == (value or "").strip().lower()


def find_match(parsed: ParsedPattern, rows: Sequence[LookupRow]) -> LookupRow | None:
    for row in rows:
        if (_field_matches(parsed.receptacle, row.receptacle)
                and _field_matches(parsed.conduit_type, row.cable_conduit_type)
                and _field_matches(parsed.whip_text, row.whip_length)
                and _field_matches(parsed.tail_text, row.tail_length)):
            return row
    return None


def auto_fill_from_row(row: LookupRow, parsed: ParsedPattern) -> AutoFillData:
    return AutoFillData(
        receptacle=row.receptacle,
        cable_type=row.cable_conduit_type,
        whip_length=row.whip_length,
        tail_length=row.tail_length,
        label_color=parsed.label_color or row.label_color,
        conduit_size=row.conduit_size or DEFAULT_CONDUIT_SIZE,
        conductor_awg=row.conductor_awg or DEFAULT_CONDUCTOR_AWG,
        green_awg=row.green_awg or DEFAULT_GREEN_AWG,
        voltage=row.voltage or DEFAULT_VOLTAGE,
        box_type=row.box_type,
        phase_type=row.phase_type,
        conductor_count=row.conductor_count,
        current=row.current,
        orderable_part_number=row.orderable_part_number,
        base_price=row.base_price,
        assembled_price=row.assembled_price,
        list_price=row.list_price,
    )


class LookupResolver(PatternResolver):
    source = "lookup"

    def __init__(self, table: LookupTable | Sequence[LookupRow]):
        if not isinstance(table, LookupTable):
            table = LookupTable(rows=tuple(table))
        self.table = table

    def match(self, line: str, parsed: ParsedPattern) -> MatchResult:
        row = find_match(parsed, self.table.rows)
        if row is not None:
            auto_fill = auto_fill_from_row(row, parsed)
        else:
            error = NO_MATCH_ERROR
            hints = suggest_receptacles(parsed.receptacle, self.table.receptacles)
            if hints and hints[0].lower() != parsed.receptacle.strip().lower():
                error += f" (closest receptacle in {self.table.source_file or 'table'}: {hints[0]})"
            auto_fill = default_auto_fill(parsed, error=error)

        return MatchResult(
            input_pattern=line,
            parsed=parsed,
            auto_fill=auto_fill,
            matched_row=row,
            source=self.source,
        )
