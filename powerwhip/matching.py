"""
matching.py — Shared resolver interface and result types.

Two resolvers implement PatternResolver:
- CatalogResolver (parser.py): static receptacle catalog, PreSal-style output
- LookupResolver (lookup.py): uploaded MasterBubbleLookup reference table

Both turn a pattern line into a MatchResult carrying AutoFillData. Unresolved
lines are never dropped: they get default AutoFillData with an `error` note.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from powerwhip.patterns import ParsedPattern, split_pattern_lines, tokenize


# ── Fallback constants ─────────────────────────────────────

DEFAULT_CONDUIT_SIZE = "3/4"
DEFAULT_CONDUCTOR_AWG = "6"
DEFAULT_GREEN_AWG = "8"
DEFAULT_VOLTAGE = "208"
DEFAULT_PHASE_TYPE = "3 phase"
DEFAULT_CONDUCTOR_COUNT = "5"
DEFAULT_CURRENT = "60"
DEFAULT_BOX = "Standard Power Whip Box"

NO_MATCH_ERROR = "No matching configuration found - using defaults"


@dataclass
class AutoFillData:
    receptacle: str
    cable_type: str = ""
    whip_length: str = ""
    tail_length: str = ""
    label_color: str = ""
    conduit_size: str = DEFAULT_CONDUIT_SIZE
    conductor_awg: str = DEFAULT_CONDUCTOR_AWG
    green_awg: str = DEFAULT_GREEN_AWG
    voltage: str = DEFAULT_VOLTAGE
    box_type: str = ""
    phase_type: str = ""
    conductor_count: str = ""
    current: str = ""
    orderable_part_number: str = ""
    base_price: float | None = None
    assembled_price: float | None = None
    list_price: float | None = None
    specifications: str = ""
    confidence: float | None = None
    error: str | None = None


def default_auto_fill(parsed: ParsedPattern, error: str = NO_MATCH_ERROR) -> AutoFillData:
    """AutoFillData built from the pattern's own fields plus fallback constants."""
    return AutoFillData(
        receptacle=parsed.receptacle,
        cable_type=parsed.conduit_type,
        whip_length=parsed.whip_text,
        tail_length=parsed.tail_text,
        label_color=parsed.label_color,
        conduit_size=DEFAULT_CONDUIT_SIZE,
        conductor_awg=DEFAULT_CONDUCTOR_AWG,
        voltage=DEFAULT_VOLTAGE,
        error=error,
    )


@dataclass
class MatchResult:
    input_pattern: str
    parsed: ParsedPattern
    auto_fill: AutoFillData
    matched_row: object | None = None    # LookupRow on the lookup path
    resolution: object | None = None     # catalog Resolution on the catalog path
    source: str = ""

    @property
    def matched(self) -> bool:
        return self.auto_fill.error is None

    @property
    def generated_row_count(self) -> int:
        return self.parsed.quantity

    @property
    def generated_patterns(self) -> list[str]:
        return [self.parsed.base_pattern] * self.parsed.quantity


@dataclass
class BatchResult:
    source: str
    results: list[MatchResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.results)

    @property
    def matched_count(self) -> int:
        return sum(1 for r in self.results if r.matched)

    @property
    def total_rows(self) -> int:
        return sum(r.generated_row_count for r in self.results)

    def summary(self) -> dict:
        return {
            "source": self.source,
            "patterns": self.processed_count,
            "matched": self.matched_count,
            "defaulted": self.processed_count - self.matched_count,
            "rows": self.total_rows,
        }


# ── Resolver interface ─────────────────────────────────────

class PatternResolver:
    """Base class: subclasses implement `match` for one tokenized pattern."""

    source = ""

    def match(self, line: str, parsed: ParsedPattern) -> MatchResult:
        raise NotImplementedError

    def resolve(self, line: str) -> MatchResult:
        return self.match(line, tokenize(line))

    def process(self, lines: list[str] | str) -> BatchResult:
        """
        Resolve a batch. A string is split into non-blank lines; a list is
        processed entry for entry, so every entry yields exactly one result.
        """
        if isinstance(lines, str):
            lines = split_pattern_lines(lines)

        batch = BatchResult(source=self.source)
        for idx, line in enumerate(lines, start=1):
            result = self.resolve(line)
            batch.results.append(result)
            if not result.matched:
                batch.warnings.append(f"Line {idx} ({line!r}): {result.auto_fill.error}")
        return batch
