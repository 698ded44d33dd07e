"""
patterns.py — Whip pattern tokenizing and field normalization.

A pattern line looks like:

    <receptacle>, <conduit>, <whip length>[ft], <tail length>[ft][, <color>][!<qty>]

e.g. "CS8269A, LMZC, 20, 10, Red", "460R9W, Metal Conduit, 50ft, Pigtail 10",
"L6-20R!3". Tokenizing never fails: missing fields come back empty and
downstream stages apply defaults.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass


# ── Regex rules ────────────────────────────────────────────

_WHIP_PATTERNS = [
    re.compile(r'(\d+(?:\.\d+)?)\s*(?:ft\.?|feet|foot)', re.IGNORECASE),
]

_TAIL_PATTERNS = [
    re.compile(r'(?:pigtail|pig tail|tail length|tail whip|whip tail)\s*(\d+(?:\.\d+)?)', re.IGNORECASE),
    re.compile(r'(?:tail|pigtail)\s*(\d+(?:\.\d+)?)', re.IGNORECASE),
]

_BARE_NUMBER = re.compile(r'(\d+(?:\.\d+)?)')
_LEADING_INT = re.compile(r'\d+')

FIELD_NAMES = ("receptacle", "conduit_type", "whip_length", "tail_length", "label_color")


# ── Conduit synonyms ───────────────────────────────────────
# Ordered: first containment hit wins ("mc" must stay after "lmzc").

CONDUIT_SYNONYMS: tuple[tuple[str, str], ...] = (
    ("metal conduit",                            "EMT"),
    ("emt",                                      "EMT"),
    ("electrical metallic tubing",               "EMT"),
    ("fmc",                                      "FMC"),
    ("flexible metal conduit",                   "FMC"),
    ("flexible metallic conduit",                "FMC"),
    ("lfmc",                                     "LFMC"),
    ("liquid tight flexible metal conduit",      "LFMC"),
    ("liquidtight flexible metal conduit",       "LFMC"),
    ("liquid-tight flexible metal conduit",      "LFMC"),
    ("lmzc",                                     "LMZC"),
    ("liquidtight flexible nonmetallic conduit", "LMZC"),
    ("mc",                                       "MC"),
    ("metal-clad cable",                         "MC"),
    ("armored cable",                            "MC"),
)


@dataclass(frozen=True)
class ParsedPattern:
    """One tokenized input line. Text fields keep the user's tokens verbatim."""
    raw: str
    receptacle: str = ""
    conduit_type: str = ""
    whip_text: str = ""
    tail_text: str = ""
    label_color: str = ""
    whip_length: float = 0.0
    tail_length: float = 0.0
    quantity: int = 1
    has_explicit_quantity: bool = False

    @property
    def base_pattern(self) -> str:
        return ", ".join([self.receptacle, self.conduit_type, self.whip_text,
                          self.tail_text, self.label_color])


# ── Field extraction ───────────────────────────────────────

def split_fields(text: str) -> list[str]:
    """Comma split; tab or whitespace split only when the text has no commas."""
    text = text or ""
    if "," in text:
        return [p.strip() for p in text.split(",")]
    if "\t" in text:
        return [p.strip() for p in text.split("\t") if p.strip()]
    return text.split()


def _to_feet(text: str) -> float:
    """Overflowing digit runs count as no length."""
    value = float(text)
    return value if math.isfinite(value) else 0.0


def extract_length(text: str, kind: str = "whip") -> float:
    """
    Pull a length in feet out of a token.

    Tries the unit (whip) or pigtail (tail) regexes first, then the first bare
    number, then gives up with 0.
    """
    if not text:
        return 0.0
    patterns = _WHIP_PATTERNS if kind == "whip" else _TAIL_PATTERNS
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            return _to_feet(m.group(1))
    m = _BARE_NUMBER.search(text)
    if m:
        return _to_feet(m.group(1))
    return 0.0


def extract_tail_length(text: str) -> float:
    """Tail length only when the token says so ("Pigtail 10", "tail 6")."""
    for pattern in _TAIL_PATTERNS:
        m = pattern.search(text or "")
        if m:
            return _to_feet(m.group(1))
    return 0.0


def format_length(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


def _parse_quantity(text: str) -> int:
    m = _LEADING_INT.match(text)
    if not m:
        return 1
    try:
        qty = int(m.group())
    except ValueError:
        # past the interpreter's int digit limit
        return 1
    return qty if qty > 0 else 1


def tokenize(line: str) -> ParsedPattern:
    """Split a pattern line into positional fields plus an optional `!qty` suffix."""
    text = "" if line is None else str(line)
    pattern_part, _, qty_part = text.partition("!")
    qty_part = qty_part.strip()

    parts = split_fields(pattern_part)
    fields = (parts + [""] * len(FIELD_NAMES))[:len(FIELD_NAMES)]
    receptacle, conduit, whip_text, tail_text, color = fields

    whip = extract_length(whip_text, "whip")
    tail = extract_length(tail_text, "tail")
    if tail == 0:
        # A pigtail phrase may sit in any position
        for part in parts:
            found = extract_tail_length(part)
            if found > 0:
                tail = found
                break

    return ParsedPattern(
        raw=text.strip(),
        receptacle=receptacle,
        conduit_type=conduit,
        whip_text=whip_text,
        tail_text=tail_text,
        label_color=color,
        whip_length=whip,
        tail_length=tail,
        quantity=_parse_quantity(qty_part),
        has_explicit_quantity=bool(qty_part),
    )


def split_pattern_lines(text: str) -> list[str]:
    """One pattern per non-blank line."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


# ── Normalization ──────────────────────────────────────────

def normalize_conduit(raw: str) -> str:
    """Map a free-form conduit phrase to its standard code, else upper-case it."""
    lower = (raw or "").strip().lower()
    if not lower:
        return ""
    for phrase, code in CONDUIT_SYNONYMS:
        if phrase in lower or lower in phrase:
            return code
    return raw.strip().upper()
