"""
catalog.py — Receptacle reference catalog and resolution.

The catalog is a fixed, ordered list of (alias, spec) pairs. Several aliases
may point at the same spec (460R9W is sold as a NEMA 5-15R). Order matters:
substring fallback resolution returns the first alias that matches.
"""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz import fuzz, process


@dataclass(frozen=True)
class ReceptacleSpec:
    standard_id: str
    voltage: str         # volts, e.g. "250"
    current: str         # amps, e.g. "30"
    wire_gauge: str      # AWG
    description: str


# ── Catalog ────────────────────────────────────────────────

_NEMA_5_15R = ReceptacleSpec("5-15R", "125", "15", "14", "NEMA 5-15R, 15A, 125V")

RECEPTACLE_CATALOG: tuple[tuple[str, ReceptacleSpec], ...] = (
    # NEMA straight blade
    ("460R9W",   ReceptacleSpec("5-15R", "125", "15", "14", "NEMA 5-15R, 15A, 125V, White")),
    ("5-15R",    _NEMA_5_15R),
    ("5-20R",    ReceptacleSpec("5-20R", "125", "20", "12", "NEMA 5-20R, 20A, 125V")),
    # NEMA locking
    ("L5-15R",   ReceptacleSpec("L5-15R", "125", "15", "14", "NEMA L5-15R, 15A, 125V Locking")),
    ("L5-20R",   ReceptacleSpec("L5-20R", "125", "20", "12", "NEMA L5-20R, 20A, 125V Locking")),
    ("L6-15R",   ReceptacleSpec("L6-15R", "250", "15", "14", "NEMA L6-15R, 15A, 250V Locking")),
    ("L6-20R",   ReceptacleSpec("L6-20R", "250", "20", "12", "NEMA L6-20R, 20A, 250V Locking")),
    ("L6-30R",   ReceptacleSpec("L6-30R", "250", "30", "10", "NEMA L6-30R, 30A, 250V Locking")),
    # California Standard
    ("CS8269A",  ReceptacleSpec("CS8269A", "480", "50", "6", "California Standard CS8269A, 50A, 480V")),
    ("CS8365A",  ReceptacleSpec("CS8365A", "480", "60", "4", "California Standard CS8365A, 60A, 480V")),
    # IEC pin & sleeve
    ("IEC60309", ReceptacleSpec("IEC60309", "400", "32", "8", "IEC 60309, 32A, 400V Industrial")),
)


def catalog_keys() -> list[str]:
    return [alias for alias, _ in RECEPTACLE_CATALOG]


# ── Resolution ─────────────────────────────────────────────

@dataclass(frozen=True)
class Resolution:
    """Outcome of a catalog lookup. `spec` is None when nothing matched."""
    token: str
    spec: ReceptacleSpec | None = None
    matched_alias: str = ""
    exact: bool = False

    @property
    def found(self) -> bool:
        return self.spec is not None


def resolve_receptacle(token: str) -> Resolution:
    """
    Resolve a receptacle token against the catalog.

    Pass 1: exact alias match (case-insensitive).
    Pass 2: substring containment in either direction, first alias wins.
    Short tokens can hit many aliases in pass 2; that is accepted behavior.
    """
    upper = (token or "").strip().upper()
    if not upper:
        return Resolution(token=token or "")

    for alias, spec in RECEPTACLE_CATALOG:
        if alias == upper:
            return Resolution(token=token, spec=spec, matched_alias=alias, exact=True)

    for alias, spec in RECEPTACLE_CATALOG:
        if alias in upper or upper in alias:
            return Resolution(token=token, spec=spec, matched_alias=alias)

    return Resolution(token=token)


def suggest_receptacles(token: str, candidates: list[str] | None = None,
                        limit: int = 1, min_score: float = 60) -> list[str]:
    """Closest known receptacle ids for an unresolved token (advisory only)."""
    query = (token or "").strip().upper()
    if not query:
        return []
    pool = candidates if candidates is not None else catalog_keys()
    pool = [c for c in dict.fromkeys(str(c).strip().upper() for c in pool) if c]
    if not pool:
        return []
    hits = process.extract(query, pool, scorer=fuzz.ratio, limit=limit, score_cutoff=min_score)
    return [name for name, _score, _idx in hits]
