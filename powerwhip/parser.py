"""
parser.py — Catalog-based receptacle pattern parser.

Turns lines like "460R9W, Metal Conduit, 50ft, Pigtail 10" into AutoFillData
using only the built-in receptacle catalog, and scores how much of the line
was actually understood.
"""

from __future__ import annotations

from powerwhip.catalog import Resolution, resolve_receptacle, suggest_receptacles
from powerwhip.matching import AutoFillData, MatchResult, PatternResolver, default_auto_fill
from powerwhip.patterns import ParsedPattern, format_length, normalize_conduit

DEFAULT_TAIL_LENGTH = 10.0


def score_confidence(parsed: ParsedPattern, resolution: Resolution, conduit: str,
                     whip: float, tail: float) -> float:
    """
    Additive confidence in [0, 1], advisory only.

    base 0.5, +0.3 receptacle resolved to a different standard id,
    +0.15 conduit, +0.15 whip length, +0.10 tail length.
    """
    confidence = 0.5
    if resolution.found and resolution.spec.standard_id != parsed.receptacle:
        confidence += 0.3
    if conduit:
        confidence += 0.15
    if whip > 0:
        confidence += 0.15
    if tail > 0:
        confidence += 0.10
    return round(min(confidence, 1.0), 4)


def _not_found_message(token: str) -> str:
    if not token.strip():
        return "No receptacle given - using defaults"
    msg = f"Receptacle '{token}' not found in receptacle catalog - using defaults"
    hints = suggest_receptacles(token)
    if hints:
        msg += f" (closest: {', '.join(hints)})"
    return msg


class CatalogResolver(PatternResolver):
    source = "catalog"

    def match(self, line: str, parsed: ParsedPattern) -> MatchResult:
        resolution = resolve_receptacle(parsed.receptacle)
        conduit = normalize_conduit(parsed.conduit_type)
        whip = parsed.whip_length
        tail = parsed.tail_length
        confidence = score_confidence(parsed, resolution, conduit, whip, tail)

        whip_text = format_length(whip) if whip > 0 else ""
        tail_text = format_length(tail or DEFAULT_TAIL_LENGTH)

        if resolution.found:
            spec = resolution.spec
            auto_fill = AutoFillData(
                receptacle=spec.standard_id,
                cable_type=conduit,
                whip_length=whip_text,
                tail_length=tail_text,
                label_color=parsed.label_color,
                conductor_awg=spec.wire_gauge,
                voltage=spec.voltage,
                current=spec.current,
                specifications=spec.description,
                confidence=confidence,
            )
        else:
            auto_fill = default_auto_fill(parsed, error=_not_found_message(parsed.receptacle))
            auto_fill.cable_type = conduit
            auto_fill.whip_length = whip_text
            auto_fill.tail_length = tail_text
            auto_fill.confidence = confidence

        return MatchResult(
            input_pattern=line,
            parsed=parsed,
            auto_fill=auto_fill,
            resolution=resolution,
            source=self.source,
        )
