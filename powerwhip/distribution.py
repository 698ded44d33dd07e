"""
distribution.py — Natural-language whip order specifications.

Reads free text such as

    120 power whips total
    IEC pin and sleeve, liquid tight conduit
    lengths 20-80
    red, orange, blue, yellow labels

and spreads the total quantity evenly over every length x color
configuration, producing ordinary pattern lines for the resolvers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from powerwhip.loader import load_rules

_QUANTITY_PATTERNS = [
    re.compile(r'(\d+)\s*(?:power\s*)?whips?\s*(?:total|needed|required)', re.IGNORECASE),
]
_LENGTH_RANGE = re.compile(r"(\d+)['’]?\s*-\s*(\d+)['’]?")
_DISCRETE_LENGTHS = re.compile(r'lengths?:\s*([\d,\s]+)', re.IGNORECASE)

_FEATURES = [
    (("ip67", "bell box"), "IP67 bell box included"),
    (("60a", "60 amp"), "60A"),
    (("#6 awg", "5 wires"), "5 wires - #6 AWG"),
]


@dataclass
class WhipSpecification:
    total_quantity: int = 0
    length_min: int = 20
    length_max: int = 80
    length_step: int = 20
    discrete_lengths: list[int] = field(default_factory=list)
    conduit_type: str = "LMZC"
    receptacle_type: str = "CS8269A"
    colors: list[str] = field(default_factory=list)
    tail_length: str = "10"
    features: list[str] = field(default_factory=list)

    @property
    def lengths(self) -> list[int]:
        if self.discrete_lengths:
            return list(self.discrete_lengths)
        if self.length_step <= 0:
            return [self.length_min]
        return list(range(self.length_min, self.length_max + 1, self.length_step))

    @property
    def configuration_count(self) -> int:
        return len(self.lengths) * len(self.colors)


def _new_specification(nl_rules: dict) -> WhipSpecification:
    defaults = nl_rules.get("defaults", {})
    length_range = defaults.get("length_range", {})
    return WhipSpecification(
        length_min=int(length_range.get("min", 20)),
        length_max=int(length_range.get("max", 80)),
        length_step=int(length_range.get("step", 20)),
        conduit_type=str(defaults.get("conduit_type", "LMZC")),
        receptacle_type=str(defaults.get("receptacle_type", "CS8269A")),
        colors=[str(c) for c in defaults.get("colors", [])],
        tail_length=str(defaults.get("tail_length", "10")),
    )


def parse_specification(text: str, rules: dict | None = None) -> WhipSpecification:
    """Parse a free-text order description line by line."""
    if rules is None:
        rules = load_rules()
    nl_rules = rules["natural_language"]
    spec = _new_specification(nl_rules)

    for line in (ln.strip() for ln in (text or "").splitlines()):
        if not line:
            continue
        lower = line.lower()

        for pattern in _QUANTITY_PATTERNS:
            m = pattern.search(line)
            if m:
                spec.total_quantity = int(m.group(1))
                break

        range_match = _LENGTH_RANGE.search(line)
        discrete_match = _DISCRETE_LENGTHS.search(line)
        if range_match and "length" in lower:
            low, high = sorted((int(range_match.group(1)), int(range_match.group(2))))
            spec.length_min = low
            spec.length_max = high
            spec.discrete_lengths = []
        elif discrete_match:
            lengths = [int(v) for v in re.findall(r'\d+', discrete_match.group(1))]
            if lengths:
                spec.discrete_lengths = lengths
                spec.length_min = min(lengths)
                spec.length_max = max(lengths)
                spec.length_step = lengths[1] - lengths[0] if len(lengths) > 1 else 20

        # Later phrases in the table override earlier ones
        for phrase, value in nl_rules["conduit_types"]:
            if phrase in lower:
                spec.conduit_type = str(value)
        for phrase, value in nl_rules["receptacle_types"]:
            if phrase in lower:
                spec.receptacle_type = str(value)

        colors = []
        for word, value in nl_rules["colors"]:
            if re.search(rf'\b{re.escape(word)}\b', lower) and value not in colors:
                colors.append(str(value))
        if colors:
            spec.colors = colors

        for keywords, feature in _FEATURES:
            if any(k in lower for k in keywords) and feature not in spec.features:
                spec.features.append(feature)

    return spec


def generate_distribution_patterns(spec: WhipSpecification, compact: bool = False) -> list[str]:
    """
    One pattern line per whip, spread evenly over lengths x colors.
    The remainder goes to the earliest configurations. With compact=True each
    configuration is emitted once with a `!qty` suffix instead.
    """
    if spec.total_quantity <= 0 or spec.configuration_count == 0:
        return []

    base_qty, remainder = divmod(spec.total_quantity, spec.configuration_count)
    patterns = []
    config_index = 0
    for length in spec.lengths:
        for color in spec.colors:
            qty = base_qty + (1 if config_index < remainder else 0)
            config_index += 1
            if qty == 0:
                continue
            line = f"{spec.receptacle_type}, {spec.conduit_type}, {length}, {spec.tail_length}, {color}"
            if compact:
                patterns.append(f"{line}!{qty}")
            else:
                patterns.extend([line] * qty)
    return patterns
