"""
pricing.py — Whip price chain.

    assembled = round(base x 6.4, 1)
    list      = round(assembled x 1.33, 2)

Prices supplied by a matched reference row win; anything missing is derived
from the next price up the chain, and the base falls back to DEFAULT_BASE_PRICE.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

ASSEMBLED_FACTOR = 6.4
LIST_MARKUP = 1.33
DEFAULT_BASE_PRICE = 287.2


@dataclass
class WhipPricing:
    base_price: float
    assembled_price: float = 0.0
    list_price: float = 0.0
    derived: bool = False     # True when any price came from the chain

    @property
    def price_to_wesco(self) -> float:
        return self.assembled_price


def _usable(value) -> bool:
    if value is None:
        return False
    try:
        return not math.isnan(float(value)) and float(value) > 0
    except (ValueError, TypeError):
        return False


def assembled_from_base(base_price: float) -> float:
    return round(base_price * ASSEMBLED_FACTOR, 1)


def list_from_assembled(assembled_price: float) -> float:
    return round(assembled_price * LIST_MARKUP, 2)


def derive_prices(base_price=None, assembled_price=None, list_price=None) -> WhipPricing:
    """Fill the gaps in a (base, assembled, list) triple."""
    derived = False
    if _usable(base_price):
        base = float(base_price)
    else:
        base = DEFAULT_BASE_PRICE
        derived = True

    if _usable(assembled_price):
        assembled = float(assembled_price)
    else:
        assembled = assembled_from_base(base)
        derived = True

    if _usable(list_price):
        list_p = float(list_price)
    else:
        list_p = list_from_assembled(assembled)
        derived = True

    return WhipPricing(base_price=base, assembled_price=assembled, list_price=list_p, derived=derived)
