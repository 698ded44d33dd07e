import pytest

from powerwhip.pricing import (
    DEFAULT_BASE_PRICE,
    assembled_from_base,
    derive_prices,
    list_from_assembled,
)


def test_default_chain():
    p = derive_prices()
    assert p.base_price == DEFAULT_BASE_PRICE
    assert p.assembled_price == pytest.approx(1838.1)
    assert p.list_price == pytest.approx(2444.67)
    assert p.price_to_wesco == p.assembled_price
    assert p.derived


def test_chain_formula():
    for base in (10.0, 85.0, 287.2, 1234.56):
        assembled = assembled_from_base(base)
        assert assembled == round(base * 6.4, 1)
        assert list_from_assembled(assembled) == round(assembled * 1.33, 2)


def test_supplied_prices_win():
    p = derive_prices(125.5, 180.75, 225.0)
    assert (p.base_price, p.assembled_price, p.list_price) == (125.5, 180.75, 225.0)
    assert not p.derived


def test_base_only():
    p = derive_prices(base_price=100.0)
    assert p.assembled_price == pytest.approx(640.0)
    assert p.list_price == pytest.approx(851.2)


def test_assembled_without_base():
    p = derive_prices(assembled_price=200.0)
    assert p.base_price == DEFAULT_BASE_PRICE
    assert p.assembled_price == 200.0
    assert p.list_price == pytest.approx(266.0)


@pytest.mark.parametrize("bad", [None, float("nan"), 0, -5, "abc"])
def test_unusable_values_are_derived(bad):
    p = derive_prices(bad, bad, bad)
    assert p.base_price == DEFAULT_BASE_PRICE
    assert p.assembled_price == pytest.approx(1838.1)
