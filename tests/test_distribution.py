import pytest

from powerwhip.distribution import generate_distribution_patterns, parse_specification
from powerwhip.parser import CatalogResolver

ORDER_TEXT = """
120 power whips total
IEC pin and sleeve, liquid tight conduit
lengths 20-80
red, orange, blue, yellow labels
"""


@pytest.fixture
def spec(rules):
    return parse_specification(ORDER_TEXT, rules)


class TestParseSpecification:
    def test_fields(self, spec):
        assert spec.total_quantity == 120
        assert spec.receptacle_type == "CS8269A"
        assert spec.conduit_type == "LMZC"
        assert spec.lengths == [20, 40, 60, 80]
        assert spec.colors == ["Red", "Orange", "Blue", "Yellow"]
        assert spec.configuration_count == 16

    def test_discrete_lengths(self, rules):
        spec = parse_specification("10 whips needed\nlengths: 10, 25, 30", rules)
        assert spec.lengths == [10, 25, 30]

    def test_defaults_without_hints(self, rules):
        spec = parse_specification("48 whips required", rules)
        assert spec.total_quantity == 48
        assert spec.receptacle_type == "CS8269A"
        assert spec.conduit_type == "LMZC"
        assert spec.colors == ["Red", "Orange", "Blue", "Yellow"]
        assert spec.lengths == [20, 40, 60, 80]

    def test_reversed_length_range(self, rules):
        spec = parse_specification("16 whips total\nlengths 80-20", rules)
        assert spec.lengths == [20, 40, 60, 80]

    def test_receptacle_phrase(self, rules):
        spec = parse_specification("12 whips total, NEMA 6-20 receptacles", rules)
        assert spec.receptacle_type == "L6-20R"

    def test_colors_deduplicated_by_word(self, rules):
        spec = parse_specification("gray and grey labels, tangent green", rules)
        assert spec.colors == ["Gray", "Green"]

    def test_features(self, rules):
        spec = parse_specification("IP67 bell box\n60A breakers\n5 wires #6 AWG", rules)
        assert spec.features == ["IP67 bell box included", "60A", "5 wires - #6 AWG"]

    def test_loads_rules_when_omitted(self):
        assert parse_specification("8 whips total").total_quantity == 8


class TestGenerate:
    def test_even_spread(self, spec):
        patterns = generate_distribution_patterns(spec)
        assert len(patterns) == 120
        counts = {p: patterns.count(p) for p in set(patterns)}
        assert len(counts) == 16
        assert sorted(counts.values()) == [7] * 8 + [8] * 8
        assert counts["CS8269A, LMZC, 20, 10, Red"] == 8
        assert counts["CS8269A, LMZC, 80, 10, Yellow"] == 7

    def test_compact(self, spec):
        patterns = generate_distribution_patterns(spec, compact=True)
        assert len(patterns) == 16
        assert patterns[0] == "CS8269A, LMZC, 20, 10, Red!8"
        assert sum(int(p.rsplit("!", 1)[1]) for p in patterns) == 120

    def test_compact_patterns_resolve(self, spec):
        batch = CatalogResolver().process(generate_distribution_patterns(spec, compact=True))
        assert batch.total_rows == 120
        assert batch.matched_count == 16

    def test_fewer_whips_than_configurations(self, rules):
        spec = parse_specification("3 whips total", rules)
        patterns = generate_distribution_patterns(spec)
        assert len(patterns) == 3
        assert patterns[0] == "CS8269A, LMZC, 20, 10, Red"

    def test_no_quantity(self, rules):
        assert generate_distribution_patterns(parse_specification("lengths 20-80", rules)) == []
