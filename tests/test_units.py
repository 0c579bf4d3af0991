"""Tests for the conversion table and the pivot resolver."""

import numpy as np
import pytest

from conversor.config import UNITS_BY_CATEGORY
from conversor.core.models import ConversionEdge
from conversor.core.units import DEFAULT_EDGES, DuplicateEdgeError, UnitConverter, default_converter


@pytest.fixture
def converter():
    return UnitConverter()


class TestKnownValues:

    def test_meters_to_feet(self, converter):
        assert converter.convert(100, "Metros", "Pies") == pytest.approx(328.084)

    def test_celsius_to_fahrenheit_freezing_point(self, converter):
        assert converter.convert(0, "Celsius", "Fahrenheit") == 32

    def test_kilograms_to_pounds(self, converter):
        assert converter.convert(1, "Kilogramos", "Libras") == pytest.approx(2.20462)

    def test_miles_to_meters_uses_direct_literal(self, converter):
        assert converter.convert(1, "Millas", "Metros") == pytest.approx(1609.34)
        assert converter.convert(1609.34, "Metros", "Millas") == pytest.approx(1.0)

    def test_kelvin_to_fahrenheit(self, converter):
        assert converter.convert(373.15, "Kelvin", "Fahrenheit") == pytest.approx(212)


class TestIdentity:

    @pytest.mark.parametrize("unit", ["Metros", "Kelvin", "Onzas Líquidas"])
    def test_registered_unit(self, converter, unit):
        assert converter.convert(42.5, unit, unit) == 42.5

    def test_unknown_unit(self, converter):
        assert converter.convert(7.0, "Leguas", "Leguas") == 7.0
        assert converter.can_convert("Leguas", "Leguas")

    def test_identity_with_empty_table(self):
        empty = UnitConverter(edges=[])
        assert empty.convert(3.0, "Metros", "Metros") == 3.0
        assert empty.list_units() == []


class TestDirectEdges:

    def test_every_edge_applies_its_function(self, converter):
        for (from_unit, to_unit), fn in converter.edges.items():
            assert converter.convert(12.5, from_unit, to_unit) == fn(12.5)

    @pytest.mark.parametrize("a,b", [
        ("Metros", "Pies"),
        ("Kilogramos", "Onzas"),
        ("Litros", "Galones"),
        ("Celsius", "Kelvin"),
        ("Fahrenheit", "Kelvin"),
    ])
    def test_round_trip(self, converter, a, b):
        there = converter.convert(57.3, a, b)
        assert converter.convert(there, b, a) == pytest.approx(57.3)

    def test_edges_are_directional(self):
        conv = UnitConverter(edges=[("A", "B", lambda v: v * 2)])
        assert conv.convert(1, "A", "B") == 2
        assert conv.convert(2, "B", "A") is None

    def test_table_is_read_only(self, converter):
        with pytest.raises(TypeError):
            converter.edges[ConversionEdge("Metros", "Leguas")] = lambda v: v

    def test_every_edge_is_increasing(self, converter):
        ascending = [-50.0, 0.0, 1.0, 1000.0]
        for edge, fn in converter.edges.items():
            outputs = [fn(v) for v in ascending]
            assert all(a < b for a, b in zip(outputs, outputs[1:])), edge

    def test_membership_requires_a_pair(self, converter):
        assert ("Metros", "Pies") in converter
        assert ConversionEdge("Metros", "Pies") in converter
        assert 5 not in converter
        assert "ab" not in converter
        assert ["Metros", "Pies"] not in converter
        assert ("Metros", "Pies", "Yardas") not in converter


class TestPivotSearch:

    def test_feet_to_centimeters_goes_through_meters(self, converter):
        assert ("Pies", "Centímetros") not in converter
        assert converter.find_path("Pies", "Centímetros") == ("Pies", "Metros", "Centímetros")
        assert converter.convert(1, "Pies", "Centímetros") == pytest.approx(30.48, rel=1e-5)

    def test_pounds_to_grams(self, converter):
        assert converter.can_convert("Libras", "Gramos")
        assert converter.convert(1, "Libras", "Gramos") == pytest.approx(453.592, rel=1e-5)

    def test_gallons_to_milliliters(self, converter):
        assert converter.convert(1, "Galones", "Mililitros") == pytest.approx(3785.41)

    def test_base_unit_preferred_as_pivot(self):
        edges = [
            ("A", "X", lambda v: v + 1),
            ("X", "B", lambda v: v + 1),
            ("A", "Metros", lambda v: v * 10),
            ("Metros", "B", lambda v: v * 10),
        ]
        conv = UnitConverter(edges=edges)
        assert conv.find_path("A", "B") == ("A", "Metros", "B")
        assert conv.convert(1, "A", "B") == 100

    def test_registration_order_without_base_unit(self):
        edges = [
            ("A", "X", lambda v: v + 1),
            ("A", "Y", lambda v: v + 2),
            ("Y", "B", lambda v: v),
            ("X", "B", lambda v: v),
        ]
        conv = UnitConverter(edges=edges)
        assert conv.find_path("A", "B") == ("A", "X", "B")

    def test_two_pivots_are_not_searched(self):
        edges = [
            ("A", "P", lambda v: v),
            ("P", "Q", lambda v: v),
            ("Q", "B", lambda v: v),
        ]
        conv = UnitConverter(edges=edges)
        assert conv.convert(1, "A", "B") is None
        assert not conv.can_convert("A", "B")

    @pytest.mark.parametrize("category", list(UNITS_BY_CATEGORY))
    def test_every_unit_reaches_its_category(self, converter, category):
        units = UNITS_BY_CATEGORY[category]
        for a in units:
            for b in units:
                assert converter.can_convert(a, b), (a, b)
                assert converter.convert(1.0, a, b) is not None


class TestNoPath:

    def test_celsius_to_feet(self, converter):
        assert converter.convert(10, "Celsius", "Pies") is None
        assert not converter.can_convert("Celsius", "Pies")
        assert converter.find_path("Celsius", "Pies") is None

    def test_unknown_unit(self, converter):
        assert converter.convert(1, "Metros", "Leguas") is None
        assert converter.describe(1, "Leguas", "Metros") is None
        assert converter.convert_many([1, 2], "Leguas", "Metros") is None

    def test_can_convert_agrees_with_convert(self, converter):
        units = converter.list_units()
        for a in units:
            for b in units:
                assert converter.can_convert(a, b) == (converter.convert(1.0, a, b) is not None)


class TestListUnits:

    def test_sorted_without_duplicates(self, converter):
        units = converter.list_units()
        assert units == sorted(set(units))

    def test_counts_distinct_endpoints(self, converter):
        endpoints = {u for a, b, _ in DEFAULT_EDGES for u in (a, b)}
        assert len(converter.list_units()) == len(endpoints) == 23

    def test_matches_ui_categories(self, converter):
        ui_units = {u for units in UNITS_BY_CATEGORY.values() for u in units}
        assert set(converter.list_units()) == ui_units

    def test_returns_a_copy(self, converter):
        converter.list_units().append("Leguas")
        assert "Leguas" not in converter.list_units()


class TestConstruction:

    def test_duplicate_edge_rejected(self):
        edges = [
            ("Millas", "Metros", lambda v: v * 1609.34),
            ("Millas", "Metros", lambda v: v * 1609.0),
        ]
        with pytest.raises(DuplicateEdgeError):
            UnitConverter(edges=edges)

    def test_default_table_has_no_duplicates(self):
        keys = [(a, b) for a, b, _ in DEFAULT_EDGES]
        assert len(keys) == len(set(keys))
        assert len(UnitConverter()) == len(DEFAULT_EDGES)

    def test_default_converter_is_shared(self):
        assert default_converter() is default_converter()


class TestDescribe:

    def test_direct(self, converter):
        res = converter.describe(2.0, "Kilómetros", "Metros")
        assert res.result == 2000.0
        assert res.unit_rate == 1000.0
        assert res.path == ("Kilómetros", "Metros")
        assert res.pivot is None

    def test_with_pivot(self, converter):
        res = converter.describe(10.0, "Pies", "Milímetros")
        assert res.pivot == "Metros"
        assert res.result == pytest.approx(3048.0, rel=1e-5)
        assert res.unit_rate == pytest.approx(304.8, rel=1e-5)

    def test_identity(self, converter):
        res = converter.describe(5.0, "Litros", "Litros")
        assert res.result == 5.0
        assert res.unit_rate == 1.0
        assert res.path == ("Litros",)

    def test_result_is_hashable(self, converter):
        a = converter.describe(1.0, "Pies", "Centímetros")
        b = converter.describe(1.0, "Pies", "Centímetros")
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestConvertMany:

    def test_matches_scalar_convert(self, converter):
        values = np.array([-40.0, 0.0, 36.6, 100.0])
        results = converter.convert_many(values, "Celsius", "Fahrenheit")
        expected = [converter.convert(v, "Celsius", "Fahrenheit") for v in values]
        np.testing.assert_allclose(results, expected)

    def test_accepts_lists(self, converter):
        results = converter.convert_many([1, 2, 3], "Metros", "Centímetros")
        np.testing.assert_allclose(results, [100.0, 200.0, 300.0])
