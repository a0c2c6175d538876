"""
Unit tests for provider and sensitivity modules.
"""

import numpy as np
import pytest

from curvelib.curves import create_flat_curve
from curvelib.errors import UnboundCurrency, UnboundIndex, CurveLibError
from curvelib.indices import EUR, EUR_EONIA, USD, USD_FEDFUND, USD_LIBOR_3M
from curvelib.provider import CurveProvider
from curvelib.sensitivity import CurveSensitivity, ForwardSensitivity, ParameterSensitivity


@pytest.fixture
def flat_provider():
    """Single flat 4% curve bound to USD and Fed Funds."""
    curve = create_flat_curve("USD-OIS", 0.04)
    return CurveProvider({"USD-OIS": curve}, {USD: "USD-OIS"}, {USD_FEDFUND: "USD-OIS"})


class TestCurveProvider:
    """Tests for CurveProvider lookups and snapshots."""

    def test_bindings(self, flat_provider):
        """Currency and index resolve to the bound curve."""
        assert flat_provider.curve_name(USD) == "USD-OIS"
        assert flat_provider.curve_name(USD_FEDFUND) == "USD-OIS"
        assert flat_provider.discounting_curve(USD) is flat_provider.curve("USD-OIS")

    def test_market_queries(self, flat_provider):
        """Discount factors and forwards come from the bound curves."""
        assert flat_provider.discount_factor(USD, 2.0) == pytest.approx(np.exp(-0.08))
        fwd = flat_provider.forward_rate(USD_FEDFUND, 0.0, 1.0, 1.0)
        assert fwd == pytest.approx(np.exp(0.04) - 1.0)

    def test_unbound_currency(self, flat_provider):
        """Missing currency binding raises UnboundCurrency."""
        with pytest.raises(UnboundCurrency) as info:
            flat_provider.discount_factor(EUR, 1.0)
        assert info.value.currency == EUR
        assert isinstance(info.value, LookupError)
        assert isinstance(info.value, CurveLibError)

    def test_unbound_index(self, flat_provider):
        """Missing index binding raises UnboundIndex."""
        with pytest.raises(UnboundIndex):
            flat_provider.forward_rate(USD_LIBOR_3M, 0.0, 0.25, 0.25)

    def test_unknown_curve(self, flat_provider):
        """Curve lookups by name raise KeyError; bindings must reference curves."""
        with pytest.raises(KeyError):
            flat_provider.curve("EUR-OIS")
        with pytest.raises(ValueError):
            CurveProvider({}, {USD: "USD-OIS"})

    def test_with_curves_is_a_new_snapshot(self, flat_provider):
        """Adding curves leaves the original provider unchanged."""
        eur = create_flat_curve("EUR-OIS", 0.02)
        extended = flat_provider.with_curves([eur], currencies={EUR: "EUR-OIS"},
                                             indices={EUR_EONIA: "EUR-OIS"})

        assert extended.has_curve("EUR-OIS")
        assert not flat_provider.has_curve("EUR-OIS")
        assert EUR not in flat_provider.currencies
        assert extended.curve("USD-OIS") is flat_provider.curve("USD-OIS")
        assert extended.discount_factor(EUR, 1.0) == pytest.approx(np.exp(-0.02))

    def test_version_increases(self, flat_provider):
        """Every snapshot gets a fresh, larger version."""
        rebound = flat_provider.bind_index(USD_LIBOR_3M, "USD-OIS")
        assert rebound.version > flat_provider.version
        assert rebound.curve_name(USD_LIBOR_3M) == "USD-OIS"

    def test_bind_currency(self, flat_provider):
        """Rebinding a currency leaves the original snapshot untouched."""
        extended = flat_provider.with_curves([create_flat_curve("EUR-OIS", 0.02)])
        rebound = extended.bind_currency(USD, "EUR-OIS")
        assert rebound.curve_name(USD) == "EUR-OIS"
        assert extended.curve_name(USD) == "USD-OIS"

    def test_merged(self, flat_provider):
        """Curves of the other provider are layered on top."""
        other = CurveProvider({"USD-OIS": create_flat_curve("USD-OIS", 0.05)})
        merged = flat_provider.merged(other)
        assert merged.curve("USD-OIS").zero_rate(1.0) == pytest.approx(0.05)
        assert merged.curve_name(USD) == "USD-OIS"

    def test_discounting_parameter_sensitivity(self, flat_provider):
        """A discounting point maps through the interpolation weights."""
        sens = CurveSensitivity.of_discounting("USD-OIS", 0.75, 2.0)
        ps = flat_provider.parameter_sensitivity(sens)
        expected = np.zeros(8)
        expected[1] = 1.0   # 0.5 -> 1.0 bracket, halfway
        expected[2] = 1.0
        np.testing.assert_allclose(ps["USD-OIS"], expected)

    def test_forward_parameter_sensitivity(self, flat_provider):
        """A forward point maps to the curve's forward rate sensitivity."""
        point = ForwardSensitivity(1.0, 2.0, 1.0, 3.0)
        ps = flat_provider.parameter_sensitivity(CurveSensitivity.of_forward("USD-OIS", point))
        curve = flat_provider.curve("USD-OIS")
        np.testing.assert_allclose(ps["USD-OIS"], 3.0 * curve.forward_rate_parameter_sensitivity(1.0, 2.0, 1.0))


class TestSensitivityAlgebra:
    """Tests for CurveSensitivity and ParameterSensitivity arithmetic."""

    def test_curve_sensitivity_plus(self):
        """Point lists are concatenated per curve."""
        a = CurveSensitivity.of_discounting("A", 1.0, 2.0)
        b = CurveSensitivity.of_discounting("A", 2.0, 3.0) + CurveSensitivity.of_discounting("B", 1.0, 1.0)
        total = a + b
        assert total.discounting["A"] == [(1.0, 2.0), (2.0, 3.0)]
        assert total.curve_names == ["A", "B"]
        assert a.discounting["A"] == [(1.0, 2.0)]

    def test_curve_sensitivity_scaling(self):
        """Scaling multiplies every point value."""
        fwd = ForwardSensitivity(0.0, 0.25, 0.25, 4.0)
        sens = 2.0 * CurveSensitivity.of_forward("F", fwd)
        assert sens.forward["F"][0].value == 8.0
        assert (-sens).forward["F"][0].value == -8.0

    def test_parameter_sensitivity_plus(self):
        """Missing curves count as zero."""
        a = ParameterSensitivity({"A": np.array([1.0, 2.0])})
        b = ParameterSensitivity({"A": np.array([0.5, 0.5]), "B": np.array([1.0])})
        total = a + b
        np.testing.assert_allclose(total["A"], [1.5, 2.5])
        np.testing.assert_allclose(total["B"], [1.0])
        assert len(a) == 1

    def test_parameter_sensitivity_shape_mismatch(self):
        """Adding vectors of different lengths for one curve raises."""
        a = ParameterSensitivity({"A": np.array([1.0, 2.0])})
        b = ParameterSensitivity({"A": np.array([1.0])})
        with pytest.raises(ValueError):
            a + b

    def test_parameter_sensitivity_scaling(self):
        """Scalar multiplication and subtraction."""
        a = ParameterSensitivity({"A": np.array([1.0, -2.0])})
        assert (a - a).allclose(ParameterSensitivity())
        np.testing.assert_allclose((3.0 * a)["A"], [3.0, -6.0])
        assert (-a).allclose(a * -1.0)

    def test_allclose_missing_curve(self):
        """allclose treats a missing curve as a zero vector."""
        a = ParameterSensitivity({"A": np.zeros(3)})
        assert a.allclose(ParameterSensitivity())
        assert not ParameterSensitivity({"A": np.ones(3)}).allclose(ParameterSensitivity())

    def test_to_frame(self):
        """Long table with one row per parameter."""
        frame = ParameterSensitivity({"A": np.array([1.0, 2.0]), "B": np.array([3.0])}).to_frame()
        assert list(frame.columns) == ["curve", "parameter", "sensitivity"]
        assert len(frame) == 3
        assert frame["sensitivity"].sum() == pytest.approx(6.0)
