"""
Unit tests for curves module.
"""

import numpy as np
import pytest

from curvelib.curves import (
    InterpolatedCurve,
    CurveGenerator,
    Extrapolation,
    LinearInterpolator,
    CubicSplineInterpolator,
    LogLinearInterpolator,
    create_flat_curve,
    create_interpolator,
)


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample interpolation data."""
        x = np.array([0.25, 0.5, 1.0, 2.0, 5.0, 10.0])
        y = np.array([0.051, 0.052, 0.053, 0.050, 0.048, 0.045])
        return x, y

    @pytest.mark.parametrize("cls", [LinearInterpolator, CubicSplineInterpolator, LogLinearInterpolator])
    def test_exact_at_nodes(self, cls, sample_data):
        """Every scheme passes through the nodes."""
        x, y = sample_data
        interp = cls()
        interp.fit(x, y)
        for xi, yi in zip(x, y):
            assert abs(interp(xi) - yi) < 1e-12

    def test_linear_interpolator(self, sample_data):
        """At most two bracketing weights, summing to one."""
        x, y = sample_data
        interp = LinearInterpolator()
        interp.fit(x, y)

        w = interp.weights(0.75)
        assert np.count_nonzero(w) == 2
        assert abs(w[1] - 0.5) < 1e-12 and abs(w[2] - 0.5) < 1e-12
        assert abs(interp(0.75) - 0.0525) < 1e-12

    @pytest.mark.parametrize("method", ["linear", "cubic_spline", "log_linear"])
    @pytest.mark.parametrize("t", [0.1, 0.3, 1.7, 4.0, 9.99, 12.0])
    def test_weights_are_value_sensitivities(self, method, t, sample_data):
        """Weights equal the change of the interpolated value per node bump."""
        x, y = sample_data
        interp = create_interpolator(method, "linear", "linear")
        interp.fit(x, y)
        base = interp(t)
        weights = interp.weights(t)

        h = 1e-4
        for i in range(len(y)):
            bumped = create_interpolator(method, "linear", "linear")
            y_up = y.copy()
            y_up[i] += h
            bumped.fit(x, y_up)
            assert abs((bumped(t) - base) / h - weights[i]) < 1e-8

    @pytest.mark.parametrize("method", ["linear", "cubic_spline", "log_linear"])
    @pytest.mark.parametrize("extrapolation", [Extrapolation.FLAT, Extrapolation.LINEAR])
    def test_constant_is_preserved(self, method, extrapolation):
        """Weights sum to one, so a flat curve stays flat everywhere."""
        interp = create_interpolator(method, extrapolation, extrapolation)
        interp.fit(np.array([0.5, 1.0, 3.0, 7.0]), np.full(4, 0.04))
        for t in [0.1, 0.8, 2.0, 5.0, 10.0]:
            assert abs(interp.weights(t).sum() - 1.0) < 1e-12
            assert abs(interp(t) - 0.04) < 1e-12

    def test_flat_extrapolation(self, sample_data):
        """Flat extrapolation holds the boundary value with a single weight."""
        x, y = sample_data
        interp = LinearInterpolator(Extrapolation.FLAT, Extrapolation.FLAT)
        interp.fit(x, y)

        assert interp(0.0) == pytest.approx(y[0])
        assert interp(30.0) == pytest.approx(y[-1])
        np.testing.assert_array_equal(interp.weights(30.0), np.eye(len(y))[-1])

    def test_linear_extrapolation(self, sample_data):
        """Linear extrapolation continues the boundary slope."""
        x, y = sample_data
        interp = LinearInterpolator(Extrapolation.LINEAR, Extrapolation.LINEAR)
        interp.fit(x, y)

        slope = (y[-1] - y[-2]) / (x[-1] - x[-2])
        assert interp(12.0) == pytest.approx(y[-1] + 2.0 * slope)
        slope = (y[1] - y[0]) / (x[1] - x[0])
        assert interp(0.0) == pytest.approx(y[0] - 0.25 * slope)

    def test_cubic_spline_reproduces_lines(self):
        """A natural spline through collinear points is that line."""
        x = np.array([0.5, 1.0, 2.0, 3.5, 5.0])
        y = 0.01 + 0.002 * x
        interp = CubicSplineInterpolator(Extrapolation.LINEAR, Extrapolation.LINEAR)
        interp.fit(x, y)
        for t in [0.1, 0.75, 2.7, 4.9, 8.0]:
            assert interp(t) == pytest.approx(0.01 + 0.002 * t, abs=1e-12)

    def test_cubic_spline_natural_boundaries(self, sample_data):
        """Second derivative sensitivities vanish at both ends."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        np.testing.assert_allclose(interp.second_derivative_weights(0), 0.0, atol=1e-14)
        np.testing.assert_allclose(interp.second_derivative_weights(len(x) - 1), 0.0, atol=1e-14)

    def test_log_linear_constant_forward(self):
        """Between nodes, r*t is linear so forwards are piecewise constant."""
        x = np.array([1.0, 2.0])
        y = np.array([0.03, 0.04])
        interp = LogLinearInterpolator()
        interp.fit(x, y)
        rt = [interp(t) * t for t in (1.0, 1.25, 1.5, 2.0)]
        diffs = np.diff(rt)
        np.testing.assert_allclose(diffs[:2] / 0.25, 0.05, atol=1e-12)
        assert (rt[3] - rt[2]) / 0.5 == pytest.approx(0.05)

    def test_single_node(self):
        """A single node gives a constant curve."""
        interp = LinearInterpolator()
        interp.fit(np.array([1.0]), np.array([0.02]))
        assert interp(5.0) == pytest.approx(0.02)
        np.testing.assert_array_equal(interp.weights(0.5), [1.0])

    def test_invalid_inputs(self):
        """Unsorted times and unknown names are rejected."""
        with pytest.raises(ValueError):
            LinearInterpolator().fit(np.array([1.0, 0.5]), np.array([0.01, 0.02]))
        with pytest.raises(ValueError):
            create_interpolator("monotone_quartic")
        with pytest.raises(ValueError):
            Extrapolation.from_string("quadratic")

    def test_unfitted(self):
        """Querying before fit raises."""
        with pytest.raises(RuntimeError):
            LinearInterpolator().interpolate(1.0)


class TestInterpolatedCurve:
    """Tests for InterpolatedCurve."""

    @pytest.fixture
    def sample_curve(self):
        """Upward sloping curve with cubic spline interpolation."""
        return InterpolatedCurve(
            "USD-DSC",
            [0.5, 1.0, 2.0, 5.0, 10.0],
            [0.030, 0.032, 0.035, 0.038, 0.040],
            interpolation="cubic_spline",
        )

    def test_discount_factor_at_zero(self, sample_curve):
        """Discount factor at time 0 is 1."""
        assert sample_curve.discount_factor(0.0) == 1.0

    def test_discount_factor_from_zero_rate(self, sample_curve):
        """DF(t) = exp(-z(t) t)."""
        t = 3.0
        assert sample_curve.discount_factor(t) == pytest.approx(np.exp(-sample_curve.zero_rate(t) * t))
        assert sample_curve.discount_factor(2.0) < sample_curve.discount_factor(1.0)

    def test_flat_curve_forward(self):
        """Simple forward on a flat continuously compounded curve."""
        curve = create_flat_curve("FLAT", 0.04)
        fwd = curve.forward_rate(1.0, 1.5, 0.5)
        assert fwd == pytest.approx((np.exp(0.04 * 0.5) - 1) / 0.5, abs=1e-14)
        assert curve.zero_rate(50.0) == pytest.approx(0.04)

    def test_forward_rate_invalid_accrual(self, sample_curve):
        """Non-positive accrual factors are rejected."""
        with pytest.raises(ValueError):
            sample_curve.forward_rate(1.0, 1.0)

    def test_discount_factor_sensitivity(self, sample_curve):
        """Adjoint DF sensitivity matches a central finite difference."""
        t = 3.3
        sens = sample_curve.discount_factor_parameter_sensitivity(t)
        h = 1e-6
        for i in range(sample_curve.n_parameters):
            up = sample_curve.bump_parameter(i, h).discount_factor(t)
            down = sample_curve.bump_parameter(i, -h).discount_factor(t)
            assert sens[i] == pytest.approx((up - down) / (2 * h), abs=1e-9)

    def test_forward_rate_sensitivity(self, sample_curve):
        """Adjoint forward sensitivity matches a central finite difference."""
        start, end, af = 1.5, 1.75, 0.2528
        sens = sample_curve.forward_rate_parameter_sensitivity(start, end, af)
        h = 1e-6
        for i in range(sample_curve.n_parameters):
            up = sample_curve.bump_parameter(i, h).forward_rate(start, end, af)
            down = sample_curve.bump_parameter(i, -h).forward_rate(start, end, af)
            assert sens[i] == pytest.approx((up - down) / (2 * h), abs=1e-8)

    def test_immutable(self, sample_curve):
        """Node arrays are read-only; bumps build new curves."""
        with pytest.raises(ValueError):
            sample_curve.parameters[0] = 0.05
        bumped = sample_curve.bump_parallel(0.001)
        assert bumped is not sample_curve
        assert sample_curve.parameters[0] == 0.030
        np.testing.assert_allclose(bumped.parameters - sample_curve.parameters, 0.001)

    def test_with_parameters_keeps_setup(self, sample_curve):
        """with_parameters keeps name, nodes and interpolation."""
        new = sample_curve.with_parameters(np.full(5, 0.02))
        assert new.name == sample_curve.name
        assert new.interpolation == "cubic_spline"
        np.testing.assert_array_equal(new.times, sample_curve.times)

    def test_invalid_construction(self):
        """Mismatched lengths and negative times are rejected."""
        with pytest.raises(ValueError):
            InterpolatedCurve("X", [1.0, 2.0], [0.01])
        with pytest.raises(ValueError):
            InterpolatedCurve("X", [-1.0, 2.0], [0.01, 0.02])
        with pytest.raises(IndexError):
            create_flat_curve("X", 0.01).bump_parameter(99, 0.001)

    def test_to_frame(self, sample_curve):
        """Node table has one row per parameter."""
        frame = sample_curve.to_frame()
        assert list(frame.columns) == ["time", "zero_rate", "discount_factor"]
        assert len(frame) == 5
        assert frame["discount_factor"].iloc[0] == pytest.approx(np.exp(-0.015))

    def test_generator(self):
        """CurveGenerator applies its interpolation setup."""
        gen = CurveGenerator("log_linear", Extrapolation.FLAT, Extrapolation.LINEAR)
        curve = gen.generate("FWD", [1.0, 2.0], [0.02, 0.03])
        assert curve.interpolation == "log_linear"
        assert curve.right == Extrapolation.LINEAR
        assert curve.n_parameters == 2
