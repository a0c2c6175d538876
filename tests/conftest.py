"""
Shared fixtures: a USD two-curve market (Fed Funds discounting, Libor 3M forward).
"""

from datetime import date

import pytest

from curvelib.calibration import CurveSpec, UnitSpec, calibrate
from curvelib.curves import CurveGenerator, InterpolatedCurve
from curvelib.indices import USD, USD_FEDFUND, USD_LIBOR_3M
from curvelib.instruments import (
    DepositONGenerator,
    FixedIborSwapGenerator,
    FRAGenerator,
    IborDepositGenerator,
    OISSwapGenerator,
)
from curvelib.provider import CurveProvider

NOW = date(2011, 9, 28)

DSC_NAME = "USD-DSC"
FWD3_NAME = "USD-FWD3"

GEN_DEPOSIT_ON = DepositONGenerator("USD-ON", USD)
GEN_OIS = OISSwapGenerator("USD-OIS", USD, USD_FEDFUND)
GEN_LIBOR_DEPOSIT = IborDepositGenerator("USD-LIBOR3M", USD, USD_LIBOR_3M)
GEN_FRA = FRAGenerator("USD-FRA3M", USD, USD_LIBOR_3M)
GEN_IRS = FixedIborSwapGenerator("USD-IRS3M", USD, USD_LIBOR_3M)

OIS_TENORS = ["1M", "2M", "3M", "6M", "9M", "1Y", "2Y", "3Y", "4Y", "5Y", "10Y"]
DSC_QUOTES = [0.04] * (1 + len(OIS_TENORS))

FRA_TENORS = ["3M", "6M"]
IRS_TENORS = ["1Y", "2Y", "3Y", "5Y", "7Y", "10Y"]
FWD3_QUOTES = [0.042, 0.042, 0.042, 0.042, 0.043, 0.047, 0.054, 0.057, 0.060]

TIGHT = {"tolerance_abs": 1e-13, "tolerance_rel": 1e-13}


def dsc_instruments(notional=1.0):
    instruments = [GEN_DEPOSIT_ON.generate(NOW, "0D", DSC_QUOTES[0], notional)]
    instruments += [
        GEN_OIS.generate(NOW, tenor, quote, notional)
        for tenor, quote in zip(OIS_TENORS, DSC_QUOTES[1:])
    ]
    return instruments


def fwd3_instruments(notional=1.0):
    instruments = [GEN_LIBOR_DEPOSIT.generate(NOW, "0M", FWD3_QUOTES[0], notional)]
    instruments += [
        GEN_FRA.generate(NOW, tenor, quote, notional)
        for tenor, quote in zip(FRA_TENORS, FWD3_QUOTES[1:3])
    ]
    instruments += [
        GEN_IRS.generate(NOW, tenor, quote, notional)
        for tenor, quote in zip(IRS_TENORS, FWD3_QUOTES[3:])
    ]
    return instruments


def dsc_curve_spec():
    return CurveSpec(DSC_NAME, tuple(dsc_instruments()), CurveGenerator("linear"),
                     currencies=(USD,), indices=(USD_FEDFUND,))


def fwd3_curve_spec():
    return CurveSpec(FWD3_NAME, tuple(fwd3_instruments()), CurveGenerator("cubic_spline"),
                     indices=(USD_LIBOR_3M,))


@pytest.fixture(scope="session")
def valuation_date():
    return NOW


@pytest.fixture(scope="session")
def dsc_unit():
    """Discounting curve on the overnight deposit and OIS."""
    return UnitSpec((dsc_curve_spec(),))


@pytest.fixture(scope="session")
def fwd3_unit():
    """Libor 3M forward curve on deposit, FRAs and swaps, discounted on DSC."""
    return UnitSpec((fwd3_curve_spec(),))


@pytest.fixture(scope="session")
def usd_units(dsc_unit, fwd3_unit):
    return [dsc_unit, fwd3_unit]


@pytest.fixture(scope="session")
def usd_calibration(usd_units):
    """Two units calibrated in sequence: (provider, bundle)."""
    return calibrate(usd_units, config=TIGHT)


@pytest.fixture(scope="session")
def sample_swap():
    """4Y receiver swap struck at 5%, notional 1 (between calibration nodes)."""
    receiver = FixedIborSwapGenerator("USD-IRS3M", USD, USD_LIBOR_3M, payer=False)
    return receiver.generate(NOW, "4Y", 0.05, 1.0, quote_id="TRADE")


@pytest.fixture
def two_curve_provider():
    """Hand-built provider: linear DSC and cubic spline FWD3 curves."""
    dsc = InterpolatedCurve(DSC_NAME, [0.25, 1.0, 2.0, 5.0, 10.0],
                            [0.030, 0.031, 0.033, 0.036, 0.038])
    fwd = InterpolatedCurve(FWD3_NAME, [0.25, 0.5, 1.0, 3.0, 7.0, 10.0],
                            [0.041, 0.042, 0.044, 0.048, 0.055, 0.058],
                            interpolation="cubic_spline", right="linear")
    return CurveProvider(
        {DSC_NAME: dsc, FWD3_NAME: fwd},
        currencies={USD: DSC_NAME},
        indices={USD_FEDFUND: DSC_NAME, USD_LIBOR_3M: FWD3_NAME},
    )
