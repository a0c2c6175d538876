#!/usr/bin/env python
"""
CurveLib Demo Script

This script demonstrates the full workflow of the curve library:
1. Build USD calibration instruments from market quotes
2. Calibrate the discounting (Fed Funds) and Libor 3M forward curves
3. Price a sample portfolio
4. Compute parameter and market-quote sensitivities
5. Print (and optionally export) the reports

Usage:
    python run_demo.py [--output-dir OUTPUT_DIR] [--joint] [--workers N] [--verbose]
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from curvelib.calibration import CalibrationConfig, CurveBuildingResult, CurveSpec, UnitSpec, calibrate
from curvelib.curves import CurveGenerator
from curvelib.indices import USD, USD_FEDFUND, USD_LIBOR_3M
from curvelib.instruments import (
    DepositONGenerator,
    FixedIborSwapGenerator,
    FRAGenerator,
    IborDepositGenerator,
    OISSwapGenerator,
)
from curvelib.pricers import price_portfolio, curve_sensitivity_portfolio
from curvelib.risk import MarketQuoteSensitivityCalculator


VALUATION_DATE = date(2011, 9, 28)

DSC_QUOTES = {
    "0D": 0.0400, "1M": 0.0400, "2M": 0.0400, "3M": 0.0400, "6M": 0.0400, "9M": 0.0400,
    "1Y": 0.0400, "2Y": 0.0400, "3Y": 0.0400, "4Y": 0.0400, "5Y": 0.0400, "10Y": 0.0400,
}

FWD3_QUOTES = {
    "DEP 0M": 0.0420, "FRA 3M": 0.0420, "FRA 6M": 0.0420,
    "IRS 1Y": 0.0420, "IRS 2Y": 0.0430, "IRS 3Y": 0.0470,
    "IRS 5Y": 0.0540, "IRS 7Y": 0.0570, "IRS 10Y": 0.0600,
}


def build_units(notional: float, joint: bool) -> List[UnitSpec]:
    """Calibration units for the USD discounting and Libor 3M curves."""
    print("\n" + "="*60)
    print("Building Calibration Instruments")
    print("="*60)

    deposit_on = DepositONGenerator("USD-ON", USD)
    ois = OISSwapGenerator("USD-OIS", USD, USD_FEDFUND)
    libor_deposit = IborDepositGenerator("USD-LIBOR3M", USD, USD_LIBOR_3M)
    fra = FRAGenerator("USD-FRA3M", USD, USD_LIBOR_3M)
    irs = FixedIborSwapGenerator("USD-IRS3M", USD, USD_LIBOR_3M)

    dsc = []
    for tenor, quote in DSC_QUOTES.items():
        gen = deposit_on if tenor == "0D" else ois
        dsc.append(gen.generate(VALUATION_DATE, tenor, quote, notional))
        print(f"  DSC  {dsc[-1].quote_id:>16s} @ {quote*100:.3f}%")

    fwd3 = []
    generators = {"DEP": libor_deposit, "FRA": fra, "IRS": irs}
    for label, quote in FWD3_QUOTES.items():
        kind, tenor = label.split()
        fwd3.append(generators[kind].generate(VALUATION_DATE, tenor, quote, notional))
        print(f"  FWD3 {fwd3[-1].quote_id:>16s} @ {quote*100:.3f}%")

    dsc_curve = CurveSpec("USD-DSC", tuple(dsc), CurveGenerator("linear"),
                          currencies=(USD,), indices=(USD_FEDFUND,))
    fwd3_curve = CurveSpec("USD-FWD3", tuple(fwd3), CurveGenerator("cubic_spline"),
                           indices=(USD_LIBOR_3M,))

    if joint:
        return [UnitSpec((dsc_curve, fwd3_curve))]
    return [UnitSpec((dsc_curve,)), UnitSpec((fwd3_curve,))]


def calibrate_curves(units: List[UnitSpec], workers: Optional[int]) -> CurveBuildingResult:
    """Run the calibration block and print the node tables."""
    print("\n" + "="*60)
    print("Calibrating Curves")
    print("="*60)

    config = CalibrationConfig(max_workers=workers)
    result = calibrate(units, config=config)

    for spec, steps in zip(units, result.steps):
        print(f"  Unit {spec.name}: converged in {steps} Newton steps")

    for name in result.provider.curve_names:
        frame = result.provider.curve(name).to_frame()
        print(f"\n{name} nodes:")
        print(frame.to_string(index=False, float_format=lambda x: f"{x:.6f}"))

    return result


def build_portfolio(notional: float):
    """A small book of off-market trades."""
    receiver = FixedIborSwapGenerator("USD-IRS3M", USD, USD_LIBOR_3M, payer=False)
    payer_ois = OISSwapGenerator("USD-OIS", USD, USD_FEDFUND)
    fra = FRAGenerator("USD-FRA3M", USD, USD_LIBOR_3M)
    return {
        "IRS 4Y REC 5.00%": receiver.generate(VALUATION_DATE, "4Y", 0.05, notional, quote_id="T1"),
        "IRS 8Y REC 5.50%": receiver.generate(VALUATION_DATE, "8Y", 0.055, notional, quote_id="T2"),
        "OIS 3Y PAY 3.90%": payer_ois.generate(VALUATION_DATE, "3Y", 0.039, notional, quote_id="T3"),
        "FRA 9M 4.30%": fra.generate(VALUATION_DATE, "9M", 0.043, notional, quote_id="T4"),
    }


def price_book(book: Dict[str, object], result: CurveBuildingResult, workers: Optional[int]) -> pd.DataFrame:
    """Present values of the book."""
    print("\n" + "="*60)
    print("Pricing Portfolio")
    print("="*60)

    pvs = price_portfolio(list(book.values()), result.provider, max_workers=workers)
    frame = pd.DataFrame({"trade": list(book), "pv": pvs})
    for trade, pv in zip(frame["trade"], frame["pv"]):
        print(f"  {trade:>18s} | PV: ${pv:>14,.2f}")
    print(f"\n  Total PV: ${frame['pv'].sum():>14,.2f}")
    return frame


def calculate_risk(book: Dict[str, object], result: CurveBuildingResult,
                   workers: Optional[int]) -> Dict[str, pd.DataFrame]:
    """Parameter and market-quote sensitivities of the book."""
    print("\n" + "="*60)
    print("Calculating Risk")
    print("="*60)

    instruments = list(book.values())
    parameter = curve_sensitivity_portfolio(instruments, result.provider, max_workers=workers)
    param_frame = parameter.to_frame()
    print("\nParameter sensitivities (per unit of zero rate):")
    print(param_frame.to_string(index=False, float_format=lambda x: f"{x:,.2f}"))

    calculator = MarketQuoteSensitivityCalculator(result.provider, result.bundle, max_workers=workers)
    per_trade = {name: calculator.calculate(inst) for name, inst in book.items()}
    quote_frame = pd.DataFrame(per_trade)
    quote_frame["TOTAL"] = pd.Series(calculator.calculate_portfolio(instruments))

    # Report per basis point
    bp_frame = quote_frame * 1e-4
    print("\nMarket-quote sensitivities (PV change per 1bp quote move):")
    print(bp_frame.to_string(float_format=lambda x: f"{x:,.2f}"))

    return {"parameter_sensitivity": param_frame, "market_quote_sensitivity": bp_frame}


def export(reports: Dict[str, pd.DataFrame], result: CurveBuildingResult, output_dir: Path) -> None:
    """Write the reports and the curve Jacobians as CSV."""
    output_dir.mkdir(parents=True, exist_ok=True)
    files = []
    for name, frame in reports.items():
        path = output_dir / f"{name}.csv"
        frame.to_csv(path)
        files.append(path)
    for name in result.bundle:
        path = output_dir / f"jacobian_{name}.csv"
        result.bundle.to_frame(name).to_csv(path)
        files.append(path)

    print(f"\nExported {len(files)} CSV files to {output_dir}")
    for f in files:
        print(f"  - {f}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="CurveLib Demo")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for CSV reports (not written when omitted)"
    )
    parser.add_argument(
        "--notional",
        type=float,
        default=10_000_000,
        help="Notional of the sample trades"
    )
    parser.add_argument(
        "--joint",
        action="store_true",
        help="Calibrate both curves in a single unit",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for row and portfolio evaluation",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log Newton steps",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    print("="*60)
    print("CURVELIB DEMO")
    print(f"Valuation Date: {VALUATION_DATE}")
    print("="*60)

    # Step 1: Instruments
    units = build_units(1.0, args.joint)

    # Step 2: Calibration
    result = calibrate_curves(units, args.workers)

    # Step 3: Pricing
    book = build_portfolio(args.notional)
    pv_frame = price_book(book, result, args.workers)

    # Step 4: Risk
    reports = calculate_risk(book, result, args.workers)
    reports["present_values"] = pv_frame

    # Step 5: Export
    if args.output_dir:
        export(reports, result, Path(args.output_dir))

    print("\n" + "="*60)
    print("DEMO COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
