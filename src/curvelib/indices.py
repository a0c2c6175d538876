"""
Currency and index identifiers.

Identifiers are frozen dataclasses: hashable, compared by value, and used as
keys of the currency and index bindings of a CurveProvider.
"""

from dataclasses import dataclass

from .conventions import DayCount


@dataclass(frozen=True)
class Currency:
    """ISO currency identifier."""
    code: str

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class IborIndex:
    """
    Term (Ibor-like) rate index.

    Attributes:
        name: Index name, e.g. "USDLIBOR3M"
        currency: Currency of the index
        tenor: Tenor of the underlying deposit, e.g. "3M"
        day_count: Accrual day count of the fixing period
        spot_lag: Business days between fixing and period start
    """
    name: str
    currency: Currency
    tenor: str
    day_count: DayCount = DayCount.ACT_360
    spot_lag: int = 2

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OvernightIndex:
    """Overnight rate index (Fed Funds, EONIA, SOFR, ...)."""
    name: str
    currency: Currency
    day_count: DayCount = DayCount.ACT_360

    def __str__(self) -> str:
        return self.name


USD = Currency("USD")
EUR = Currency("EUR")

USD_FEDFUND = OvernightIndex("FEDFUND", USD)
USD_LIBOR_3M = IborIndex("USDLIBOR3M", USD, "3M")
EUR_EONIA = OvernightIndex("EONIA", EUR)
EUR_EURIBOR_6M = IborIndex("EURIBOR6M", EUR, "6M")


__all__ = [
    "Currency",
    "IborIndex",
    "OvernightIndex",
    "USD",
    "EUR",
    "USD_FEDFUND",
    "USD_LIBOR_3M",
    "EUR_EONIA",
    "EUR_EURIBOR_6M",
]
