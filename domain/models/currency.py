from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class RateEntry:
    code: str
    display_name: str
    nominal: int  # unit count the quoted value applies to
    value: Decimal
    previous_value: Decimal

    def __post_init__(self):
        if self.nominal <= 0:
            raise ValueError(f"Nominal for {self.code} must be positive, got {self.nominal}")
        if self.value <= 0:
            raise ValueError(f"Value for {self.code} must be positive, got {self.value}")

    @property
    def rate_per_unit(self) -> Decimal:
        """Price of exactly one unit in the base currency."""
        return self.value / self.nominal

    @property
    def display_text(self) -> str:
        return f"{self.code} - {self.display_name}"


@dataclass(frozen=True)
class RateSnapshot:
    date: date
    entries: Mapping[str, RateEntry]
    previous_date: date | None = None
    previous_url: str | None = None
    timestamp: datetime | None = None

    def __post_init__(self):
        # Read-only view so a snapshot shared out of the cache cannot be mutated
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, code: str) -> RateEntry | None:
        return self.entries.get(code)


@dataclass(frozen=True)
class ResolvedRates:
    snapshot: RateSnapshot | None
    actual_date: date
    requested_date: date  # after truncation and the clamp to today

    @property
    def found(self) -> bool:
        return self.snapshot is not None


@dataclass(frozen=True)
class ConversionResult:
    from_currency: str
    to_currency: str
    original_amount: Decimal
    converted_amount: Decimal
    exchange_rate: Decimal  # units of to_currency per one from_currency
    requested_date: date
    rates_date: date
    date_hint: str | None = field(default=None)
