from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from domain.models.currency import ConversionResult, RateEntry, RateSnapshot


class RateEntryResponse(BaseModel):
	code: str = Field(..., description='Three-letter currency code')
	name: str = Field(..., description='Display name')
	display_text: str = Field(..., description='Code and name, e.g. "USD - US Dollar"')
	nominal: int = Field(..., description='Unit count the quoted value applies to')
	value: Decimal = Field(..., description='Quoted price in RUB for nominal units')
	previous: Decimal = Field(..., description='Prior day quoted price')
	rate_per_unit: Decimal = Field(..., description='Price of one unit in RUB')

	@classmethod
	def from_entry(cls, entry: RateEntry) -> 'RateEntryResponse':
		return cls(
			code=entry.code,
			name=entry.display_name,
			display_text=entry.display_text,
			nominal=entry.nominal,
			value=entry.value,
			previous=entry.previous_value,
			rate_per_unit=entry.rate_per_unit,
		)


class RatesResponse(BaseModel):
	requested_date: date = Field(..., description='Date asked for, clamped to today')
	rates_date: date = Field(..., description='Date the rates were actually published for')
	previous_date: date | None = Field(None, description='Previous publication date')
	previous_url: str | None = Field(None, description='Upstream URL of the previous publication')
	timestamp: datetime | None = Field(None, description='Upstream publication timestamp')
	rates: list[RateEntryResponse]

	@classmethod
	def from_snapshot(cls, snapshot: RateSnapshot, requested_date: date) -> 'RatesResponse':
		return cls(
			requested_date=requested_date,
			rates_date=snapshot.date,
			previous_date=snapshot.previous_date,
			previous_url=snapshot.previous_url,
			timestamp=snapshot.timestamp,
			rates=[RateEntryResponse.from_entry(e) for e in sorted(snapshot.entries.values(), key=lambda e: e.code)],
		)


class CurrencyListResponse(BaseModel):
	rates_date: date
	currencies: list[RateEntryResponse] = Field(description='Base currency first, then by code')


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount')
	exchange_rate: Decimal = Field(..., description='Units of target per one unit of source')
	requested_date: date
	rates_date: date
	date_hint: str | None = Field(None, description='Set when rates come from an earlier date')

	@classmethod
	def from_result(cls, result: ConversionResult) -> 'ConversionResponse':
		return cls(
			from_currency=result.from_currency,
			to_currency=result.to_currency,
			original_amount=result.original_amount,
			converted_amount=result.converted_amount,
			exchange_rate=result.exchange_rate,
			requested_date=result.requested_date,
			rates_date=result.rates_date,
			date_hint=result.date_hint,
		)


class CachedDatesResponse(BaseModel):
	dates: list[date] = Field(description='Dates held in the rate cache, newest first')
