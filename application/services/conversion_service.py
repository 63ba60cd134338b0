import logging
from datetime import date, datetime
from decimal import Decimal

from application.services.rate_resolver import RateResolver
from domain.exceptions.currency import InvalidCurrencyError, RatesUnavailableError
from domain.models.currency import ConversionResult, RateEntry, ResolvedRates

logger = logging.getLogger(__name__)

BASE_CURRENCY = RateEntry(
	code='RUB',
	display_name='Russian Ruble',
	nominal=1,
	value=Decimal('1'),
	previous_value=Decimal('1'),
)

AMOUNT_PRECISION = Decimal('0.0001')


class ConversionService:
	def __init__(self, resolver: RateResolver):
		self.resolver = resolver

	async def get_rates(self, on_date: date | datetime) -> ResolvedRates:
		resolved = await self.resolver.resolve(on_date)
		if not resolved.found:
			raise RatesUnavailableError(
				f'No exchange rates available for {resolved.actual_date.isoformat()}'
			)
		return resolved

	async def list_currencies(self, on_date: date | datetime) -> tuple[list[RateEntry], date]:
		"""Base currency first, then the quoted currencies ordered by code."""
		resolved = await self.get_rates(on_date)
		quoted = sorted(
			(e for e in resolved.snapshot.entries.values() if e.code != BASE_CURRENCY.code),
			key=lambda e: e.code,
		)
		return [BASE_CURRENCY, *quoted], resolved.actual_date

	async def convert(
		self, amount: Decimal, from_currency: str, to_currency: str, on_date: date | datetime
	) -> ConversionResult:
		resolved = await self.get_rates(on_date)
		requested_date = resolved.requested_date

		source = self._lookup(resolved, from_currency)
		target = self._lookup(resolved, to_currency)

		exchange_rate = source.rate_per_unit / target.rate_per_unit
		if amount <= 0:
			converted = Decimal('0')
		else:
			# amount -> base currency -> target currency
			converted = amount * source.rate_per_unit / target.rate_per_unit

		date_hint = None
		if resolved.actual_date != requested_date:
			date_hint = (
				f'Rates for {requested_date:%d.%m.%Y} not found. '
				f'Showing rates for {resolved.actual_date:%d.%m.%Y}'
			)

		return ConversionResult(
			from_currency=source.code,
			to_currency=target.code,
			original_amount=amount,
			converted_amount=converted.quantize(AMOUNT_PRECISION),
			exchange_rate=exchange_rate,
			requested_date=requested_date,
			rates_date=resolved.actual_date,
			date_hint=date_hint,
		)

	@staticmethod
	def _lookup(resolved: ResolvedRates, code: str) -> RateEntry:
		code = code.upper()
		if code == BASE_CURRENCY.code:
			return BASE_CURRENCY
		entry = resolved.snapshot.get(code)
		if entry is None:
			raise InvalidCurrencyError(
				f'Currency {code} is not quoted on {resolved.actual_date.isoformat()}'
			)
		return entry
