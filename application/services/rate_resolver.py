import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from domain.models.currency import RateSnapshot, ResolvedRates
from infrastructure.cache.memory_cache import RateStore
from infrastructure.providers.base import RatesProvider

logger = logging.getLogger(__name__)


class RateResolver:
	"""Finds the rate snapshot for a date, falling back to earlier days.

	The requested date is tried first, then up to ``max_lookback_days``
	earlier dates, one at a time. Fetch failures are soft misses: resolve()
	reports an absent snapshot instead of raising.
	"""

	def __init__(
		self,
		provider: RatesProvider,
		store: RateStore | None = None,
		max_lookback_days: int = 7,
		today: Callable[[], date] = date.today,
	):
		self.provider = provider
		self.store = store if store is not None else RateStore()
		self.max_lookback_days = max_lookback_days
		self._today = today

	def _normalize(self, requested: date | datetime) -> date:
		if isinstance(requested, datetime):
			requested = requested.date()
		today = self._today()
		if requested > today:
			logger.debug(f'Requested future date {requested.isoformat()}, using {today.isoformat()}')
			return today
		return requested

	async def resolve(self, requested: date | datetime) -> ResolvedRates:
		requested_date = self._normalize(requested)

		cached = self.store.get(requested_date)
		if cached is not None:
			logger.debug(f'Cache hit for {requested_date.isoformat()}')
			return ResolvedRates(snapshot=cached, actual_date=requested_date, requested_date=requested_date)

		snapshot = await self._try_fetch(requested_date)
		if snapshot is not None:
			self.store.put(requested_date, snapshot)
			return ResolvedRates(snapshot=snapshot, actual_date=requested_date, requested_date=requested_date)

		for offset in range(1, self.max_lookback_days + 1):
			check_date = requested_date - timedelta(days=offset)

			cached = self.store.get(check_date)
			if cached is not None:
				logger.info(
					f'Using cached rates for {check_date.isoformat()} instead of {requested_date.isoformat()}'
				)
				return ResolvedRates(snapshot=cached, actual_date=check_date, requested_date=requested_date)

			snapshot = await self._try_fetch(check_date)
			if snapshot is not None:
				logger.info(
					f'Found rates for {check_date.isoformat()} instead of {requested_date.isoformat()}'
				)
				self.store.put(check_date, snapshot)
				return ResolvedRates(snapshot=snapshot, actual_date=check_date, requested_date=requested_date)

		logger.warning(
			f'No rates found for {requested_date.isoformat()} '
			f'or the {self.max_lookback_days} days before it'
		)
		return ResolvedRates(snapshot=None, actual_date=requested_date, requested_date=requested_date)

	async def _try_fetch(self, target_date: date) -> RateSnapshot | None:
		try:
			snapshot = await self.provider.fetch_snapshot(target_date)
		except Exception as e:
			logger.error(f'Provider {self.provider.name} failed for {target_date.isoformat()}: {e}')
			return None

		if snapshot.date != target_date:
			# Genuine data for another day; keep it under its own date
			logger.info(
				f'Response for {target_date.isoformat()} contains rates for {snapshot.date.isoformat()}'
			)
			self.store.put(snapshot.date, snapshot)
			return None

		return snapshot

	def clear(self) -> None:
		self.store.clear()

	def list_dates_descending(self) -> list[date]:
		return self.store.list_dates_descending()
