from datetime import date
from typing import Protocol

from domain.models.currency import RateSnapshot


class RatesProvider(Protocol):
	"""Source of one full rate snapshot per calendar date."""

	@property
	def name(self) -> str: ...

	async def fetch_snapshot(self, target_date: date) -> RateSnapshot:
		"""Return the snapshot the upstream serves for target_date.

		The embedded snapshot date may differ from target_date when the
		upstream falls back server-side. Raises ProviderError on failure.
		"""
		...

	async def close(self) -> None: ...
