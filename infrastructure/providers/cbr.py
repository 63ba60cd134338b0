from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

import httpx

from domain.exceptions.currency import ProviderError
from domain.models.currency import RateEntry, RateSnapshot


class CBRDailyProvider:
	BASE_URL = 'https://www.cbr-xml-daily.ru/'
	LATEST_PATH = 'daily_json.js'

	def __init__(
		self,
		client: httpx.AsyncClient | None = None,
		base_url: str | None = None,
		timeout: float = 10,
		today: Callable[[], date] = date.today,
	):
		self.base_url = (base_url or self.BASE_URL).rstrip('/')
		self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
		self._today = today

	@property
	def name(self) -> str:
		return 'cbr-xml-daily'

	def build_path(self, target_date: date) -> str:
		if target_date == self._today():
			return self.LATEST_PATH
		return f'archive/{target_date:%Y}/{target_date:%m}/{target_date:%d}/{self.LATEST_PATH}'

	async def _request(self, path: str) -> dict:
		url = f'{self.base_url}/{path}'

		try:
			response = await self._client.get(url)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise ProviderError(
				f'CBR HTTP error {e.response.status_code} for {path}'
			) from e
		except httpx.RequestError as e:
			raise ProviderError(f'CBR request failed: {e.__class__.__name__}') from e
		except ValueError as e:
			raise ProviderError(f'CBR response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise ProviderError(f'CBR response for {path} is not a JSON object')
		return data

	async def fetch_snapshot(self, target_date: date) -> RateSnapshot:
		data = await self._request(self.build_path(target_date))
		return parse_snapshot(data)

	async def close(self) -> None:
		await self._client.aclose()


def _parse_date(raw) -> date:
	# Keep the calendar date in the source's own offset; converting to UTC
	# would move Moscow midnight onto the previous day.
	return datetime.fromisoformat(raw).date()


def _parse_nominal(raw) -> int:
	# bool is a subclass of int
	if isinstance(raw, bool) or not isinstance(raw, int):
		raise ValueError(f'Nominal must be an integer, got {raw!r}')
	return raw


def _parse_entry(code: str, raw: dict) -> RateEntry:
	return RateEntry(
		code=raw.get('CharCode') or code,
		display_name=raw.get('Name', ''),
		nominal=_parse_nominal(raw['Nominal']),
		value=Decimal(str(raw['Value'])),
		previous_value=Decimal(str(raw.get('Previous', raw['Value']))),
	)


def parse_snapshot(data: dict) -> RateSnapshot:
	try:
		snapshot_date = _parse_date(data['Date'])
		entries = {}
		for code, raw in data['Valute'].items():
			entry = _parse_entry(code, raw)
			entries[entry.code] = entry
	except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
		raise ProviderError(f'Malformed CBR payload: {e.__class__.__name__}: {e}') from e

	previous_date = None
	if data.get('PreviousDate'):
		try:
			previous_date = _parse_date(data['PreviousDate'])
		except (TypeError, ValueError):
			previous_date = None

	timestamp = None
	if data.get('Timestamp'):
		try:
			timestamp = datetime.fromisoformat(data['Timestamp'])
		except (TypeError, ValueError):
			timestamp = None

	return RateSnapshot(
		date=snapshot_date,
		entries=entries,
		previous_date=previous_date,
		previous_url=data.get('PreviousURL') or None,
		timestamp=timestamp,
	)
