from .requests import ConversionRequest
from .responses import (
	CachedDatesResponse,
	ConversionResponse,
	CurrencyListResponse,
	RateEntryResponse,
	RatesResponse,
)

__all__ = [
	'CachedDatesResponse',
	'ConversionRequest',
	'ConversionResponse',
	'CurrencyListResponse',
	'RateEntryResponse',
	'RatesResponse',
]
