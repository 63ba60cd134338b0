from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_conversion_service, get_rate_resolver
from api.schemas import (
	CachedDatesResponse,
	ConversionRequest,
	ConversionResponse,
	CurrencyListResponse,
	RateEntryResponse,
	RatesResponse,
)
from application.services import ConversionService, RateResolver

router = APIRouter(prefix='/api', tags=['rates'])

DateQuery = Annotated[date | None, Query(alias='date', description='Defaults to today; future dates use today')]
CurrencyCode = Annotated[str, Path(min_length=3, max_length=3)]


@router.get(
	'/rates',
	response_model=RatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get all rates for a date, falling back to earlier days',
)
async def get_rates(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	on_date: DateQuery = None,
) -> RatesResponse:
	resolved = await service.get_rates(on_date or date.today())
	return RatesResponse.from_snapshot(resolved.snapshot, resolved.requested_date)


@router.get(
	'/currencies',
	response_model=CurrencyListResponse,
	status_code=status.HTTP_200_OK,
	summary='List currencies available for conversion',
)
async def list_currencies(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	on_date: DateQuery = None,
) -> CurrencyListResponse:
	entries, rates_date = await service.list_currencies(on_date or date.today())
	return CurrencyListResponse(
		rates_date=rates_date,
		currencies=[RateEntryResponse.from_entry(e) for e in entries],
	)


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	amount: Annotated[Decimal, Path(gt=0)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	on_date: DateQuery = None,
) -> ConversionResponse:
	result = await service.convert(
		amount, from_currency.upper(), to_currency.upper(), on_date or date.today()
	)
	return ConversionResponse.from_result(result)


@router.post(
	'/convert',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency_body(
	request: ConversionRequest,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(
		request.amount, request.from_currency, request.to_currency, request.on_date or date.today()
	)
	return ConversionResponse.from_result(result)


@router.get(
	'/cache/dates',
	response_model=CachedDatesResponse,
	status_code=status.HTTP_200_OK,
	summary='List dates held in the rate cache',
)
async def list_cached_dates(
	resolver: Annotated[RateResolver, Depends(get_rate_resolver)],
) -> CachedDatesResponse:
	return CachedDatesResponse(dates=resolver.list_dates_descending())


@router.delete(
	'/cache',
	status_code=status.HTTP_204_NO_CONTENT,
	summary='Clear the rate cache',
)
async def clear_cache(
	resolver: Annotated[RateResolver, Depends(get_rate_resolver)],
) -> None:
	resolver.clear()
