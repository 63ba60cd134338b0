# nosec B101


import json
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from domain.exceptions.currency import ProviderError
from infrastructure.providers.cbr import CBRDailyProvider, parse_snapshot
from tests.fixtures.api_responses import (
    CBR_DAILY_MISSING_VALUTE,
    CBR_DAILY_SUCCESS,
    CBR_DAILY_ZERO_NOMINAL,
    CBR_DAILY_ZERO_VALUE,
)

TODAY = date(2024, 3, 15)


def make_provider(mock_client) -> CBRDailyProvider:
    return CBRDailyProvider(client=mock_client, today=lambda: TODAY)


def ok_response(payload) -> Mock:
    mock_response = Mock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = Mock()
    return mock_response


# ============================================================================
# TEST: URL construction
# ============================================================================

def test_today_uses_latest_path():
    provider = make_provider(AsyncMock(spec=httpx.AsyncClient))

    assert provider.build_path(TODAY) == 'daily_json.js'


def test_past_date_uses_zero_padded_archive_path():
    provider = make_provider(AsyncMock(spec=httpx.AsyncClient))

    assert provider.build_path(date(2024, 2, 5)) == 'archive/2024/02/05/daily_json.js'


@pytest.mark.asyncio
async def test_fetch_snapshot_requests_archive_url():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = ok_response(CBR_DAILY_SUCCESS)
    provider = make_provider(mock_client)

    await provider.fetch_snapshot(date(2024, 3, 9))

    mock_client.get.assert_called_once_with(
        'https://www.cbr-xml-daily.ru/archive/2024/03/09/daily_json.js'
    )


@pytest.mark.asyncio
async def test_custom_base_url_trailing_slash_is_normalized():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = ok_response(CBR_DAILY_SUCCESS)
    provider = CBRDailyProvider(client=mock_client, base_url='http://mirror.local/', today=lambda: TODAY)

    await provider.fetch_snapshot(TODAY)

    mock_client.get.assert_called_once_with('http://mirror.local/daily_json.js')


# ============================================================================
# TEST: Successful parsing
# ============================================================================

@pytest.mark.asyncio
async def test_fetch_snapshot_parses_entries():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = ok_response(CBR_DAILY_SUCCESS)
    provider = make_provider(mock_client)

    snapshot = await provider.fetch_snapshot(TODAY)

    assert snapshot.date == date(2024, 3, 15)
    assert set(snapshot.entries) == {'USD', 'EUR', 'CNY', 'JPY', 'KZT'}

    usd = snapshot.get('USD')
    assert usd.display_name == 'Доллар США'
    assert usd.nominal == 1
    assert usd.value == Decimal('91.6012')
    assert isinstance(usd.value, Decimal)
    assert usd.previous_value == Decimal('91.7125')


def test_parse_snapshot_keeps_source_calendar_date():
    payload = dict(CBR_DAILY_SUCCESS, Date='2024-03-15T00:00:00+03:00')

    snapshot = parse_snapshot(payload)

    # 00:00 Moscow is still the 15th, not 21:00 UTC on the 14th
    assert snapshot.date == date(2024, 3, 15)


def test_parse_snapshot_reads_optional_fields():
    snapshot = parse_snapshot(CBR_DAILY_SUCCESS)

    assert snapshot.previous_date == date(2024, 3, 14)
    assert snapshot.previous_url.endswith('2024/03/14/daily_json.js')
    assert isinstance(snapshot.timestamp, datetime)


def test_parse_snapshot_tolerates_bad_optional_fields():
    payload = dict(CBR_DAILY_SUCCESS, PreviousDate='yesterday', Timestamp='soon')

    snapshot = parse_snapshot(payload)

    assert snapshot.previous_date is None
    assert snapshot.timestamp is None


def test_rate_per_unit_for_nominal_100():
    snapshot = parse_snapshot(CBR_DAILY_SUCCESS)

    assert snapshot.get('JPY').rate_per_unit == Decimal('0.617395')


def test_parsed_entries_are_read_only():
    snapshot = parse_snapshot(CBR_DAILY_SUCCESS)

    with pytest.raises(TypeError):
        snapshot.entries['XXX'] = snapshot.get('USD')


# ============================================================================
# TEST: Failures surface as ProviderError
# ============================================================================

@pytest.mark.asyncio
async def test_http_404_raises_provider_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    request = httpx.Request('GET', 'https://www.cbr-xml-daily.ru/archive/2024/03/10/daily_json.js')
    response = httpx.Response(404, request=request, text='Not found')
    mock_response = Mock()
    mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
        'Not found', request=request, response=response
    )
    mock_client.get.return_value = mock_response
    provider = make_provider(mock_client)

    with pytest.raises(ProviderError) as exc_info:
        await provider.fetch_snapshot(date(2024, 3, 10))

    assert '404' in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_raises_provider_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ReadTimeout('timed out')
    provider = make_provider(mock_client)

    with pytest.raises(ProviderError) as exc_info:
        await provider.fetch_snapshot(TODAY)

    assert 'ReadTimeout' in str(exc_info.value)


@pytest.mark.asyncio
async def test_connection_error_raises_provider_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ConnectError('refused')
    provider = make_provider(mock_client)

    with pytest.raises(ProviderError):
        await provider.fetch_snapshot(TODAY)


@pytest.mark.asyncio
async def test_invalid_json_raises_provider_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_response = Mock()
    mock_response.raise_for_status = Mock()
    mock_response.json.side_effect = json.JSONDecodeError('Expecting value', '<html>', 0)
    mock_client.get.return_value = mock_response
    provider = make_provider(mock_client)

    with pytest.raises(ProviderError) as exc_info:
        await provider.fetch_snapshot(TODAY)

    assert 'parsing error' in str(exc_info.value)


@pytest.mark.asyncio
async def test_non_object_json_raises_provider_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = ok_response(['not', 'an', 'object'])
    provider = make_provider(mock_client)

    with pytest.raises(ProviderError):
        await provider.fetch_snapshot(TODAY)


def test_missing_valute_raises_provider_error():
    with pytest.raises(ProviderError) as exc_info:
        parse_snapshot(CBR_DAILY_MISSING_VALUTE)

    assert 'Malformed' in str(exc_info.value)


def test_zero_nominal_raises_provider_error():
    with pytest.raises(ProviderError):
        parse_snapshot(CBR_DAILY_ZERO_NOMINAL)


def test_zero_value_raises_provider_error():
    with pytest.raises(ProviderError):
        parse_snapshot(CBR_DAILY_ZERO_VALUE)


@pytest.mark.parametrize('nominal', [1.5, 10.0, True, '10', None])
def test_non_integer_nominal_raises_provider_error(nominal):
    payload = {
        'Date': '2024-03-15T11:30:00+03:00',
        'Valute': {'USD': {'CharCode': 'USD', 'Nominal': nominal, 'Name': 'x', 'Value': 91.6, 'Previous': 91.7}},
    }

    with pytest.raises(ProviderError):
        parse_snapshot(payload)


def test_unparseable_value_raises_provider_error():
    payload = {
        'Date': '2024-03-15T11:30:00+03:00',
        'Valute': {'USD': {'CharCode': 'USD', 'Nominal': 1, 'Name': 'x', 'Value': 'abc', 'Previous': 1}},
    }

    with pytest.raises(ProviderError):
        parse_snapshot(payload)


@pytest.mark.asyncio
async def test_close_closes_client():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    provider = make_provider(mock_client)

    await provider.close()

    mock_client.aclose.assert_awaited_once()
