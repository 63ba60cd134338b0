import logging
from typing import Annotated

from fastapi import Depends

from application.services import ConversionService, RateResolver
from config.settings import get_settings
from infrastructure.cache.memory_cache import RateStore
from infrastructure.providers import CBRDailyProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	provider: CBRDailyProvider | None = None
	resolver: RateResolver | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.provider = CBRDailyProvider(
		base_url=settings.CBR_BASE_URL,
		timeout=settings.REQUEST_TIMEOUT,
	)
	deps.resolver = RateResolver(
		provider=deps.provider,
		store=RateStore(max_size=settings.RATE_CACHE_MAX_SIZE),
		max_lookback_days=settings.MAX_LOOKBACK_DAYS,
	)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.provider:
		await deps.provider.close()
	deps.provider = None
	deps.resolver = None

	logger.info('Cleanup complete')


def get_rate_resolver() -> RateResolver:
	if deps.resolver is None:
		raise RuntimeError('Rate resolver not initialized')
	return deps.resolver


def get_conversion_service(
	resolver: Annotated[RateResolver, Depends(get_rate_resolver)],
) -> ConversionService:
	return ConversionService(resolver=resolver)
