from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	CBR_BASE_URL: str = 'https://www.cbr-xml-daily.ru/'
	REQUEST_TIMEOUT: float = 10.0

	# Resolver
	RATE_CACHE_MAX_SIZE: int = 30
	MAX_LOOKBACK_DAYS: int = 7

	# Application
	APP_NAME: str = 'CBR Rate Resolver API'
	DEBUG: bool = True
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
