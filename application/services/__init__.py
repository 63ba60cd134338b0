from .conversion_service import ConversionService
from .rate_resolver import RateResolver

__all__ = ['ConversionService', 'RateResolver']
