from .base import RatesProvider
from .cbr import CBRDailyProvider, parse_snapshot

__all__ = ['RatesProvider', 'CBRDailyProvider', 'parse_snapshot']
