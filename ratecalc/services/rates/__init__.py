from .base import RateProvider
from .providers import ExternalHTTPRateProvider, StaticRateProvider, make_rate_provider
from .cache_service import RateCacheService, FetchTicket, build_rate_cache_service

__all__ = [
    "RateProvider",
    "ExternalHTTPRateProvider",
    "StaticRateProvider",
    "make_rate_provider",
    "RateCacheService",
    "FetchTicket",
    "build_rate_cache_service",
]
