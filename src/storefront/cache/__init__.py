"""
Optional pass-through cache for catalog reads.
"""

from .redis_cache import RedisCache, NullCache, get_cache, reset_cache, product_key

__all__ = ["RedisCache", "NullCache", "get_cache", "reset_cache", "product_key"]
