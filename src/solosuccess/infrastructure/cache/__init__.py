from .redis import RedisManager, get_redis_manager, close_redis

__all__ = ["RedisManager", "get_redis_manager", "close_redis"]
