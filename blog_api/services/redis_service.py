# blog_api/services/redis_service.py
from functools import lru_cache
from typing import Optional
from redis.asyncio import Redis
from blog_api.config import settings

class RedisService:
    def __init__(self, url: Optional[str] = None):
        self.redis: Redis = Redis.from_url(url or settings.redis_url, decode_responses=True)

    async def setex(self, key: str, expire: int, value: str):
        """Set a key that expires after ``expire`` seconds"""
        await self.redis.setex(name=key, time=expire, value=value)

    async def get(self, key: str):
        """Get the value of a key"""
        return await self.redis.get(key)

    async def close(self):
        """Close the Redis connection"""
        await self.redis.aclose()

@lru_cache()
def get_redis_service() -> RedisService:
    """Dependency returning the shared Redis client"""
    return RedisService()
