# backend/studio_booking/redis_client.py

import redis

from .config import settings

# None when REDIS_URL is not configured: event emission is then skipped
redis_client = (
    redis.Redis.from_url(settings.redis_url, decode_responses=True)
    if settings.redis_url
    else None
)
