from motor.motor_asyncio import AsyncIOMotorCollection
from datetime import datetime, timedelta, timezone
from typing import Any
import logging

from natureup.core.logger import logs

class CacheRepository:
    """
    Lookaside cache over a MongoDB collection of
    {cache_key, value, expires_at, created_at} documents.
    Cache failures never fail a request: reads degrade to a miss, writes to a no-op.
    """
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def get(self, key: str) -> Any | None:
        """
        Returns the cached value only while it has not expired.
        Expired documents are left in place until the next write overwrites them.
        """
        try:
            doc = await self.collection.find_one({
                "cache_key": key,
                "expires_at": {"$gt": datetime.now(timezone.utc)}
            })
        except Exception as e:
            logs.log(logging.WARNING, f"Cache read failed for {key}: {str(e)}")
            return None

        if not doc:
            return None
        return doc.get("value")

    async def set(self, key: str, value: Any, ttl_minutes: int) -> bool:
        """
        Upserts the value (last writer wins).
        """
        now = datetime.now(timezone.utc)
        try:
            await self.collection.update_one(
                {"cache_key": key},
                {
                    "$set": {
                        "value": value,
                        "expires_at": now + timedelta(minutes=ttl_minutes),
                        "created_at": now
                    }
                },
                upsert=True
            )
            return True
        except Exception as e:
            logs.log(logging.WARNING, f"Cache write failed for {key}: {str(e)}")
            return False
