"""
Local file-based cache repository.
Uses one JSON file per cache key instead of MongoDB.
"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any
from pathlib import Path

from natureup.core.logger import logs
import logging


class LocalCacheRepository:
    """Cache repository storing {cache_key, value, expires_at} records in local JSON files."""

    def __init__(self, cache_dir: str = "data/cache"):
        """Initialize local storage directory."""
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        logs.log(logging.INFO, f"Local cache repository initialized at {self.cache_dir}")

    def _get_cache_file(self, cache_key: str) -> Path:
        """Get the file path for cached data."""
        # Sanitize cache key for filename
        safe_key = cache_key.replace(":", "_").replace("/", "_")
        return self.cache_dir / f"{safe_key}.json"

    async def get(self, key: str) -> Any | None:
        """Get a cached value if it has not expired. Expired files are kept."""
        try:
            cache_file = self._get_cache_file(key)

            if not cache_file.exists():
                return None

            with open(cache_file, 'r') as f:
                cached = json.load(f)

            expires_at = datetime.fromisoformat(cached["expires_at"])
            if datetime.now(timezone.utc) >= expires_at:
                return None

            return cached["value"]
        except Exception as e:
            logs.log(logging.WARNING, f"Failed to read cache {key}: {str(e)}")
            return None

    async def set(self, key: str, value: Any, ttl_minutes: int) -> bool:
        """Write a value, overwriting any previous entry for the key."""
        try:
            cache_file = self._get_cache_file(key)
            now = datetime.now(timezone.utc)

            cached = {
                "cache_key": key,
                "value": value,
                "expires_at": (now + timedelta(minutes=ttl_minutes)).isoformat(),
                "created_at": now.isoformat()
            }

            with open(cache_file, 'w') as f:
                json.dump(cached, f, indent=2)

            return True
        except Exception as e:
            logs.log(logging.WARNING, f"Failed to write cache {key}: {str(e)}")
            return False
