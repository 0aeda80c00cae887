"""
Persistent cache of discovered servers.

The cache remembers which server identifiers exist in the registry so
that later runs can skip the directory scan. Reads fail soft: any problem
with the file is treated as a cache miss. Writes go to a temporary file
that is atomically renamed over the final path.
"""

import json
import os
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from pydantic import ValidationError

from lsp_auto_setup.core.models import CacheRecord, ClearCacheResult
from lsp_auto_setup.utils.config import CacheConfig
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)

TEMP_SUFFIX = ".tmp"


class CacheStore:
    """Reads and writes the server cache file."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize cache store.

        Args:
            clock: Source of the current Unix time
        """
        self._clock = clock

    def read(self, config: CacheConfig) -> Optional[CacheRecord]:
        """
        Read the cached server list.

        Args:
            config: Cache configuration

        Returns:
            The cached record, or None if caching is disabled or the cache
            is missing, unreadable, malformed or expired
        """
        if not config.enable:
            return None

        cache_file = config.get_cache_file()
        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError):
            logger.debug(f"No readable cache at {cache_file}")
            return None

        try:
            record = CacheRecord.model_validate(json.loads(content))
        except (ValueError, TypeError, ValidationError):
            logger.debug(f"Ignoring malformed cache at {cache_file}")
            return None

        if record.is_expired(config.ttl, self._clock()):
            logger.debug("Cache expired")
            return None

        logger.debug(f"Cache hit with {len(record.servers)} servers")
        return record

    def write(self, servers: Sequence[str], config: CacheConfig) -> bool:
        """
        Write the server list to the cache.

        Args:
            servers: Identifiers to cache, in discovery order
            config: Cache configuration

        Returns:
            True if the servers were written to the cache
        """
        if not config.enable:
            return False

        cache_dir = config.get_cache_dir()
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create cache directory: {e}")
            return False

        final_path = config.get_cache_file()
        temp_path = final_path.with_name(final_path.name + TEMP_SUFFIX)

        try:
            f = open(temp_path, "w", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to open cache file for writing: {e}")
            return False

        try:
            with f:
                f.write(json.dumps({
                    "timestamp": int(self._clock()),
                    "servers": list(servers),
                }))
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to encode cache data: {e}")
            _remove_quietly(temp_path)
            return False

        try:
            os.replace(temp_path, final_path)
        except OSError as e:
            logger.warning(f"Failed to commit cache file: {e}")
            _remove_quietly(temp_path)
            return False

        logger.debug(f"Cached {len(servers)} servers in {final_path}")
        return True

    def clear(self, config: CacheConfig) -> ClearCacheResult:
        """
        Delete the cache file.

        Args:
            config: Cache configuration

        Returns:
            Whether the cache did not exist, was cleared, or failed to clear
        """
        cache_file = config.get_cache_file()
        if not cache_file.is_file():
            logger.info("Cache does not exist")
            return ClearCacheResult.NOT_FOUND

        try:
            cache_file.unlink()
        except OSError as e:
            logger.error(f"Error while clearing cache: {e}")
            return ClearCacheResult.ERROR

        logger.info("Cache cleared")
        return ClearCacheResult.CLEARED


def _remove_quietly(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not remove {path}: {e}")
