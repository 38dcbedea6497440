"""
Result cache for grid pages.

Each executed page is stored in a Django cache under a key derived from the grid id,
the page size and the canonical query string of the request, so any change to a
filter value, the ordering or the page number gives a different key. Entries expire
after DATAGRID_CACHE_TIMEOUT seconds (one hour by default); there is no sliding expiry.

Point DATAGRID_CACHE_ALIAS at a FileBasedCache to keep pages across restarts and share
them between processes on one host. Errors raised by the backend never fail a
request: they are logged and the page is computed directly.
"""

import hashlib
import logging

from django.core.cache import caches

from .utils import (
    canonical_query_string,
    get_cache_alias,
    get_cache_prefix,
    get_cache_timeout,
    get_force_refresh,
)

logger = logging.getLogger(__name__)

_MISSING = object()


def make_key(grid_id, params, page_size=None, prefix=None):
    """
    Build the cache key for one grid request. The query string is hashed so the key
    stays short enough for every backend.
    """
    prefix = prefix or get_cache_prefix()
    query = canonical_query_string(params)
    if page_size is not None:
        query = f"{query}#{page_size}"
    digest = hashlib.sha256(query.encode("utf-8")).hexdigest()
    return f"{prefix}:{grid_id}:{digest}"


class ResultCache:
    def __init__(self, alias=None, timeout=None, force_refresh=None):
        self.alias = alias or get_cache_alias()
        self.timeout = get_cache_timeout() if timeout is None else timeout
        if force_refresh is None:
            force_refresh = get_force_refresh()
        self.force_refresh = force_refresh

    @property
    def backend(self):
        return caches[self.alias]

    def get_or_compute(self, key, compute, timeout=None):
        """
        Return the cached value for key, or call compute(), store and return its result.
        """
        timeout = self.timeout if timeout is None else timeout
        if self.force_refresh:
            self._delete(key)
        value = self._get(key)
        if value is not _MISSING:
            logger.debug("Cache hit %s", key)
            return value
        logger.debug("Cache miss %s", key)
        value = compute()
        self._set(key, value, timeout)
        return value

    def _get(self, key):
        try:
            return self.backend.get(key, _MISSING)
        except Exception:
            logger.exception("Data grid cache read failed for key '%s'", key)
            return _MISSING

    def _set(self, key, value, timeout):
        try:
            self.backend.set(key, value, timeout)
        except Exception:
            logger.exception("Data grid cache write failed for key '%s'", key)

    def _delete(self, key):
        try:
            self.backend.delete(key)
        except Exception:
            logger.exception("Data grid cache delete failed for key '%s'", key)
