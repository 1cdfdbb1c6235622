"""Shorten operation implementations for Shortener.

This module contains the per-URL logic that Shortener delegates to.
These are implementation details and should not be used directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bitcli.core.exceptions import UnresolvedGroupError
from bitcli.core.models import ShortenRequest, parse_url


if TYPE_CHECKING:
    from bitcli.core.models import Bitlink
    from bitcli.core.ports import CachePort, RemotePort


logger = logging.getLogger(__name__)


def resolve_group_id(remote: RemotePort, configured: str | None) -> str:
    """Determine the group GUID to create bitlinks under.

    Args:
        remote: Client used to look up the user's default group.
        configured: Group GUID from config or arguments, used verbatim if set.

    Returns:
        The group GUID.

    Raises:
        UnresolvedGroupError: If nothing is configured and the user is inactive.
    """
    if configured:
        return configured

    user = remote.fetch_user()
    if not user.is_active:
        raise UnresolvedGroupError("user is inactive")

    logger.debug("using default group %s of the current user", user.default_group_id)
    return user.default_group_id


def shorten_one(
    long_url: str,
    remote: RemotePort,
    cache: CachePort | None,
    *,
    domain: str | None = None,
    group_id: str | None = None,
) -> Bitlink:
    """Shorten a single URL with cache-aside lookup and population."""
    url = parse_url(long_url)

    # Cache lookup needs the full key, so it waits for the group when unknown
    looked_up = False
    if group_id and cache is not None:
        cached = cache.get(ShortenRequest(url, group_id, domain))
        if cached is not None:
            logger.debug("cache hit for %s", url)
            return cached
        looked_up = True

    request = ShortenRequest(url, resolve_group_id(remote, group_id), domain)

    if cache is not None and not looked_up:
        cached = cache.get(request)
        if cached is not None:
            logger.debug("cache hit for %s", url)
            return cached

    logger.debug("shortening %s", url)
    bitlink = remote.create_shortlink(request)

    if cache is not None and not cache.set(request, bitlink):
        logger.debug("bitlink for %s was already cached", url)

    return bitlink
