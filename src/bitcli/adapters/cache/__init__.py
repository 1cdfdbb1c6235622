"""Cache adapters for bitcli."""

from bitcli.adapters.cache.sqlite_cache import BitlinkCache


__all__ = ["BitlinkCache"]
