"""Remote service adapters for bitcli."""

from bitcli.adapters.remote.bitly import BitlyClient


__all__ = ["BitlyClient"]
