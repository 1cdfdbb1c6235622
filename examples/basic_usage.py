"""Basic shortening example.

This example shows the simplest usage pattern: create a Bitly client and a
local cache, wire them into a Shortener, and shorten a URL. Asking again for
the same URL is answered from the cache without an API request.
"""

from bitcli import BitlinkCache, BitlyClient, Shortener


# Option 1: Manual wiring (full control over adapters)
# cache_dir=None uses the platform cache directory, "" disables caching
shortener = Shortener(
    BitlyClient(api_token="YOUR_API_TOKEN"),
    BitlinkCache.open(BitlinkCache.DEFAULT_NAME, cache_dir="./cache"),
    domain="bit.ly",
)

# Option 2: From the config file the CLI uses (recommended for scripts)
# from bitcli import load_config
# from bitcli.config import default_config_file
# shortener = Shortener.from_config(load_config(default_config_file()))

try:
    link = shortener.shorten("https://example.com/some/very/long/path")
    print(f"Short link: {link}")

    # Served from the local cache
    again = shortener.shorten("https://example.com/some/very/long/path")
    assert again == link
finally:
    shortener.close()
