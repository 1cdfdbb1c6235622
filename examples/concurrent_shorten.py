"""Shortening many URLs concurrently.

shorten_all() consumes its input lazily and keeps at most max_concurrent
requests in flight, so it works just as well on a file with millions of
lines as on a short list.
"""

from pathlib import Path

from bitcli import Ordering, Shortener, load_config
from bitcli.config import default_config_file
from bitcli.sources import read_urls


shortener = Shortener.from_config(load_config(default_config_file()))

try:
    with Path("urls.txt").open() as lines:
        # Completion order: each outcome carries its input URL
        for outcome in shortener.shorten_all(
            read_urls(lines), ordering=Ordering.UNORDERED, max_concurrent=8
        ):
            if outcome.ok:
                print(f"{outcome.long_url} {outcome.bitlink}")
            else:
                print(f"{outcome.long_url} failed: {outcome.error}")
finally:
    shortener.close()
