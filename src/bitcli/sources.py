"""Input sources for the shortening pipeline."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


def read_urls(lines: Iterable[str]) -> Iterator[str]:
    """Lazily yield trimmed, non-blank lines.

    No validation happens here: a malformed line is passed through and fails
    as its own item in the pipeline, so it is reported rather than dropped.

    Args:
        lines: Line-delimited input, e.g. a text stream.

    Yields:
        One candidate URL per non-blank line.
    """
    for line in lines:
        url = line.strip()
        if url:
            yield url


def stdin_urls() -> Iterator[str] | None:
    """URLs piped through standard input, or None if stdin is a terminal."""
    stdin = sys.stdin
    if stdin is None or stdin.isatty():
        return None
    return read_urls(stdin)
