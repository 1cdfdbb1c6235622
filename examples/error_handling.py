"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from bitcli import (
    BitcliError,
    BitlyClient,
    OfflineError,
    ProtocolViolationError,
    RemoteRejectedError,
    Shortener,
    UnresolvedGroupError,
)


shortener = Shortener(BitlyClient(api_token="YOUR_API_TOKEN"), None)


# Pattern 1: Handle rejections from the service
def shorten_or_explain(url: str) -> str | None:
    """Shorten a URL, printing the service's explanation on failure."""
    try:
        return str(shortener.shorten(url))
    except RemoteRejectedError as e:
        # envelope holds the decoded error body
        print(f"Bitly said {e.envelope.message} (HTTP {e.status_code})")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 2: Handle a missing group
def shorten_in_group(url: str) -> str | None:
    """Without a configured group, an inactive account cannot shorten."""
    try:
        return str(shortener.shorten(url))
    except UnresolvedGroupError as e:
        print(f"Cannot pick a group: {e.reason}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: Catch all recoverable errors
def shorten_safely(url: str) -> str | None:
    """Any per-URL failure is a BitcliError."""
    try:
        return str(shortener.shorten(url))
    except OfflineError:
        print("Not cached, and offline mode forbids API requests")
        return None
    except BitcliError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None


# Batch runs report recoverable errors as failed outcomes instead of raising
for outcome in shortener.shorten_all(["https://example.com", "not a url"]):
    if not outcome.ok:
        print(f"{outcome.long_url}: {outcome.error}")


# ProtocolViolationError is not a BitcliError: the API broke its contract,
# which is a bug to report rather than a condition to handle
try:
    shorten_safely("https://example.com")
except ProtocolViolationError as e:
    print(f"Unexpected API behaviour: {e}")
    raise
finally:
    shortener.close()
