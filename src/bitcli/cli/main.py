"""CLI command for bitcli."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from bitcli.config import APP, Options, default_config_file, load_config
from bitcli.core.exceptions import BitcliError, ConfigurationError
from bitcli.core.models import Ordering, ShortenOutcome
from bitcli.log import configure_logging


logger = logging.getLogger(__name__)

app = typer.Typer(
    name=APP,
    help="Shorten URLs via Bitly, with a local cache of created bitlinks.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from bitcli import __version__

        typer.echo(f"{APP} {__version__}")
        raise typer.Exit()


def _echo_error(prefix: str, error: BitcliError) -> None:
    typer.echo(f"Error: {prefix}{error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)


def _echo_outcome(outcome: ShortenOutcome, ordering: Ordering) -> bool:
    """Print one result line; returns whether the item succeeded."""
    if outcome.bitlink is None:
        assert outcome.error is not None
        _echo_error(f"{outcome.long_url}: ", outcome.error)
        return False

    if ordering is Ordering.UNORDERED:
        typer.echo(f"{outcome.long_url} {outcome.bitlink}")
    else:
        typer.echo(str(outcome.bitlink))
    return True


@app.command()
def shorten(
    urls: list[str] | None = typer.Argument(
        None,
        help="URLs to shorten. If none are given, they are read from stdin, one per line.",
        show_default=False,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        "-c",
        envvar="BITCLI_CONFIG_FILE",
        help="Alternative path to the config file (TOML).",
    ),
    cache_dir: str | None = typer.Option(
        None,
        "--cache-dir",
        envvar="BITCLI_CACHE_DIR",
        help="Alternative path to the cache directory. An empty path disables caching.",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        envvar="BITCLI_NO_CACHE",
        help="Disable the local cache for this invocation (same as an empty --cache-dir).",
    ),
    offline: bool | None = typer.Option(
        None,
        "--offline/--online",
        envvar="BITCLI_OFFLINE",
        help="Never issue API requests, rely on the local cache only.",
        show_default=False,
    ),
    max_concurrent: int | None = typer.Option(
        None,
        "--max-concurrent",
        min=1,
        envvar="BITCLI_MAX_CONCURRENT",
        help="Maximum number of API requests in flight [default: from config, else 16].",
    ),
    ordering: Ordering = typer.Option(
        Ordering.ORDERED,
        "--ordering",
        envvar="BITCLI_ORDERING",
        case_sensitive=False,
        help="ordered: outputs follow the input order. unordered: outputs follow "
        "completion order and are printed next to their input URL.",
    ),
    domain: str | None = typer.Option(
        None,
        "--domain",
        "-d",
        envvar="BITCLI_DOMAIN",
        help="The domain to create bitlinks under.",
    ),
    group_guid: str | None = typer.Option(
        None,
        "--group-guid",
        "-g",
        envvar="BITCLI_GROUP_GUID",
        help="The group GUID to create bitlinks under. Defaults to the config "
        "value, else the authenticated user's default group.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Log more details to stderr (repeat for debug output).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Shorten URLs and print the resulting bitlinks."""
    from bitcli.core.services import Shortener
    from bitcli.sources import stdin_urls

    configure_logging(verbose)

    if no_cache and offline:
        raise typer.BadParameter(
            "--offline cannot be combined with --no-cache", param_hint="'--offline'"
        )

    if urls:
        source = iter(urls)
    else:
        piped = stdin_urls()
        if piped is None:
            raise typer.BadParameter(
                "Provide URLs as arguments or pipe them through stdin.",
                param_hint="'URLS...'",
            )
        source = piped

    options = Options(
        domain=domain,
        group_guid=group_guid,
        cache_dir="" if no_cache else cache_dir,
        offline=offline,
        max_concurrent=max_concurrent,
    )

    try:
        config = load_config(config_file or default_config_file()).override_with(options)
        if config.offline and not config.caching_enabled:
            logger.info("offline mode needs the cache, which is disabled; going online")
            config = config.override_with(Options(offline=False))
    except ConfigurationError as e:
        _echo_error("", e)
        raise typer.Exit(1) from None

    shortener = Shortener.from_config(config)
    failed = 0
    try:
        outcomes = shortener.shorten_all(
            source, ordering=ordering, max_concurrent=config.max_concurrent
        )
        for outcome in outcomes:
            if not _echo_outcome(outcome, ordering):
                failed += 1
    except (OSError, UnicodeDecodeError) as e:
        # Raised by the input stream once earlier items are done
        typer.echo(f"Error: cannot read input: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        shortener.close()

    if failed:
        logger.info("%d URL(s) could not be shortened", failed)
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the CLI."""
    app()
