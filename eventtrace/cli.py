"""Entry-point for the kn-event-trace CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from prometheus_client import start_http_server
from rich.console import Console
from rich.markup import escape

from eventtrace.core.config import resolve_settings
from eventtrace.core.errors import ConfigError, FetchError
from eventtrace.core.logger import configure_logging, get_logger
from eventtrace.domain.models import RenderOptions
from eventtrace.infrastructure.zipkin import ZipkinConnection
from eventtrace.services import Poller, SpanFetcher

app = typer.Typer(
    help="Show CloudEvents flowing through Knative services, from Zipkin traces.",
    no_args_is_help=True,
)
err_console = Console(stderr=True)
logger = get_logger("eventtrace.cli")

EXIT_INTERRUPTED = 130


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


@app.callback()
def main() -> None:
    """Inspect event traces."""


@app.command()
def show(
    follow: bool = typer.Option(False, "--follow", "-f", help="Stream traces."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show all trace data."
    ),
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Show non-CloudEvents traces."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="Zipkin endpoint, overrides configuration."
    ),
    config_map: Optional[Path] = typer.Option(
        None,
        "--config-map",
        help="config-tracing ConfigMap exported as JSON.",
    ),
) -> None:
    """Show traces."""

    configure_logging()
    try:
        config = resolve_settings(endpoint=endpoint, config_map=config_map)
    except ConfigError as exc:
        logger.error("config_invalid", extra={"error": str(exc)})
        raise _fail(exc) from exc

    if config.metrics_port is not None:
        start_http_server(config.metrics_port)
        logger.info("metrics_server_started", extra={"port": config.metrics_port})

    options = RenderOptions(verbose=verbose, include_non_event_spans=show_all)
    with ZipkinConnection.from_settings(config) as connection:
        fetcher = SpanFetcher(connection, options, config.window_boundary)
        poller = Poller(
            fetcher,
            options,
            sink=typer.echo,
            interval=config.poll_interval_seconds,
        )
        try:
            poller.run(follow=follow)
        except FetchError as exc:
            logger.error(
                "poll_failed", extra={"error": str(exc), "service_name": exc.service}
            )
            raise _fail(exc) from exc
        except KeyboardInterrupt:
            raise typer.Exit(code=EXIT_INTERRUPTED)


if __name__ == "__main__":  # pragma: no cover
    app()
