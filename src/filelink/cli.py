from __future__ import annotations

import sys
import time
from typing import List, Optional

import typer
from typer import Argument, Option

from .config.loader import load_config
from .config.models import FilelinkConfig
from .core.errors import FilelinkError, get_exit_code
from .library import Library
from .observability.logging import get_logger, log_config_fingerprint, log_timing, set_verbose
from .observability.tracing import enable_tracing
from .render.env import LAST_MODIFIED_DISABLED, RenderEnv
from .render.file_link import render_file_link
from .render.policy import OpenFileGate, import_provider, set_gate
from .resources.base import DEFAULT_DOMAIN, SEPARATOR

app = typer.Typer(
    name="filelink",
    help="filelink - render book file references as HTML links",
    no_args_is_help=True,
    add_completion=False,
)


def _setup(config: Optional[str], sets: Optional[List[str]], verbose: bool, tracing: bool) -> FilelinkConfig:
    set_verbose(verbose)
    cfg = load_config(config, set_overrides=sets)
    log_config_fingerprint(cfg.model_dump())
    if tracing or (cfg.experimental and cfg.experimental.observability_otel):
        enable_tracing("filelink-cli")
    module = cfg.render.open_file_module
    set_gate(OpenFileGate(lambda: import_provider(module)))
    return cfg


def _fail(exc: Exception) -> None:
    code = get_exit_code(exc) if isinstance(exc, FilelinkError) else 1
    get_logger().error("Command failed", error=str(exc), exit_code=code)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code)


@app.command("render")
def render(
    path: str = Argument(..., help="Resource path within the book, e.g. /docs/report.pdf"),
    book: str = Option(SEPARATOR, "--book", help="Book path"),
    domain: str = Option(DEFAULT_DOMAIN, "--domain", help="Book domain"),
    element_id: Optional[str] = Option(None, "--id", help="Element id"),
    body: Optional[str] = Option(None, "--body", help="Markup to use instead of the filename"),
    exporting: bool = Option(False, "--exporting", help="Render as for a static export"),
    no_last_modified: bool = Option(False, "--no-last-modified", help="Do not tag URLs with last-modified times"),
    config: Optional[str] = Option(None, "-c", "--config", help="Path to filelink config file"),
    sets: Optional[List[str]] = Option(None, "--set", help="Override config values: key.path=value"),
    verbose: bool = Option(False, "-v", "--verbose", help="Enable verbose output"),
    tracing: bool = Option(False, "--tracing", help="Enable OpenTelemetry tracing"),
) -> None:
    """Print the HTML link for a file reference."""
    try:
        cfg = _setup(config, sets, verbose, tracing)
        library = Library.from_config(cfg)
        element = library.file(path, book=book, domain=domain, id=element_id, body=body)
        headers = {}
        if no_last_modified:
            headers[cfg.render.last_modified_header] = LAST_MODIFIED_DISABLED
        env = RenderEnv.from_config(cfg.render, headers=headers)
        if exporting:
            env.exporting = True
        start = time.perf_counter()
        link = render_file_link(element, env, sys.stdout)
        typer.echo("")
        log_timing("render", (time.perf_counter() - start) * 1000, mode=link.mode.value)
    except (FilelinkError, OSError) as exc:
        _fail(exc)


@app.command("check")
def check(
    path: str = Argument(..., help="Resource path within the book"),
    book: str = Option(SEPARATOR, "--book", help="Book path"),
    domain: str = Option(DEFAULT_DOMAIN, "--domain", help="Book domain"),
    config: Optional[str] = Option(None, "-c", "--config", help="Path to filelink config file"),
    sets: Optional[List[str]] = Option(None, "--set", help="Override config values: key.path=value"),
    verbose: bool = Option(False, "-v", "--verbose", help="Enable verbose output"),
) -> None:
    """Validate a file reference without producing output."""
    try:
        cfg = _setup(config, sets, verbose, False)
        element = Library.from_config(cfg).file(path, book=book, domain=domain)
        with get_logger().operation("check", resource=str(element.resource[1])):
            render_file_link(element, RenderEnv.from_config(cfg.render))
    except (FilelinkError, OSError) as exc:
        _fail(exc)
    typer.echo(f"ok {domain}:{book} {path}")


def main() -> None:
    """Main entry point for the filelink CLI."""
    app()


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = Option(False, "--version", help="Show version and exit"),
) -> None:
    """filelink CLI."""
    if version:
        import importlib.metadata as importlib_metadata

        try:
            version_str = importlib_metadata.version("filelink")
        except importlib_metadata.PackageNotFoundError:
            version_str = "0.0.0+local"
        typer.echo(version_str)
        raise typer.Exit(0)


if __name__ == "__main__":
    main()
