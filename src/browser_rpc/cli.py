"""Command line interface for browser-rpc."""

from __future__ import annotations

import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import httpx
import typer
from rich.console import Console

from .client import BrowserRpcClient, RpcError
from .config import load_config

app = typer.Typer(help="Browser RPC server entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("browser-rpc"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def serve(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Binding address for the RPC server."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", help="Port for the RPC server (defaults to $PORT)."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run browsers in headless mode (or headed)."),
    ] = None,
) -> None:
    """Serve the browser RPC API."""

    overrides: dict[str, Any] = {}
    if host is not None or port is not None:
        overrides.setdefault("server", {})
        if host is not None:
            overrides["server"]["host"] = host
        if port is not None:
            overrides["server"]["port"] = port
    if headless is not None:
        overrides["browser"] = {"headless": headless}

    config = load_config(config_path, env_file=env_file, **overrides)

    import uvicorn

    from .service import create_app

    typer.echo(f"Listening on {config.server.host}:{config.server.port}")
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


@app.command()
def status(
    url: Annotated[
        str,
        typer.Option("--url", help="Base URL of a running RPC server."),
    ] = "http://localhost:8000",
) -> None:
    """Check that a server answers the Health call."""

    console = Console()
    client = BrowserRpcClient(url)
    try:
        body = asyncio.run(client.health())
    except (httpx.HTTPError, RpcError) as exc:
        console.print(f"Unreachable {url}: {exc}", style="red", markup=False)
        raise typer.Exit(code=1) from exc
    console.print(f"Healthy {url}: {body}", style="green", markup=False)


if __name__ == "__main__":
    app()
