"""CLI for ChatBridge - run the orchestrator and talk to it."""

from __future__ import annotations

import asyncio
import base64
import json
import sys

import click

from chatbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="chatbridge")
def main() -> None:
    """ChatBridge - chat orchestrator with MCP file context.

    Forwards chat messages to a completion service, optionally grounded in
    files served by an MCP resource server.
    """
    pass


@main.command()
@click.option("--port", default=None, type=int, help="Port to run the orchestrator on (defaults to PORT)")
@click.option("--host", default=None, help="Host to bind to (defaults to HOST)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(port: int | None, host: str | None, reload: bool) -> None:
    """Start the ChatBridge HTTP orchestrator."""
    import uvicorn

    from chatbridge.config import get_settings

    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT

    click.echo(f"Starting ChatBridge orchestrator on http://{host}:{port}")
    uvicorn.run(
        "chatbridge.server:app",
        host=host,
        port=port,
        reload=reload,
    )


@main.command()
def resources() -> None:
    """List resources exposed by the MCP server."""
    from chatbridge.config import get_settings
    from chatbridge.resource_bridge import ResourceBridge, ResourceBridgeError

    bridge = ResourceBridge.from_settings(get_settings())
    try:
        items = asyncio.run(bridge.list_resources())
    except ResourceBridgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not items:
        click.echo("No resources advertised by the MCP server.")
        return

    click.echo("Resources:")
    for item in items:
        mime = f" ({item.mime_type})" if item.mime_type else ""
        click.echo(f"  - {item.name}{mime}: {item.uri}")


@main.command()
@click.argument("path")
def read(path: str) -> None:
    """Print a file read through the MCP server.

    \b
    Example:
        chatbridge read notes/today.md
    """
    from chatbridge.config import get_settings
    from chatbridge.resource_bridge import ResourceBridge, ResourceBridgeError

    bridge = ResourceBridge.from_settings(get_settings())
    try:
        content = asyncio.run(bridge.read_resource(bridge.file_uri(path)))
    except ResourceBridgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if content.is_binary:
        try:
            size = f"{len(base64.b64decode(content.blob or ''))} bytes"
        except ValueError:
            size = f"{len(content.blob or '')} base64 chars, undecodable"
        click.echo(f"Binary content ({content.mime_type or 'unknown type'}, {size})")
    else:
        click.echo(content.text or "")


@main.command()
@click.argument("message")
@click.option("--file", "-f", "file_path", default=None, help="File to use as context")
@click.option(
    "--url",
    default=None,
    help="Orchestrator base URL (defaults to http://HOST:PORT)",
)
@click.option("--raw", is_flag=True, help="Output raw JSON instead of the reply text")
def chat(message: str, file_path: str | None, url: str | None, raw: bool) -> None:
    """Send a message to a running orchestrator.

    \b
    Example:
        chatbridge chat "What does this file do?" --file src/app.py
    """
    import httpx

    from chatbridge.config import get_settings

    if url is None:
        settings = get_settings()
        url = f"http://{settings.HOST}:{settings.PORT}"

    payload = {"message": message}
    if file_path:
        payload["file_path"] = file_path

    try:
        with httpx.Client(timeout=120.0) as client:
            response = client.post(f"{url.rstrip('/')}/api/chat", json=payload)
    except httpx.ConnectError:
        click.echo(f"Error: could not connect to orchestrator at {url}", err=True)
        sys.exit(1)

    try:
        data = response.json()
    except ValueError:
        click.echo(
            f"Error ({response.status_code}): orchestrator returned a non-JSON reply: {response.text[:200]}",
            err=True,
        )
        sys.exit(1)

    failed = response.status_code != 200

    if raw:
        click.echo(json.dumps(data, indent=2))
        if failed:
            sys.exit(1)
        return

    if failed:
        error = data.get("error", response.text) if isinstance(data, dict) else response.text
        click.echo(f"Error ({response.status_code}): {error}", err=True)
        sys.exit(1)

    reply = data.get("response") if isinstance(data, dict) else None
    if reply is None:
        reply = ""
    click.echo(reply if isinstance(reply, str) else json.dumps(reply, indent=2))


if __name__ == "__main__":
    main()
