"""Bridge to an MCP resource server spawned as a stdio subprocess."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from mcp import ClientSession, StdioServerParameters, types
from mcp.client.stdio import stdio_client
from pydantic import AnyUrl

from chatbridge.config import Settings
from chatbridge.schemas import ResourceContent, ResourceInfo

logger = logging.getLogger(__name__)


class ResourceBridgeError(Exception):
    """Raised when the MCP resource server cannot serve a request."""

    pass


class ResourceNotFoundError(ResourceBridgeError):
    """Raised when a resource read returns no content."""

    pass


class ResourceBridge:
    """Lists and reads resources from an MCP server over stdio.

    Each operation spawns the server, initializes a client session, performs a
    single request and tears the subprocess down again.
    """

    def __init__(
        self,
        command: str,
        args: list[str] | None = None,
        root: Path | str | None = None,
        env: dict[str, str] | None = None,
    ):
        """Initialize the bridge.

        Args:
            command: Executable that starts the MCP server (e.g. ``npx``)
            args: Arguments for the command
            root: Directory served by the server; also used to resolve relative paths
            env: Optional environment for the subprocess
        """
        self.command = command
        self.args = list(args or [])
        self.root = Path(root).resolve() if root else Path.cwd()
        self.env = env

    @classmethod
    def from_settings(cls, settings: Settings) -> ResourceBridge:
        """Build a bridge serving ``settings.MCP_ROOT``."""
        root = Path(settings.MCP_ROOT).resolve()
        return cls(
            command=settings.MCP_COMMAND,
            args=[*settings.MCP_ARGS, str(root)],
            root=root,
        )

    def server_parameters(self) -> StdioServerParameters:
        return StdioServerParameters(command=self.command, args=self.args, env=self.env)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[ClientSession]:
        """Open an initialized client session; the subprocess is closed on exit."""
        async with stdio_client(self.server_parameters()) as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                await session.initialize()
                logger.info(f"Connected to MCP server: {self.command} {' '.join(self.args)}")
                yield session

    def file_uri(self, path: str | Path) -> str:
        """Return the ``file://`` URI for a path, resolving it against the root."""
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = self.root / file_path
        return f"file://{file_path.resolve()}"

    async def list_resources(self) -> list[ResourceInfo]:
        """List resources advertised by the server."""
        try:
            async with self.session() as session:
                result = await session.list_resources()

            return [
                ResourceInfo(
                    uri=str(resource.uri),
                    name=resource.name,
                    description=resource.description,
                    mime_type=resource.mimeType,
                )
                for resource in result.resources
            ]
        except Exception as e:
            raise ResourceBridgeError(f"Failed to list resources: {e}") from e

    async def read_resource(self, uri: str) -> ResourceContent:
        """Read a resource and return its first content entry.

        Raises:
            ResourceNotFoundError: The server returned no content for the URI
            ResourceBridgeError: The server could not be started or the read failed
        """
        try:
            async with self.session() as session:
                result = await session.read_resource(AnyUrl(uri))

            if not result.contents:
                raise ResourceNotFoundError(f"No content returned for {uri}")

            return _to_resource_content(result.contents[0])
        except ResourceBridgeError:
            raise
        except Exception as e:
            raise ResourceBridgeError(f"Failed to read {uri}: {e}") from e

    async def read_file_text(self, path: str | Path) -> str:
        """Read a file through the server and return its text.

        Returns an empty string when the file is binary or cannot be read.
        """
        try:
            uri = self.file_uri(path)
            content = await self.read_resource(uri)

            if content.is_binary:
                logger.warning(
                    f"Skipping binary resource {uri} ({content.mime_type}, {len(content.blob or '')} base64 chars)"
                )
                return ""

            return content.text or ""
        except Exception as e:
            logger.error(f"Error calling MCP server: {e}")
            return ""


def _to_resource_content(entry: types.TextResourceContents | types.BlobResourceContents) -> ResourceContent:
    """Convert an MCP content entry into a ResourceContent."""
    if isinstance(entry, types.TextResourceContents):
        return ResourceContent(uri=str(entry.uri), mime_type=entry.mimeType, text=entry.text)
    return ResourceContent(uri=str(entry.uri), mime_type=entry.mimeType, blob=entry.blob)
