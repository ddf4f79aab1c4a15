"""FastMCP server exposing artifact version history as MCP tools.

Run via::

    protoforge-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http protoforge-mcp    # streamable HTTP on port 9000

Lets an assistant inspect an artifact's history, record new generations
and undo changes the same way the REST API does.  Settings are loaded from
environment variables and ``.env`` file; see ``.env.example``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from protoforge import __version__
from protoforge.models.artifact import Version
from protoforge.models.errors import ProtoforgeError
from protoforge.service.container import ServiceContainer
from protoforge.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("protoforge.mcp")

mcp = FastMCP("Protoforge")
_container: ServiceContainer | None = None


def _services() -> ServiceContainer:
    if _container is None:
        raise ToolError("Service container not initialised")
    return _container


def _uuid(value: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ToolError(f"Invalid {label}: '{value}'") from exc


def _format_version(version: Version, *, with_content: bool = False) -> str:
    line = (
        f"v{version.version_number}  id={version.id}  "
        f"created_at={version.created_at.isoformat()}  "
        f"instructions={version.instructions or '-'}"
    )
    if with_content:
        line += f"\n\n{version.content}"
    return line


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

VERSIONING_REFERENCE = """\
# Protoforge version model

- Every artifact has an append-only list of versions numbered 1, 2, 3, ...
- Versions are never edited or deleted.
- Reverting to version N appends a NEW version whose content is a copy of
  version N, with instructions "Reverted to version N".  The number of the
  new version is one more than the highest existing number.
- Reverting to a chat message selects the earliest version created after
  that message.  If no version is newer than the message, the oldest
  version is used.
- The artifact's current version is always the newest one.
"""


@mcp.resource("protoforge://versioning")
def versioning_reference() -> str:
    """How versions, reverts and message reverts behave."""
    return VERSIONING_REFERENCE


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
async def list_versions(artifact_id: str) -> str:
    """List an artifact's versions, newest first.

    Args:
        artifact_id: UUID of the artifact.
    """
    c = _services()
    aid = _uuid(artifact_id, "artifact_id")
    try:
        artifact = await c.versions.require_artifact(aid)
        versions = await c.versions.list_versions(aid)
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    if not versions:
        return "No versions recorded."
    lines = [f"Artifact '{artifact.name}' (current version {artifact.current_version})"]
    lines.extend(_format_version(v) for v in versions)
    return "\n".join(lines)


@mcp.tool
async def get_version(artifact_id: str, version_number: int) -> str:
    """Show one version including its content.

    Args:
        artifact_id: UUID of the artifact.
        version_number: The version number to show.
    """
    c = _services()
    try:
        version = await c.versions.get_version(_uuid(artifact_id, "artifact_id"), version_number)
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    return _format_version(version, with_content=True)


@mcp.tool
async def revert_to_version(artifact_id: str, version_number: int) -> str:
    """Restore an earlier version by appending a copy of it as the newest version.

    Args:
        artifact_id: UUID of the artifact.
        version_number: The version whose content should become current again.
    """
    c = _services()
    try:
        version = await c.reverter.revert_to_version(
            _uuid(artifact_id, "artifact_id"), version_number
        )
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    return f"Reverted.  New current version:\n{_format_version(version)}"


@mcp.tool
async def revert_to_message(artifact_id: str, message_id: str) -> str:
    """Undo back to the version correlated with a chat message.

    Args:
        artifact_id: UUID of the artifact.
        message_id: UUID of the conversation message.
    """
    c = _services()
    try:
        version = await c.correlator.revert_to_message_version(
            _uuid(artifact_id, "artifact_id"), _uuid(message_id, "message_id")
        )
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    return f"Reverted.  New current version:\n{_format_version(version)}"


@mcp.tool
async def record_generation(artifact_id: str, content: str, instructions: str | None = None) -> str:
    """Record newly generated content as the next version.

    Args:
        artifact_id: UUID of the artifact.
        content: The full generated markup or code.
        instructions: Optional changelog note.
    """
    c = _services()
    try:
        version = await c.artifacts.record_generation(
            _uuid(artifact_id, "artifact_id"), content, instructions
        )
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    return f"Recorded.\n{_format_version(version)}"


@mcp.tool
async def list_messages(artifact_id: str) -> str:
    """List the chat history for an artifact, oldest first.

    Args:
        artifact_id: UUID of the artifact.
    """
    c = _services()
    try:
        messages = await c.conversation.list_messages(_uuid(artifact_id, "artifact_id"))
    except ProtoforgeError as exc:
        raise ToolError(str(exc)) from exc
    if not messages:
        return "No messages."
    return "\n".join(
        f"{m.created_at.isoformat()}  id={m.id}  {'[system] ' if m.is_system else ''}{m.message}"
        for m in messages
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "Protoforge MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    global _container  # noqa: PLW0603
    _container = ServiceContainer.in_memory(settings)

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
