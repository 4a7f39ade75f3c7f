"""Checkvist MCP server and task tree views."""

from checkvist_mcp.api import CheckvistApi
from checkvist_mcp.core.tree.index import TreeIndex
from checkvist_mcp.core.views import ChecklistViews
from checkvist_mcp.errors import CheckvistError, InvalidPageError, RemoteError, TaskNotFoundError
from checkvist_mcp.protocols import ApiProtocol

__all__ = [
    "ApiProtocol",
    "CheckvistApi",
    "CheckvistError",
    "ChecklistViews",
    "InvalidPageError",
    "RemoteError",
    "TaskNotFoundError",
    "TreeIndex",
]
