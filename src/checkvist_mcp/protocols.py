"""Protocols for dependency injection."""

from typing import Any, Literal, Protocol, runtime_checkable

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


@runtime_checkable
class ApiProtocol(Protocol):
    """Protocol for Checkvist API clients."""

    def call(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Invoke an API endpoint and return the decoded JSON response."""
        ...
