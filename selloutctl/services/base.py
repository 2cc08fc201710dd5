"""Base service with common methods for all sellout services."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from selloutctl.core.client import SelloutClient


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, client: "SelloutClient") -> None:
        """Initialize service with sellout client.

        Args:
            client: SelloutClient instance
        """
        self.client = client

    async def _get(self, path: str, **kwargs: Any) -> Any:
        """Execute GET request and return JSON data.

        Args:
            path: API endpoint path
            **kwargs: Additional request parameters

        Returns:
            Parsed JSON response data
        """
        return await self.client.get_json(path, **kwargs)

    def _build_params(self, **params: Any) -> dict[str, Any]:
        """Drop unset query parameters.

        Args:
            **params: Candidate query parameters

        Returns:
            Parameters whose value is not None or empty
        """
        return {k: v for k, v in params.items() if v is not None and v != ""}
